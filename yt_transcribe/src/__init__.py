"""
yt_transcribe.src

Pipeline stages for turning a video URL into a transcript:
- options: command line parsing and request validation
- config: settings loaded from the environment
- downloader: video download using yt-dlp
- audio: speech-optimized audio extraction using ffmpeg
- transcriber: speech-to-text through the OpenAI transcription API
- output: transcript persistence and console preview
"""
