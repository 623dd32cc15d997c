"""
yt_transcribe

Download a video, extract its audio and transcribe it with the OpenAI API.
"""

__version__ = "1.0.0"
