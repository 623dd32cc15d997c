from yt_transcribe.main import run

run()
