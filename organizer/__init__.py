"""
Drive video -> transcript -> Google Sheet organizer

Structure:
    - google_auth.py: Service-account credentials for Drive and Sheets
    - drive_lister.py: List video files in a Drive folder
    - downloader.py: Download new videos into the local video directory
    - transcriber.py: Transcribe a video and save the text locally
    - sheet_logger.py: Append (title, transcript, link) rows to a sheet
    - state.py: Optional per-file stage manifest
    - pipeline.py: Run the stages over a folder listing
"""
