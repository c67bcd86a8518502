"""
OpenAI speech-to-text integration.
Sends the whole file in one synchronous request and keeps the plain-text result.
"""

from pathlib import Path, PurePosixPath

import requests

from .errors import TranscriptionError
from .logger_config import STAGE_TRANSCRIBE, stage_logger

logger = stage_logger(__name__, STAGE_TRANSCRIBE)

DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_MODEL = "whisper-1"
TRANSCRIPT_SUFFIX = ".txt"


class Transcriber:
    def __init__(self, api_key: str, transcript_dir: Path, api_base: str = DEFAULT_API_BASE,
                 model: str = DEFAULT_MODEL, timeout: float = 600.0):
        if not api_key:
            raise TranscriptionError("OpenAI API key is required for transcription")

        self.api_key = api_key
        self.transcript_dir = Path(transcript_dir)
        self.endpoint = api_base.rstrip('/') + '/audio/transcriptions'
        self.model = model
        self.timeout = timeout

    def transcript_path(self, file_name: str) -> Path:
        stem = PurePosixPath(file_name.replace("\\", "/")).stem
        return self.transcript_dir / (stem + TRANSCRIPT_SUFFIX)

    def transcribe(self, video_path: Path, file_name: str) -> str:
        """Transcribe video_path, save the text next to the other transcripts and return it."""
        logger.info(f"Transcribing: {file_name}")
        text = self._request_transcription(Path(video_path), file_name)

        transcript_path = self.transcript_path(file_name)
        try:
            # newline='' keeps the file byte-identical to the text logged to the sheet
            with open(transcript_path, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
        except OSError as exc:
            raise TranscriptionError(f"Could not save transcript {transcript_path}: {exc}") from exc

        logger.info(f"Transcript saved to: {transcript_path}\n")
        return text

    def load_transcript(self, file_name: str) -> str:
        transcript_path = self.transcript_path(file_name)
        try:
            with open(transcript_path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except OSError as exc:
            raise TranscriptionError(f"Could not read transcript {transcript_path}: {exc}") from exc

    def _request_transcription(self, video_path: Path, file_name: str) -> str:
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            with open(video_path, 'rb') as f:
                response = requests.post(
                    self.endpoint,
                    headers=headers,
                    data={"model": self.model, "response_format": "json"},
                    files={"file": (file_name, f)},
                    timeout=self.timeout,
                )
        except requests.RequestException as exc:
            raise TranscriptionError(f"Transcription request failed for {file_name}: {exc}") from exc
        except OSError as exc:
            raise TranscriptionError(f"Could not read {video_path}: {exc}") from exc

        if response.status_code != 200:
            raise TranscriptionError(
                f"Transcription failed for {file_name}: HTTP {response.status_code} "
                f"{self._extract_error(response)}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise TranscriptionError(f"Transcription response for {file_name} is not JSON") from exc

        text = data.get('text') if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise TranscriptionError(f"Transcription response for {file_name} has no 'text'")
        return text

    @staticmethod
    def _extract_error(response: requests.Response) -> str:
        try:
            data = response.json()
            message = data.get('error', {}).get('message')
            return message or response.text[:300]
        except (ValueError, AttributeError):
            return response.text[:300]
