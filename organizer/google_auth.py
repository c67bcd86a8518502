"""Service-account authentication for Google Drive and Sheets."""

from pathlib import Path
from typing import Optional, Sequence

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build

from .errors import AuthError
from .logger_config import STAGE_INFO, stage_logger

logger = stage_logger(__name__, STAGE_INFO)

DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"
SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
DEFAULT_SCOPES = (DRIVE_SCOPE, SHEETS_SCOPE)


class GoogleClients:
    """One authorized handle shared by every remote call in a run.

    The Drive and Sheets services are built on first use and reused after that.
    """

    def __init__(self, credentials):
        self.credentials = credentials
        self._drive = None
        self._sheets = None

    @property
    def drive(self):
        if self._drive is None:
            self._drive = build('drive', 'v3', credentials=self.credentials, cache_discovery=False)
        return self._drive

    @property
    def sheets(self):
        if self._sheets is None:
            self._sheets = build('sheets', 'v4', credentials=self.credentials, cache_discovery=False)
        return self._sheets


class GoogleAuthenticator:
    def __init__(self, key_file, scopes: Optional[Sequence[str]] = None):
        if not key_file:
            raise AuthError("Service account key file path is required for authentication")

        self.key_file = Path(key_file)
        self.scopes = list(scopes or DEFAULT_SCOPES)

    def authenticate(self) -> GoogleClients:
        if not self.key_file.is_file():
            raise AuthError(f"Service account key file not found: {self.key_file}")

        try:
            credentials = service_account.Credentials.from_service_account_file(
                str(self.key_file),
                scopes=self.scopes,
            )
        except (ValueError, OSError, GoogleAuthError) as exc:
            raise AuthError(f"Could not load service account key {self.key_file}: {exc}") from exc

        logger.info(f"Authorized as {getattr(credentials, 'service_account_email', 'service account')}")
        return GoogleClients(credentials)
