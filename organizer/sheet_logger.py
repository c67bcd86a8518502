"""Google Sheets row logger"""

from typing import List

from googleapiclient.errors import HttpError

from .errors import SheetLogError
from .logger_config import STAGE_LOG, stage_logger

logger = stage_logger(__name__, STAGE_LOG)

VIEWER_LINK_TEMPLATE = "https://drive.google.com/file/d/{file_id}/view"


def build_viewer_link(file_id: str) -> str:
    return VIEWER_LINK_TEMPLATE.format(file_id=file_id)


class SheetLogger:
    def __init__(self, sheets_service, spreadsheet_id: str, sheet_name: str = "Sheet1"):
        self.sheets = sheets_service
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name

    @property
    def range(self) -> str:
        return f"{self.sheet_name}!A:C"

    def append(self, title: str, transcript: str, file_id: str) -> List[str]:
        """Append one (title, transcript, link) row. Not idempotent: every call adds a row."""
        logger.info("Logging transcript to Google Sheet...")
        link = build_viewer_link(file_id)
        row = [title, transcript, link]

        try:
            self.sheets.spreadsheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=self.range,
                valueInputOption='RAW',
                body={'values': [row]},
            ).execute()
        except (HttpError, OSError) as exc:
            raise SheetLogError(f"Failed to append row for {title}: {exc}") from exc

        logger.info(f"Entry added: {title} | {link}\n")
        return row
