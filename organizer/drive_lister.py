"""Drive folder listing"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from .errors import AuthError, ListError

logger = logging.getLogger(__name__)

VIDEO_MIME_TYPE = "video/mp4"
LIST_FIELDS = "nextPageToken, files(id, name)"


@dataclass(frozen=True)
class RemoteVideoRef:
    id: str
    name: str


class DriveLister:
    def __init__(self, drive_service):
        self.drive = drive_service

    @staticmethod
    def build_query(folder_id: str, mime_type: str = VIDEO_MIME_TYPE) -> str:
        return f"'{folder_id}' in parents and mimeType='{mime_type}'"

    def list_videos(self, folder_id: str, mime_type: str = VIDEO_MIME_TYPE) -> List[RemoteVideoRef]:
        """Return every matching file in the order Drive yields them, following pagination."""
        query = self.build_query(folder_id, mime_type)
        videos: List[RemoteVideoRef] = []
        page_token: Optional[str] = None

        while True:
            try:
                response = self.drive.files().list(
                    q=query,
                    fields=LIST_FIELDS,
                    pageToken=page_token,
                ).execute()
            except RefreshError as exc:
                raise AuthError(f"Google rejected the service account credentials: {exc}") from exc
            except (HttpError, OSError) as exc:
                raise ListError(f"Failed to list Drive folder {folder_id}: {exc}") from exc

            for item in response.get('files', []):
                videos.append(RemoteVideoRef(id=item['id'], name=item['name']))

            page_token = response.get('nextPageToken')
            if not page_token:
                break

        logger.debug(f"Drive folder {folder_id} returned {len(videos)} file(s)")
        return videos
