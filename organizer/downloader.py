"""Drive video downloader"""

from pathlib import Path, PurePosixPath
from typing import Optional

from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload
from tqdm import tqdm

from .drive_lister import RemoteVideoRef
from .errors import DownloadError
from .logger_config import STAGE_DOWNLOAD, stage_logger

logger = stage_logger(__name__, STAGE_DOWNLOAD)

DEFAULT_CHUNK_SIZE = 1024 * 1024
# The bar moves one step per chunk, not per byte.
PROGRESS_STEPS = 100


class VideoDownloader:
    def __init__(self, drive_service, video_dir: Path, chunk_size: int = DEFAULT_CHUNK_SIZE,
                 show_progress: bool = True):
        self.drive = drive_service
        self.video_dir = Path(video_dir)
        self.chunk_size = chunk_size
        self.show_progress = show_progress

    def local_path(self, ref: RemoteVideoRef) -> Path:
        # Drive names may contain "/"; only the last component is used so the
        # file always lands directly inside video_dir.
        file_name = PurePosixPath(ref.name.replace("\\", "/")).name
        if file_name in ("", ".", ".."):
            raise DownloadError(f"Drive file {ref.id} has no usable local name: {ref.name!r}")
        return self.video_dir / file_name

    def download(self, ref: RemoteVideoRef, force: bool = False) -> Optional[Path]:
        """
        Stream a Drive file into the video directory.

        Returns None without touching Drive when a file with the same name
        already exists locally, unless force is set. A failed transfer leaves
        whatever was written so far on disk.
        """
        file_path = self.local_path(ref)
        if file_path.exists() and not force:
            logger.debug(f"Local copy exists, skipping: {file_path}")
            return None

        logger.info(f"Downloading: {ref.name}")
        request = self.drive.files().get_media(fileId=ref.id)

        try:
            with open(file_path, 'wb') as fh, tqdm(
                total=PROGRESS_STEPS,
                desc=ref.name,
                unit="chunk",
                leave=False,
                disable=not self.show_progress,
            ) as bar:
                downloader = MediaIoBaseDownload(fh, request, chunksize=self.chunk_size)
                done = False
                while not done:
                    _, done = downloader.next_chunk()
                    bar.update(1)
        except (HttpError, OSError) as exc:
            raise DownloadError(f"Failed to download {ref.name} ({ref.id}): {exc}") from exc

        logger.info(f"Saved to: {file_path}\n")
        return file_path
