"""Pipeline: list -> (download -> transcribe -> log) per file"""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import Settings
from .downloader import VideoDownloader
from .drive_lister import DriveLister, RemoteVideoRef
from .logger_config import (
    STAGE_DOWNLOAD,
    STAGE_INFO,
    STAGE_SUCCESS,
    stage_logger,
)
from .sheet_logger import SheetLogger
from .state import (
    STAGE_DOWNLOADED,
    STAGE_DOWNLOADING,
    STAGE_LOGGED,
    STAGE_TRANSCRIBED,
    StageManifest,
)
from .transcriber import Transcriber

logger = stage_logger(__name__, STAGE_INFO)
download_log = stage_logger(__name__, STAGE_DOWNLOAD)
success_log = stage_logger(__name__, STAGE_SUCCESS)


@dataclass
class RunSummary:
    listed: int = 0
    skipped: List[str] = field(default_factory=list)
    processed: List[str] = field(default_factory=list)


class Pipeline:
    """
    Processes files strictly in listing order. Any error raised by a stage
    propagates out of run() and the remaining files are left untouched.
    """

    def __init__(self, settings: Settings, lister: DriveLister, downloader: VideoDownloader,
                 transcriber: Transcriber, sheet_logger: SheetLogger,
                 manifest: Optional[StageManifest] = None):
        self.settings = settings
        self.lister = lister
        self.downloader = downloader
        self.transcriber = transcriber
        self.sheet_logger = sheet_logger
        self.manifest = manifest

    def run(self) -> RunSummary:
        summary = RunSummary()

        files = self.lister.list_videos(self.settings.folder_id, self.settings.mime_type)
        summary.listed = len(files)
        if not files:
            logger.info("No new videos found.")
            return summary

        download_log.info(f"Found {len(files)} new video(s) to download.")

        for idx, ref in enumerate(files, 1):
            logger.debug(f"[{idx}/{len(files)}] {ref.name} ({ref.id})")
            if self.process_file(ref):
                summary.processed.append(ref.name)
            else:
                summary.skipped.append(ref.name)

        success_log.info("All videos processed successfully.")
        self._print_summary(summary)
        return summary

    def process_file(self, ref: RemoteVideoRef) -> bool:
        """Return True if the file went through the pipeline, False if it was skipped."""
        if self.manifest is not None:
            return self._process_with_manifest(ref)

        video_path = self.downloader.download(ref)
        if video_path is None:
            logger.info(f"Already downloaded, skipping: {ref.name}")
            return False

        transcript = self.transcriber.transcribe(video_path, ref.name)
        self.sheet_logger.append(ref.name, transcript, ref.id)
        return True

    def _process_with_manifest(self, ref: RemoteVideoRef) -> bool:
        stage = self.manifest.stage(ref.name)
        video_path = self.downloader.local_path(ref)

        # A local file the manifest never saw predates it and counts as done.
        if stage == STAGE_LOGGED or (stage is None and video_path.exists()):
            logger.info(f"Already processed, skipping: {ref.name}")
            return False

        has_transcript = (
            stage == STAGE_TRANSCRIBED and self.transcriber.transcript_path(ref.name).exists()
        )

        if stage in (None, STAGE_DOWNLOADING) or (not has_transcript and not video_path.exists()):
            if stage == STAGE_DOWNLOADING:
                logger.info(f"Previous download of {ref.name} did not finish, fetching again")
            elif stage is not None:
                logger.info(f"Local copy of {ref.name} is gone, fetching again")
            self.manifest.mark(ref, STAGE_DOWNLOADING)
            video_path = self.downloader.download(ref, force=True)
            self.manifest.mark(ref, STAGE_DOWNLOADED)
        else:
            logger.info(f"Resuming {ref.name} after stage '{stage}'")

        if has_transcript:
            transcript = self.transcriber.load_transcript(ref.name)
        else:
            transcript = self.transcriber.transcribe(video_path, ref.name)
            self.manifest.mark(ref, STAGE_TRANSCRIBED)

        self.sheet_logger.append(ref.name, transcript, ref.id)
        self.manifest.mark(ref, STAGE_LOGGED)
        return True

    @staticmethod
    def _print_summary(summary: RunSummary):
        logger.info("=" * 80)
        logger.info("📊 RUN SUMMARY")
        logger.info("=" * 80)
        logger.info(f"Listed in Drive: {summary.listed}")
        logger.info(f"✅ Processed: {len(summary.processed)}")
        logger.info(f"⏭️  Skipped (already local): {len(summary.skipped)}")
        logger.info("=" * 80)


def build_pipeline(settings: Settings, clients, show_progress: bool = True) -> Pipeline:
    manifest = StageManifest(settings.manifest_path) if settings.manifest_enabled else None
    return Pipeline(
        settings=settings,
        lister=DriveLister(clients.drive),
        downloader=VideoDownloader(clients.drive, settings.video_dir, show_progress=show_progress),
        transcriber=Transcriber(
            api_key=settings.openai_api_key,
            transcript_dir=settings.transcript_dir,
            api_base=settings.openai_api_base,
            model=settings.openai_model,
            timeout=settings.openai_timeout,
        ),
        sheet_logger=SheetLogger(clients.sheets, settings.spreadsheet_id, settings.sheet_name),
        manifest=manifest,
    )
