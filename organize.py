#!/usr/bin/env python3
"""
Shorts Organizer

Scans a Google Drive folder for videos, downloads the new ones, transcribes
them and appends (title, transcript, link) rows to a Google Sheet.
Supports configuration via config.yaml, .env and environment variables.
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from organizer.config import Config, load_settings
from organizer.errors import OrganizerError
from organizer.google_auth import GoogleAuthenticator
from organizer.logger_config import setup_logging
from organizer.pipeline import build_pipeline

logger = logging.getLogger("organize")


def main():
    config = Config()

    log_file = config.get('logging.log_file', '')
    setup_logging(
        log_level=config.get('logging.level', 'INFO'),
        log_file=log_file if log_file else None,
        verbose=config.get_bool('logging.verbose', False),
    )

    logger.info("Starting YouTube Shorts Organizer...")

    try:
        settings = load_settings(config)
        logger.info(f"Drive folder: {settings.folder_id}")
        logger.info(f"Spreadsheet: {settings.spreadsheet_id} ({settings.sheet_name})")
        logger.info(f"Videos: {settings.video_dir}  Transcripts: {settings.transcript_dir}")
        if settings.manifest_enabled:
            logger.info(f"Stage manifest: {settings.manifest_path}")

        settings.ensure_directories()

        logger.info("Authenticating with Google Drive and Sheets...")
        clients = GoogleAuthenticator(settings.key_file).authenticate()

        build_pipeline(settings, clients).run()

    except KeyboardInterrupt:
        logger.warning("\n\n⚠️  Interrupted by user")
        sys.exit(130)
    except OrganizerError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(str(e), exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
