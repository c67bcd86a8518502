"""Logging configuration

Every console line carries a stage tag ([DOWNLOAD], [TRANSCRIBE], [LOG], ...).
Modules get a tagged logger from stage_logger(); plain records fall back to a
tag derived from their level.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

STAGE_INFO = "INFO"
STAGE_DOWNLOAD = "DOWNLOAD"
STAGE_TRANSCRIBE = "TRANSCRIBE"
STAGE_LOG = "LOG"
STAGE_SUCCESS = "SUCCESS"
STAGE_ERROR = "ERROR"

CONSOLE_FORMAT = '%(asctime)s [%(stage)s] %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(stage)s] %(message)s'


class StageFilter(logging.Filter):
    """Fill in record.stage for records not logged through a stage_logger."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, 'stage', None):
            if record.levelno >= logging.ERROR:
                record.stage = STAGE_ERROR
            elif record.levelno >= logging.WARNING:
                record.stage = "WARN"
            else:
                record.stage = STAGE_INFO
        return True


def stage_logger(name: str, stage: str) -> logging.LoggerAdapter:
    return logging.LoggerAdapter(logging.getLogger(name), {'stage': stage})


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None, verbose: bool = False):
    level = logging.DEBUG if verbose else getattr(logging, str(log_level).upper(), logging.INFO)
    stage_filter = StageFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    console_handler.addFilter(stage_filter)

    handlers = [console_handler]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        file_handler.addFilter(stage_filter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for noisy in ('urllib3', 'google.auth', 'googleapiclient.discovery_cache'):
        logging.getLogger(noisy).setLevel(logging.WARNING)
