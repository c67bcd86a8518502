"""Per-file stage manifest, used instead of bare file existence when enabled"""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from .drive_lister import RemoteVideoRef
from .errors import OrganizerError

logger = logging.getLogger(__name__)

STAGE_DOWNLOADING = "downloading"
STAGE_DOWNLOADED = "downloaded"
STAGE_TRANSCRIBED = "transcribed"
STAGE_LOGGED = "logged"

STAGES = (STAGE_DOWNLOADING, STAGE_DOWNLOADED, STAGE_TRANSCRIBED, STAGE_LOGGED)


class StageManifest:
    """
    JSON sidecar mapping a local file name to the last stage it completed.

    Entries look like {"id": <drive id>, "stage": "transcribed", "updated_at": ...}.
    The file is rewritten atomically after every transition.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._entries: Dict[str, Dict[str, str]] = {}
        self.load()

    def load(self):
        if not self.path.exists():
            self._entries = {}
            return
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read manifest {self.path}, starting empty: {e}")
            data = {}
        files = data.get('files', {}) if isinstance(data, dict) else {}
        self._entries = {
            name: entry for name, entry in files.items()
            if isinstance(entry, dict) and entry.get('stage') in STAGES
        }

    def save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix='.manifest-', suffix='.json', dir=str(self.path.parent))
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump({'files': self._entries}, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise OrganizerError(f"Could not write manifest {self.path}: {exc}") from exc

    def stage(self, name: str) -> Optional[str]:
        entry = self._entries.get(name)
        return entry['stage'] if entry else None

    def mark(self, ref: RemoteVideoRef, stage: str):
        if stage not in STAGES:
            raise ValueError(f"Unknown stage: {stage}")
        self._entries[ref.name] = {
            'id': ref.id,
            'stage': stage,
            'updated_at': datetime.now().isoformat(timespec='seconds'),
        }
        self.save()
        logger.debug(f"Manifest: {ref.name} -> {stage}")

    def __len__(self) -> int:
        return len(self._entries)
