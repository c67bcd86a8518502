"""Configuration management with .env, environment variable and YAML file support"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError


class Config:
    """Layered lookup: environment first, then config.yaml, then the caller's default."""

    def __init__(self, config_file: Optional[str] = None, env_file: Optional[str] = ".env"):
        self.config_file = config_file or "config.yaml"
        self._config: Dict[str, Any] = {}
        if env_file:
            load_dotenv(env_file, override=False)
        self._load_config()

    def _load_config(self):
        config_path = Path(self.config_file)
        if not config_path.exists():
            self._config = {}
            return
        try:
            with open(config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            print(f"⚠️  Warning: Could not load config file: {e}")
            loaded = {}
        self._config = loaded if isinstance(loaded, dict) else {}

    def _from_file(self, key: str) -> Any:
        value: Any = self._config
        for part in key.split('.'):
            if not isinstance(value, dict):
                return None
            value = value.get(part)
        return value

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        env_key = env_var or key.upper().replace('.', '_')
        env_value = os.getenv(env_key)
        if env_value is not None:
            return env_value

        value = self._from_file(key)
        if value is not None:
            return value
        return default

    def require(self, key: str, env_var: Optional[str] = None) -> str:
        value = self.get(key, env_var=env_var)
        if value is None or str(value).strip() == '':
            env_key = env_var or key.upper().replace('.', '_')
            raise ConfigError(
                f"Missing required setting '{key}' (set {env_key} or {key} in {self.config_file})"
            )
        return str(value).strip()

    def get_bool(self, key: str, default: bool = False, env_var: Optional[str] = None) -> bool:
        value = self.get(key, default, env_var)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ('true', '1', 'yes', 'on')
        return bool(value)

    def get_float(self, key: str, default: float = 0.0, env_var: Optional[str] = None) -> float:
        value = self.get(key, default, env_var)
        try:
            return float(value)
        except (ValueError, TypeError):
            return default


@dataclass(frozen=True)
class Settings:
    """Values read once at startup and handed to every component."""

    folder_id: str
    spreadsheet_id: str
    openai_api_key: str = field(repr=False)
    sheet_name: str = "Sheet1"
    mime_type: str = "video/mp4"
    key_file: Path = Path("credentials.json")
    openai_api_base: str = "https://api.openai.com/v1"
    openai_model: str = "whisper-1"
    openai_timeout: float = 600.0
    video_dir: Path = Path("videos")
    transcript_dir: Path = Path("transcripts")
    manifest_enabled: bool = False
    state_dir: Path = Path("state")

    @property
    def manifest_path(self) -> Path:
        return self.state_dir / "manifest.json"

    def ensure_directories(self):
        self.video_dir.mkdir(parents=True, exist_ok=True)
        self.transcript_dir.mkdir(parents=True, exist_ok=True)
        if self.manifest_enabled:
            self.state_dir.mkdir(parents=True, exist_ok=True)


def _resolve(base_dir: Path, value: Any) -> Path:
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else base_dir / path


def load_settings(config: Config, base_dir: Optional[Path] = None) -> Settings:
    base_dir = Path(base_dir) if base_dir else Path.cwd()

    timeout = config.get_float('openai.timeout', 600.0)
    if timeout <= 0:
        raise ConfigError(f"openai.timeout must be positive, got {timeout}")

    return Settings(
        folder_id=config.require('drive.folder_id', env_var='DRIVE_FOLDER_ID'),
        spreadsheet_id=config.require('sheets.spreadsheet_id', env_var='SPREADSHEET_ID'),
        openai_api_key=config.require('openai.api_key', env_var='OPENAI_API_KEY'),
        sheet_name=str(config.get('sheets.sheet_name', 'Sheet1', env_var='SHEET_NAME')),
        mime_type=str(config.get('drive.mime_type', 'video/mp4')),
        key_file=_resolve(base_dir, config.get('google.key_file', 'credentials.json')),
        openai_api_base=str(config.get('openai.api_base', 'https://api.openai.com/v1')).rstrip('/'),
        openai_model=str(config.get('openai.model', 'whisper-1')),
        openai_timeout=timeout,
        video_dir=_resolve(base_dir, config.get('paths.video_dir', 'videos', env_var='VIDEO_DIR')),
        transcript_dir=_resolve(
            base_dir, config.get('paths.transcript_dir', 'transcripts', env_var='TRANSCRIPT_DIR')
        ),
        manifest_enabled=config.get_bool('state.manifest_enabled', False),
        state_dir=_resolve(base_dir, config.get('state.dir', 'state')),
    )
