"""Settings persistence and per-run sync configuration."""

from __future__ import annotations
import json
import os
import sys
from dataclasses import dataclass, asdict
from datetime import datetime, date
from pathlib import Path
from typing import Optional, Dict, Any

from .errors import ConfigurationError

# ── Constants ────────────────────────────────────────────────────────────────
DEFAULT_BASE_URL     = "https://api.bee.computer"
API_KEY_ENV_VAR      = "BEE_API_KEY"
FOLDER_ENV_VAR       = "BEE_SYNC_FOLDER"
BASE_URL_ENV_VAR     = "BEE_SYNC_BASE_URL"
SETTINGS_PATH        = Path.home() / ".bee" / "settings.json"
API_DATE_FMT         = "%Y-%m-%d"

# Keys are stored camelCase, as the settings file has always been written.
_SETTINGS_KEYS = {"apiKey": "api_key", "folderPath": "folder_path", "startDate": "start_date"}


def parse_date(s: str) -> date:
    try:
        return datetime.strptime(s, API_DATE_FMT).date()
    except ValueError:
        raise ConfigurationError(f"Invalid date '{s}' (expected YYYY-MM-DD).")


@dataclass
class Settings:
    api_key: str = ""
    folder_path: str = "Bee Daily"
    start_date: str = "2025-02-09"

    def to_json(self) -> Dict[str,str]:
        values = asdict(self)
        return {stored: values[attr] for stored, attr in _SETTINGS_KEYS.items()}


def load_settings(path: Path=SETTINGS_PATH) -> Settings:
    """Stored values layered over the defaults; a missing or unreadable file yields defaults."""
    settings = Settings()
    if not path.exists():
        return settings
    try:
        stored = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        print(f"Warning: could not read settings {path}: {e}; using defaults.", file=sys.stderr)
        return settings
    if not isinstance(stored, dict):
        print(f"Warning: settings {path} is not a JSON object; using defaults.", file=sys.stderr)
        return settings
    for stored_key, attr in _SETTINGS_KEYS.items():
        value = stored.get(stored_key)
        if isinstance(value, str):
            setattr(settings, attr, value)
    return settings

def save_settings(settings: Settings, path: Path=SETTINGS_PATH):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_json(), indent=2) + "\n", encoding="utf-8")


@dataclass(frozen=True)
class SyncConfig:
    api_key: str
    folder: Path
    start_date: str
    base_url: str = DEFAULT_BASE_URL
    verbose: bool = False

    @property
    def start_day(self) -> date:
        """Parsed on use, so only the daily-log sync depends on a valid start date."""
        return parse_date(self.start_date)


def resolve_config(settings: Settings, overrides: Optional[Dict[str,Any]]=None,
                   environ: Optional[Dict[str,str]]=None) -> SyncConfig:
    """
    Build the configuration for one sync run.

    Precedence, highest first: explicit overrides (CLI flags), environment,
    the settings file, built-in defaults. An empty API key is allowed here;
    the sync entry points refuse to run without one.
    """
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    env = os.environ if environ is None else environ

    api_key = overrides.get("api_key") or env.get(API_KEY_ENV_VAR) or settings.api_key
    folder = overrides.get("folder") or env.get(FOLDER_ENV_VAR) or settings.folder_path
    base_url = overrides.get("base_url") or env.get(BASE_URL_ENV_VAR) or DEFAULT_BASE_URL
    start = overrides.get("start_date") or settings.start_date

    return SyncConfig(
        api_key=api_key.strip(),
        folder=Path(folder).expanduser(),
        start_date=start.strip(),
        base_url=base_url,
        verbose=bool(overrides.get("verbose", False)),
    )


def mask_key(key: str) -> str:
    if not key:
        return "(not set)"
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}{'*' * (len(key) - 8)}{key[-4:]}"
