from __future__ import annotations

import codecs
import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Tuple

from dsc2asc.models.formats import DEFAULT_FORMAT, FORMATS


APP_SETTINGS_DIRNAME = "dsc2asc"
SETTINGS_FILENAME = "settings.json"
SETTINGS_ENV = "DSC2ASC_SETTINGS"

# Text encodings offered for reading descriptors (the descriptor is plain text
# written by the instrument software, frequently in a Cyrillic code page).
ENCODINGS: Tuple[str, ...] = ("utf-8", "cp1251", "cp866", "koi8-r", "latin-1")
DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True)
class ConverterSettings:
    """User preferences persisted between sessions.

    Both values are opaque to the conversion core: the caller resolves
    ``format_key`` with ``get_format`` and passes the profile explicitly.
    """

    format_key: str = DEFAULT_FORMAT
    encoding: str = DEFAULT_ENCODING


def is_known_encoding(name: str) -> bool:
    if not name:
        return False
    try:
        codecs.lookup(name)
    except LookupError:
        return False
    return True


def _appdata_dir() -> Path:
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata)
    return Path.home()


def settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(override).expanduser()
    base = _appdata_dir()
    dirname = APP_SETTINGS_DIRNAME if os.environ.get("APPDATA") else "." + APP_SETTINGS_DIRNAME
    return base / dirname / SETTINGS_FILENAME


def load_settings(path: Optional[Path] = None) -> ConverterSettings:
    """Load persistent settings; a missing or corrupt file yields defaults.

    An unknown format key or encoding name falls back to its default.
    """
    p = Path(path) if path is not None else settings_path()
    try:
        if not p.exists() or not p.is_file():
            return ConverterSettings()
        data = json.loads(p.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings.json must be an object")
    except (OSError, ValueError):
        return ConverterSettings()

    fmt = str(data.get("format_key") or DEFAULT_FORMAT)
    if fmt not in FORMATS:
        fmt = DEFAULT_FORMAT
    enc = str(data.get("encoding") or DEFAULT_ENCODING).strip()
    if not is_known_encoding(enc):
        enc = DEFAULT_ENCODING
    return ConverterSettings(format_key=fmt, encoding=enc)


def save_settings(settings: ConverterSettings, path: Optional[Path] = None) -> Path:
    p = Path(path) if path is not None else settings_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(asdict(settings), ensure_ascii=False, indent=2), encoding="utf-8")
    return p
