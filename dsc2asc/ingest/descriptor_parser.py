from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from functools import reduce
from pathlib import Path
from typing import Callable, Dict, Optional

from dsc2asc.models.descriptor import ScanDescriptor, ScanInterval


_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_MIN_INTERVAL_FIELDS = 10
_BOM = "\ufeff"


class InvalidDescriptorError(ValueError):
    """Raised when a descriptor declares no usable scan interval."""


@dataclass(frozen=True)
class _ParseState:
    section: Optional[str]
    descriptor: ScanDescriptor


SectionHandler = Callable[[ScanDescriptor, str], ScanDescriptor]


def _parse_float(v: str) -> float:
    try:
        return float(v)
    except ValueError:
        return math.nan


def _parse_int(v: str) -> Optional[int]:
    try:
        return int(float(v))
    except (ValueError, OverflowError):
        return None


def parse_interval_record(line: str) -> Optional[ScanInterval]:
    """
    Parse one [Intervals] record: ``start;end;step;...;status;ext``.

    Fields 3..7 are not used. Records with fewer than 10 fields return None.
    """
    p = [s.strip() for s in line.split(";")]
    if len(p) < _MIN_INTERVAL_FIELDS:
        return None
    return ScanInterval(
        start=_parse_float(p[0]),
        end=_parse_float(p[1]),
        step=_parse_float(p[2]),
        status=_parse_int(p[8]),
        file_extension=p[9].lower(),
    )


def _on_comment(d: ScanDescriptor, line: str) -> ScanDescriptor:
    return replace(d, comments=d.comments + (line,))


def _key_value_handler(section: str) -> SectionHandler:
    def handler(d: ScanDescriptor, line: str) -> ScanDescriptor:
        k, sep, v = line.partition("=")
        if not sep:
            return d
        values = dict(getattr(d, section))
        values[k.strip().lower()] = v.strip()
        return replace(d, **{section: values})

    return handler


def _on_interval(d: ScanDescriptor, line: str) -> ScanDescriptor:
    interval = parse_interval_record(line)
    if interval is None:
        return d
    return replace(d, intervals=d.intervals + (interval,))


def _ignore(d: ScanDescriptor, line: str) -> ScanDescriptor:
    return d


_SECTION_HANDLERS: Dict[str, SectionHandler] = {
    "comment": _on_comment,
    "general": _key_value_handler("general"),
    "goniometer": _key_value_handler("goniometer"),
    "intervals": _on_interval,
}


def _step(state: _ParseState, raw_line: str) -> _ParseState:
    line = raw_line.strip()
    if not line:
        return state
    if line.startswith("[") and line.endswith("]"):
        return _ParseState(section=line[1:-1].lower(), descriptor=state.descriptor)
    if state.section is None:
        return state
    handler = _SECTION_HANDLERS.get(state.section, _ignore)
    return _ParseState(section=state.section, descriptor=handler(state.descriptor, line))


def parse_descriptor(text: str) -> ScanDescriptor:
    """
    Parse descriptor text into a ScanDescriptor.

    Lenient by contract: unknown sections, lines before the first header,
    key/value lines without '=' and short interval records are skipped.
    Callers check ``descriptor.is_valid`` to detect an unusable file.
    A leading byte order mark is dropped.
    """
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    initial = _ParseState(section=None, descriptor=ScanDescriptor())
    return reduce(_step, _LINE_BREAK.split(text), initial).descriptor


def decode_descriptor_bytes(data: bytes, encoding: str = "utf-8") -> ScanDescriptor:
    """Decode raw descriptor bytes with the user-selected encoding and parse them."""
    return parse_descriptor(bytes(data).decode(encoding, errors="replace"))


def read_descriptor(path: str | Path, encoding: str = "utf-8") -> ScanDescriptor:
    fp = Path(path).expanduser()
    if not fp.is_file():
        raise FileNotFoundError(str(fp))
    return decode_descriptor_bytes(fp.read_bytes(), encoding)


def require_valid(descriptor: ScanDescriptor, source: str = "descriptor") -> ScanDescriptor:
    if not descriptor.is_valid:
        raise InvalidDescriptorError(f"No intervals found in {source}")
    return descriptor


def load_descriptor(path: str | Path, encoding: str = "utf-8") -> ScanDescriptor:
    """Read a descriptor from disk; raise InvalidDescriptorError if it has no intervals."""
    return require_valid(read_descriptor(path, encoding), source=Path(path).name)
