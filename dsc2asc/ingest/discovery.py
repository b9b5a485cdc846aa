from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from dsc2asc.models.descriptor import ScanDescriptor, ScanInterval
from dsc2asc.models.formats import FormatProfile


DESCRIPTOR_SUFFIX = ".dsc"

# resolver(interval) -> raw bytes of the sibling file, or None if it is absent
FileResolver = Callable[[ScanInterval], Optional[bytes]]


# -------------------------
# Naming
# -------------------------
def descriptor_base_name(name: str | Path) -> str:
    """File name without directory and without its last extension."""
    n = Path(str(name)).name
    stem, dot, _ = n.rpartition(".")
    return stem if dot and stem else n


def sibling_name(base_name: str, interval: ScanInterval) -> str:
    """Name of the binary file holding one interval: ``<base>.<ext>``."""
    return f"{base_name}.{interval.file_extension}"


def output_name(
    base_name: str,
    interval: ScanInterval,
    profile: FormatProfile,
    ordinal: Optional[int] = None,
) -> str:
    """
    Name of the converted document: ``<base>_<ext><profile.extension>``.

    ordinal (1-based) is inserted only when several eligible intervals share
    one file extension, so names stay unique within one conversion.
    """
    if ordinal is None:
        return f"{base_name}_{interval.file_extension}{profile.extension}"
    return f"{base_name}_{interval.file_extension}_{int(ordinal)}{profile.extension}"


def archive_name(base_name: str) -> str:
    return f"{base_name}_converted.zip"


def find_descriptor(names: Iterable[str]) -> Optional[str]:
    """Return the first name that looks like a descriptor (``*.dsc``), else None."""
    for n in names:
        if str(n).lower().endswith(DESCRIPTOR_SUFFIX):
            return str(n)
    return None


# -------------------------
# Resolvers
# -------------------------
class DirectoryResolver:
    """
    Resolve sibling files next to a descriptor on disk.

    Lookup is case-insensitive (instrument software is not consistent about
    the case of extensions). The directory is listed once, on first use.
    """

    def __init__(self, descriptor_path: str | Path) -> None:
        self.descriptor_path = Path(descriptor_path).expanduser().resolve()
        self.root = self.descriptor_path.parent
        self.base_name = descriptor_base_name(self.descriptor_path.name)
        self._files: Optional[Dict[str, Path]] = None

    def _index(self) -> Dict[str, Path]:
        if self._files is None:
            self._files = {p.name.lower(): p for p in self.root.iterdir() if p.is_file()}
        return self._files

    def locate(self, interval: ScanInterval) -> Optional[Path]:
        return self._index().get(sibling_name(self.base_name, interval).lower())

    def exists(self, interval: ScanInterval) -> bool:
        return self.locate(interval) is not None

    def __call__(self, interval: ScanInterval) -> Optional[bytes]:
        p = self.locate(interval)
        if p is None:
            return None
        return p.read_bytes()


class MappingResolver:
    """Resolve sibling files from an in-memory ``{file name: bytes}`` mapping (uploads)."""

    def __init__(self, files: Mapping[str, bytes], base_name: str) -> None:
        self.base_name = base_name
        self._files: Dict[str, bytes] = {str(k).lower(): bytes(v) for k, v in files.items()}

    def locate(self, interval: ScanInterval) -> Optional[str]:
        key = sibling_name(self.base_name, interval).lower()
        return key if key in self._files else None

    def exists(self, interval: ScanInterval) -> bool:
        return self.locate(interval) is not None

    def __call__(self, interval: ScanInterval) -> Optional[bytes]:
        key = self.locate(interval)
        if key is None:
            return None
        return self._files[key]


def availability(
    descriptor: ScanDescriptor,
    resolver: DirectoryResolver | MappingResolver,
) -> List[Tuple[int, ScanInterval, bool]]:
    """(index, interval, file_found) for every eligible interval, in descriptor order."""
    return [(i, iv, resolver.exists(iv)) for i, iv in descriptor.eligible_intervals()]
