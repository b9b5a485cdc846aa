from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from dsc2asc.analysis.convert import convert_descriptor
from dsc2asc.analysis.export import write_outputs
from dsc2asc.ingest.descriptor_parser import InvalidDescriptorError, load_descriptor
from dsc2asc.ingest.discovery import DirectoryResolver, availability, sibling_name
from dsc2asc.models.formats import FORMATS, get_format
from dsc2asc.models.settings import ENCODINGS, is_known_encoding, load_settings, save_settings


def _print_descriptor(descriptor, resolver: DirectoryResolver) -> None:
    for label, value in descriptor.metadata_summary():
        print(f"{label}: {value}")
    for line in descriptor.comments:
        print(f"# {line}")
    for i, iv, found in availability(descriptor, resolver):
        state = "OK" if found else "missing"
        print(f"  {iv.label(i)} step={iv.step:g} [{sibling_name(resolver.base_name, iv)}: {state}]")


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="dsc2asc",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Convert a diffractometer scan (.dsc descriptor + binary interval files)
            into ASC / CSV text.

            Sibling files are looked up next to the descriptor as <base>.<ext>.
            One converted interval is written as a single file, several as
            <base>_converted.zip.
            """
        ),
    )
    p.add_argument("descriptor", help="Path to the .dsc descriptor")
    p.add_argument("--format", dest="format_key", default=None, choices=sorted(FORMATS),
                   help="Output format (default: saved preference)")
    p.add_argument("--encoding", default=None,
                   help=f"Descriptor text encoding, e.g. {', '.join(ENCODINGS)} (default: saved preference)")
    p.add_argument("--out-dir", default=None, help="Output directory (default: descriptor folder)")
    p.add_argument("--list", action="store_true", help="Only print metadata and intervals")

    ns = p.parse_args(list(argv) if argv is not None else None)

    if ns.encoding and not is_known_encoding(ns.encoding):
        print(f"ERROR: unknown encoding: {ns.encoding}")
        return 2

    settings = load_settings()
    if ns.format_key or ns.encoding:
        settings = replace(
            settings,
            format_key=ns.format_key or settings.format_key,
            encoding=ns.encoding or settings.encoding,
        )
        save_settings(settings)

    path = Path(ns.descriptor).expanduser()
    try:
        descriptor = load_descriptor(path, encoding=settings.encoding)
    except InvalidDescriptorError as e:
        print("ERROR:", e)
        return 2
    except (OSError, LookupError) as e:
        print("ERROR:", repr(e))
        return 2

    resolver = DirectoryResolver(path)
    if ns.list:
        _print_descriptor(descriptor, resolver)
        return 0

    profile = get_format(settings.format_key)
    result = convert_descriptor(descriptor, resolver, profile, base_name=resolver.base_name)

    for msg in result.warnings:
        print("CHECK:", msg)
    for f in result.failures:
        print(f"ERROR: interval {f.interval_index + 1} ({f.name}): {f.message}")

    out_dir = Path(ns.out_dir) if ns.out_dir else resolver.root
    try:
        written = write_outputs(result, out_dir)
    except OSError as e:
        print("ERROR:", repr(e))
        return 2
    print(f"converted {result.n_converted} of {result.n_convertible} (eligible {result.n_eligible})")
    if written is None:
        return 1
    print(f"wrote: {written}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
