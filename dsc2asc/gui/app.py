from __future__ import annotations

import html
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import ipywidgets as w
import matplotlib.pyplot as plt

from dsc2asc.analysis.convert import convert_descriptor, read_interval
from dsc2asc.analysis.export import decimate_for_preview, write_outputs
from dsc2asc.ingest.descriptor_parser import decode_descriptor_bytes, require_valid
from dsc2asc.ingest.discovery import MappingResolver, availability, descriptor_base_name, find_descriptor
from dsc2asc.models.descriptor import ScanDescriptor
from dsc2asc.models.formats import FORMATS, get_format
from dsc2asc.models.results import ConversionResult
from dsc2asc.models.settings import ENCODINGS, load_settings, save_settings

from .log_view import HtmlLog


# Keep a single active GUI instance per kernel to avoid duplicated callbacks / stacked widgets.
_ACTIVE_GUI: Optional[w.Widget] = None


@dataclass
class SessionState:
    """
    Files dropped into the GUI plus the descriptor parsed from them.

    A new descriptor in an upload replaces all previously uploaded files;
    uploads without a descriptor add sibling files to the current session.
    """
    files: Dict[str, bytes] = field(default_factory=dict)
    descriptor_name: Optional[str] = None
    descriptor: Optional[ScanDescriptor] = None

    @property
    def base_name(self) -> str:
        return descriptor_base_name(self.descriptor_name or "")

    def resolver(self) -> MappingResolver:
        return MappingResolver(self.files, self.base_name)

    def add_files(self, files: Mapping[str, bytes]) -> bool:
        """Add uploaded files; returns True when a new descriptor was among them."""
        dsc = find_descriptor(files.keys())
        if dsc is not None:
            self.files.clear()
            self.descriptor_name = dsc
            self.descriptor = None
        for name, content in files.items():
            self.files[str(name).lower()] = bytes(content)
        return dsc is not None

    def parse(self, encoding: str) -> ScanDescriptor:
        """(Re)parse the current descriptor; raises InvalidDescriptorError if it has no intervals."""
        if self.descriptor_name is None:
            raise RuntimeError("No descriptor uploaded yet.")
        self.descriptor = None
        raw = self.files[self.descriptor_name.lower()]
        self.descriptor = require_valid(decode_descriptor_bytes(raw, encoding), source=self.descriptor_name)
        return self.descriptor

    def interval_options(self) -> List[Tuple[str, int]]:
        if self.descriptor is None:
            return []
        opts = []
        for i, iv, found in availability(self.descriptor, self.resolver()):
            opts.append((f"{iv.label(i)} [{'OK' if found else 'missing'}]", i))
        return opts

    def n_found(self) -> int:
        if self.descriptor is None:
            return 0
        return sum(1 for _, _, found in availability(self.descriptor, self.resolver()) if found)

    def convert(self, format_key: str) -> ConversionResult:
        if self.descriptor is None:
            raise RuntimeError("Load a valid descriptor first.")
        return convert_descriptor(self.descriptor, self.resolver(), get_format(format_key), base_name=self.base_name)


def _uploaded_files(value: Any) -> Dict[str, bytes]:
    """Normalize FileUpload.value (tuple of dicts in ipywidgets 8, dict in 7)."""
    out: Dict[str, bytes] = {}
    if isinstance(value, dict):
        for name, item in value.items():
            out[str(name)] = bytes(item["content"])
        return out
    for item in value or ():
        out[str(item["name"])] = bytes(item["content"])
    return out


def _meta_html(descriptor: ScanDescriptor) -> str:
    rows = "".join(
        f"<tr><td style='padding-right:12px;color:#555;'>{html.escape(k)}</td><td><b>{html.escape(v)}</b></td></tr>"
        for k, v in descriptor.metadata_summary()
    )
    return f"<table>{rows}</table>"


def _plot_frame(frame, title: str) -> None:
    x, y = decimate_for_preview(frame)
    fig, ax = plt.subplots(figsize=(10, 3.6))
    ax.plot(x, y, linewidth=1.0, color="#3b82f6")
    ax.set_xlabel("2Theta (deg)")
    ax.set_ylabel("Intensity")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    plt.show()


def build_gui(settings_file: Optional[Path] = None) -> w.Widget:
    """
    Converter GUI (Jupyter / VSCode notebooks).

    Upload the .dsc descriptor together with its interval files, pick an
    interval to preview, then convert to the selected format.
    """
    global _ACTIVE_GUI

    if _ACTIVE_GUI is not None:
        _ACTIVE_GUI.close()
        _ACTIVE_GUI = None

    prefs = {"settings": load_settings(settings_file)}
    # Set while the interval dropdown is rebuilt; callers preview explicitly afterwards.
    ui = {"refreshing": False}
    session = SessionState()
    log = HtmlLog(title="Log")

    upload = w.FileUpload(description="Files…", multiple=True, layout=w.Layout(width="160px"))
    dd_format = w.Dropdown(
        options=[(p.label, k) for k, p in FORMATS.items()],
        value=prefs["settings"].format_key,
        description="Format",
        layout=w.Layout(width="300px"),
    )
    enc_options = list(ENCODINGS)
    if prefs["settings"].encoding not in enc_options:
        enc_options.append(prefs["settings"].encoding)
    dd_encoding = w.Dropdown(
        options=enc_options, value=prefs["settings"].encoding, description="Encoding", layout=w.Layout(width="220px")
    )

    status = w.HTML("<i>Upload a .dsc descriptor and its data files.</i>")
    meta = w.HTML("")
    dd_interval = w.Dropdown(options=[], description="Interval", disabled=True, layout=w.Layout(width="420px"))
    out_dir = w.Text(value=str(Path.cwd()), description="Out dir", layout=w.Layout(width="60%"))
    btn_convert = w.Button(description="Convert", button_style="primary", disabled=True)
    out_plot = w.Output(layout=w.Layout(border="1px solid #ddd", padding="4px"))

    def _save_prefs(**changes) -> None:
        prefs["settings"] = replace(prefs["settings"], **changes)
        save_settings(prefs["settings"], settings_file)

    def _clear_and_close() -> None:
        out_plot.clear_output(wait=True)
        plt.close("all")

    def _set_interval_options(options) -> None:
        ui["refreshing"] = True
        try:
            dd_interval.options = options
        finally:
            ui["refreshing"] = False

    def _refresh_status() -> None:
        d = session.descriptor
        if d is None:
            status.value = "<span style='color:#b00020;'>No valid descriptor</span>"
            _set_interval_options([])
            dd_interval.disabled = True
            btn_convert.disabled = True
            btn_convert.description = "Convert"
            return
        found = session.n_found()
        needed = len(d.eligible_intervals())
        status.value = f"<b>{html.escape(session.descriptor_name)}</b>: data files {found} of {needed}"
        _set_interval_options(session.interval_options())
        dd_interval.disabled = not dd_interval.options
        btn_convert.disabled = found == 0
        btn_convert.description = f"Convert ({found})" if found else "Convert"

    def _process_descriptor() -> None:
        try:
            d = session.parse(dd_encoding.value)
            meta.value = _meta_html(d)
            log.info(f"Descriptor {session.descriptor_name}: {len(d.intervals)} interval(s)")
        except Exception as e:
            meta.value = ""
            log.error(f"Descriptor read error: {e}")
        _refresh_status()

    def _preview(index: Optional[int]) -> None:
        if session.descriptor is None or index is None:
            return
        with out_plot:
            _clear_and_close()
            try:
                frame = read_interval(session.descriptor, int(index), session.resolver(), base_name=session.base_name)
            except Exception as e:
                log.error(f"Chart error: {e}")
                return
            if frame is None:
                print("No data file for this interval.")
                return
            log.extend(frame.warnings)
            _plot_frame(frame, f"{frame.source_name} ({frame.n_samples} samples)")

    def _on_upload(change) -> None:
        files = _uploaded_files(change["new"])
        if not files:
            return
        new_descriptor = session.add_files(files)
        if new_descriptor:
            _clear_and_close()
            _process_descriptor()
        else:
            _refresh_status()
        if dd_interval.options:
            _preview(dd_interval.value)

    def _on_encoding(change) -> None:
        _save_prefs(encoding=change["new"])
        if session.descriptor_name is not None:
            _process_descriptor()
            if dd_interval.options:
                _preview(dd_interval.value)

    def _on_format(change) -> None:
        _save_prefs(format_key=change["new"])

    def _on_interval(change) -> None:
        if ui["refreshing"]:
            return
        _preview(change["new"])

    def _on_convert(_) -> None:
        try:
            result = session.convert(dd_format.value)
            log.report(result)
            written = write_outputs(result, out_dir.value)
            if written is not None:
                log.info(f"Wrote: {written}")
        except Exception as e:
            log.error(f"Conversion failed: {e}")

    upload.observe(_on_upload, names="value")
    dd_encoding.observe(_on_encoding, names="value")
    dd_format.observe(_on_format, names="value")
    dd_interval.observe(_on_interval, names="value")
    btn_convert.on_click(_on_convert)

    top = w.HBox([upload, dd_format, dd_encoding])
    mid = w.HBox([dd_interval, btn_convert])
    gui = w.VBox([top, status, meta, mid, out_dir, out_plot, log.panel])

    _ACTIVE_GUI = gui
    return gui
