"""GUI package - interactive ipywidgets interface.

One panel:
1. Upload the .dsc descriptor and its interval data files
2. Inspect metadata and data-file availability per interval
3. Preview an interval as a 2Theta / intensity line chart
4. Convert to ASC / CSV (single file or zip archive)

Entry point:
    from dsc2asc.gui.app import build_gui
    gui = build_gui()

Format and encoding choices are persisted in settings.json.
"""
