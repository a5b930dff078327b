"""Export retained log lines as plain text."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from logtails.models import Line

_TAB = "    "


class ExportFormat(StrEnum):
    """Supported export formats."""

    RAW = "raw"


def export_text(lines: Iterable[Line]) -> str:
    """Serialize lines into one blob, newline-terminated, tabs expanded to four spaces."""
    return "".join(line.text.replace("\t", _TAB) + "\n" for line in lines)


def _export_raw(lines: list[Line], output_path: Path) -> int:
    """Export lines as raw text, one per line."""
    output_path.write_text(export_text(lines), encoding="utf-8")
    return len(lines)


_EXPORTERS: dict[ExportFormat, Callable[[list[Line], Path], int]] = {
    ExportFormat.RAW: _export_raw,
}


def export_lines(lines: list[Line], fmt: ExportFormat, output_path: Path) -> int:
    """Export lines to a file in the specified format. Returns the number of lines written."""
    exporter = _EXPORTERS.get(fmt)
    if exporter is None:
        msg = f"Export format '{fmt}' not yet implemented"
        raise NotImplementedError(msg)
    return exporter(lines, output_path)
