"""
Pipe-separated text table alignment.

Aligns columns by terminal display width while keeping ANSI color codes and
OSC 8 hyperlinks in the output. Lines without the expected number of columns
(headers, messages) pass through untouched.
"""

from __future__ import annotations

import re

from wcwidth import wcswidth

# CSI (color etc.): ESC [ ... cmd
CSI_RE = re.compile(r'\x1b\[[0-?]*[ -/]*[@-~]')
# OSC 8 hyperlinks: ESC ] 8 ; params ; URI ST ... TEXT ... ESC ] 8 ; ; ST
OSC8_OPEN_RE = re.compile(r'\x1b\]8;[^\\]*\\')
OSC8_CLOSE_RE = re.compile(r'\x1b\]8;;\\')

SEPARATOR = "|"


def strip_control_for_width(s: str) -> str:
    # Remove only the control sequences, not the link text
    s = OSC8_OPEN_RE.sub('', s)
    s = OSC8_CLOSE_RE.sub('', s)
    s = CSI_RE.sub('', s)
    return s


def display_width(s: str) -> int:
    visible = strip_control_for_width(s)
    w = wcswidth(visible)
    if w < 0:
        w = len(visible)  # non-printable characters left over
    return w


def split_row(line: str, sep: str = SEPARATOR) -> list[str]:
    return [cell.strip() for cell in line.split(sep)]


def compute_col_widths(rows: list[list[str]]) -> list[int]:
    if not rows:
        return []
    ncol = max(len(r) for r in rows)
    widths = [0] * ncol
    for r in rows:
        for i, cell in enumerate(r):
            widths[i] = max(widths[i], display_width(cell))
    return widths


def format_row(cells: list[str], widths: list[int], joiner: str = " | ") -> str:
    """Pad every cell but the last to its column width."""
    padded = []
    for i, cell in enumerate(cells):
        if i == len(cells) - 1:
            padded.append(cell)
        else:
            padded.append(cell + " " * (widths[i] - display_width(cell)))
    return joiner.join(padded)


def format_table(text: str, columns: int = 3, sep: str = SEPARATOR) -> str:
    """
    Align every line of `text` that splits into exactly `columns` cells.

    Leading indentation of a row is preserved and excluded from alignment.

    Args:
        text: Lines of pipe-separated cells
        columns: Number of cells a line must have to be aligned
        sep: Cell separator

    Returns:
        Text with aligned rows
    """
    lines = text.split("\n")
    parsed: list[tuple[str, list[str]] | None] = []
    for line in lines:
        cells = split_row(line, sep)
        if len(cells) != columns:
            parsed.append(None)
            continue
        indent = line[:len(line) - len(line.lstrip())]
        parsed.append((indent, cells))

    widths = compute_col_widths([p[1] for p in parsed if p is not None])

    out = []
    for line, item in zip(lines, parsed):
        if item is None:
            out.append(line)
        else:
            indent, cells = item
            out.append(indent + format_row(cells, widths))
    return "\n".join(out)
