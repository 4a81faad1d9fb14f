"""Load-profile CSV template export and import.

The exchange format is a two-column table with a header row::

    Hour,Load_kW
    0,200
    1,200
    ...

Import is forgiving: unparsable or non-finite values fall back to a
default demand, negatives are clamped to zero, and short files are padded
so the result always holds exactly 24 values.
"""

from __future__ import annotations

import csv
import io
import math
from collections.abc import Sequence

from hybrid_engine.load.load_profile import HOURS_PER_DAY

DEFAULT_LOAD_KW = 500.0


def _format_kw(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(round(value, 6))


def export_load_csv(hourly_kw: Sequence[float]) -> str:
    """Render 24 hourly values as ``Hour,Load_kW`` CSV text."""
    values = list(hourly_kw)
    if len(values) != HOURS_PER_DAY:
        raise ValueError(
            f"Expected {HOURS_PER_DAY} hourly values, got {len(values)}"
        )

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["Hour", "Load_kW"])
    for hour, value in enumerate(values):
        writer.writerow([hour, _format_kw(value)])
    return buf.getvalue()


def parse_load_csv(csv_text: str, default_kw: float = DEFAULT_LOAD_KW) -> list[float]:
    """Parse ``Hour,Load_kW`` CSV text into exactly 24 non-negative values.

    The first line is treated as a header.  The second column of each
    subsequent row is read; rows beyond the 24th are ignored.
    """
    lines = csv_text.strip().splitlines()[1:]
    reader = csv.reader(lines)

    values: list[float] = []
    for row in reader:
        if len(values) >= HOURS_PER_DAY:
            break
        try:
            value = float(row[1])
        except (IndexError, ValueError):
            value = default_kw
        if not math.isfinite(value):
            value = default_kw
        values.append(max(0.0, value))

    while len(values) < HOURS_PER_DAY:
        values.append(default_kw)

    return values
