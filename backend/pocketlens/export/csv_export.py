"""
CSV export for pocket tables (the viewer's "Download as CSV").
Header is the first row's keys in order; values with commas, quotes or
newlines are quoted with inner quotes doubled.
"""
from __future__ import annotations

import csv
import io
from typing import Iterable, Union

from pocketlens.engine.records import PocketRecord


def _as_row(item: Union[PocketRecord, dict]) -> dict:
    return item.to_wire() if isinstance(item, PocketRecord) else dict(item)


def records_to_csv(items: Iterable[Union[PocketRecord, dict]]) -> str:
    rows = [_as_row(item) for item in items]
    if not rows:
        return ""

    headers = list(rows[0].keys())
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if row.get(h) is None else str(row.get(h)) for h in headers])
    return buf.getvalue()

