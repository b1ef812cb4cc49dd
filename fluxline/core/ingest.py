"""
Batch ingestion of line protocol text

Decodes a body of newline-separated lines and saves every field as its own
point. What happens on a malformed line is the caller's choice: abort the
rest of the batch (the default) or skip the line with a warning.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Literal

from fluxline.core.store import PointStore
from fluxline.protocol.errors import CodecError
from fluxline.protocol.parser import decode

logger = logging.getLogger(__name__)


@dataclass
class WriteSummary:
    """Counts for one ingested batch"""

    lines: int = 0
    points: int = 0
    skipped: int = 0


def write_lines(
    body: str,
    store: PointStore,
    on_error: Literal["abort", "skip"] = "abort",
) -> WriteSummary:
    """
    Decode a batch of lines and save their fields

    Args:
        body: Line protocol text, one point per line. Blank lines are ignored.
        store: Store receiving one save() per field
        on_error: "abort" raises on the first malformed line, leaving lines
            before it saved; "skip" warns and continues

    Returns:
        WriteSummary of decoded lines, saved points and skipped lines

    Raises:
        CodecError: On a malformed line when on_error is "abort"
        ValueError: If on_error is not recognized
    """
    if on_error not in ("abort", "skip"):
        raise ValueError(f"on_error must be 'abort' or 'skip', got {on_error!r}")

    summary = WriteSummary()

    for line_num, line in enumerate(body.strip().split("\n"), start=1):
        line = line.strip()
        if not line:
            continue

        try:
            record = decode(line)
        except CodecError as e:
            if on_error == "abort":
                raise
            warnings.warn(f"Skipping invalid line {line_num}: {e}", UserWarning)
            summary.skipped += 1
            continue

        for field, value in record.float_fields().items():
            store.save(record.measurement, field, value, record.tags, record.timestamp)
            summary.points += 1
        summary.lines += 1

    logger.debug(
        "Ingested %d lines (%d points, %d skipped)",
        summary.lines,
        summary.points,
        summary.skipped,
    )
    return summary
