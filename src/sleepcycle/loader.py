"""Load monitoring batches from JSON-lines files for offline analysis."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from sleepcycle.decoders.monitoring import MonitoringBatch, MonitoringDecoder

logger = logging.getLogger(__name__)


def load_batches(path: str | Path) -> list[MonitoringBatch]:
    """Read a .jsonl file with one monitoring batch per line.

    Blank lines are ignored.  Lines that are not valid JSON or do not
    describe a batch are skipped with a warning.

    Returns:
        The decoded batches in file order.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("File not found: %s", path)
        return []

    batches: list[MonitoringBatch] = []
    skipped = 0

    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue

            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("%s:%d: invalid JSON, skipping", path.name, line_num)
                skipped += 1
                continue

            batch = MonitoringDecoder.decode(entry)
            if batch is None:
                logger.warning("%s:%d: not a monitoring batch, skipping", path.name, line_num)
                skipped += 1
                continue

            batches.append(batch)

    logger.debug(
        "Loaded %d batches (%d samples) from %s, %d lines skipped",
        len(batches), sum(len(b.samples) for b in batches), path.name, skipped,
    )
    return batches


def write_batches(path: str | Path, batches: Iterable[MonitoringBatch]) -> Path:
    """Write batches in the format read by :func:`load_batches`."""
    path = Path(path)
    with open(path, "w") as f:
        for batch in batches:
            f.write(json.dumps(MonitoringDecoder.encode(batch)) + "\n")
    return path
