"""
Contig trace list parser for pickident.
Joins read counts and read IDs onto the contigs collected from the BLAST report.
"""

import re
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from pickident.core.exceptions import ConfigError
from pickident.core.models import ContigRecord, JoinStats

logger = logging.getLogger(__name__)

# Contig id is the first integer, so both "42" and "contig00042" join to 42
TRACE_LINE_RE = re.compile(r"^\D*(\d+)\s+(\d+)\s+(.+)$")
READ_ID_SEPARATOR = ", "

def join_trace_list(index: Dict[int, ContigRecord], trace_path: Optional[Union[str, Path]]) -> JoinStats:
    """
    Read the trace list and set read_count and read_ids on every indexed contig
    it mentions. Values are assigned, not accumulated, so joining the same file
    twice leaves the records unchanged.

    :param index: Contig records keyed by contig id; updated in place.
    :param trace_path: Path to the trace list (header line, then
        '<contig id> <#reads> <read id>, <read id>, ...' rows).
    :return: JoinStats with matched, total and skipped line counts.
    :raises ConfigError: If no trace list path was given.
    """
    if not trace_path:
        raise ConfigError("Contig trace list not defined")

    stats = JoinStats()
    with open(trace_path, "r", encoding="utf-8", errors="replace") as f:
        # First line is a header
        next(f, None)

        for line_number, line in enumerate(f, start=2):
            line = line.strip()
            if not line:
                continue
            stats.total += 1

            match = TRACE_LINE_RE.match(line)
            if not match:
                stats.skipped += 1
                logger.debug(f"Skipping malformed trace line {line_number} in {trace_path}: {line[:60]!r}")
                continue

            contig_id = int(match.group(1))
            record = index.get(contig_id)
            if record is None:
                continue

            record.read_count = int(match.group(2))
            record.read_ids = match.group(3).split(READ_ID_SEPARATOR)
            stats.matched += 1

    logger.info(f"{stats.matched}/{stats.total} contigs in {trace_path} matched the BLAST hits")
    if stats.skipped:
        logger.info(f"Skipped {stats.skipped} malformed lines in {trace_path}")

    return stats
