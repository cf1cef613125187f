"""
BLAST text report parser for pickident.
Streams a pairwise alignment report and collects one ContigRecord per contig
whose hit name contains the search string.
"""

import re
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from pickident.core.exceptions import ConfigError, FormatError
from pickident.core.models import ContigRecord

logger = logging.getLogger(__name__)

IDENTITIES_RE = re.compile(r"Identities\s*=\s*(\d+)/(\d+)\s*\((\d+)%\)")
CONTIG_NUMBER_RE = re.compile(r"(\d+)")

def sanitize_description(text: str) -> str:
    """
    Turn the free text of a hit name into a compact label.

    Non-word characters at either end are dropped and every inner run of
    non-word characters becomes a single underscore.

    :param text: Raw text following the contig number in the hit name.
    :return: Sanitized description, possibly empty.
    """
    text = re.sub(r"^\W+|\W+$", "", text)
    return re.sub(r"\W+", "_", text)

def split_hit_name(name: str) -> Optional[tuple]:
    """
    Split a hit name such as 'contig00042|Drosophila melanogaster' into its
    contig number and description.

    :param name: Hit name without the leading '>'.
    :return: Tuple (contig_id, description) or None if the name has no number.
    """
    match = CONTIG_NUMBER_RE.search(name)
    if not match:
        return None
    return int(match.group(1)), sanitize_description(name[match.end():])

def parse_blast_report(report_path: Union[str, Path], search_string: str) -> Dict[int, ContigRecord]:
    """
    Parse a BLAST text report and index the hits matching the search string.

    Only the first HSP of a hit is used: its 'Identities = n/len (p%)' line gives
    the alignment length and the percent identity, taken as printed. When the
    same contig is hit more than once, the first hit wins.

    :param report_path: Path to the BLAST report.
    :param search_string: Case-insensitive text the hit name must contain.
    :return: A dictionary mapping contig id to ContigRecord, in report order.
    :raises ConfigError: If the search string is empty.
    :raises FormatError: If no hit matched the search string.
    """
    if not search_string:
        raise ConfigError("Must define a search string")
    needle = search_string.lower()

    index: Dict[int, ContigRecord] = {}
    # Hit awaiting its first Identities line: (contig_id, description)
    pending = None
    hits_seen = 0
    duplicates = 0

    with open(report_path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.strip()

            if line.startswith(">"):
                hits_seen += 1
                pending = None
                name = line[1:].strip()
                if needle not in name.lower():
                    continue
                parts = split_hit_name(name)
                if parts is None:
                    logger.debug(f"Hit '{name}' matches '{search_string}' but carries no contig number")
                    continue
                if parts[0] in index:
                    duplicates += 1
                    continue
                pending = parts

            elif line.startswith("Query="):
                pending = None

            elif pending is not None:
                match = IDENTITIES_RE.search(line)
                if match:
                    contig_id, description = pending
                    index[contig_id] = ContigRecord(
                        contig_id=contig_id,
                        description=description,
                        length=int(match.group(2)),
                        percent_identity=int(match.group(3))
                    )
                    pending = None

    if not index:
        raise FormatError(f"No contig IDs found for search string '{search_string}' in {report_path}")

    logger.info(f"Collected {len(index)} contig IDs from {report_path} ({hits_seen} hits in total)")
    if duplicates:
        logger.debug(f"Ignored {duplicates} repeated hits on already collected contigs")

    return index
