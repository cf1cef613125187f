"""
FASTA file helpers for pickident.
Handles streaming sequence reading and contig number extraction.
"""

import re
import logging
from pathlib import Path
from typing import Iterator, Optional, Union

from Bio import SeqIO
from Bio.SeqRecord import SeqRecord

from pickident.core.exceptions import FormatError

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1000

def contig_number(identifier: str) -> Optional[int]:
    """
    Extract the leading integer from a sequence identifier, e.g. 42 from 'Contig42'.

    :param identifier: Sequence identifier.
    :return: The first integer in the identifier, or None if there is none.
    """
    match = re.search(r"\d+", identifier)
    return int(match.group(0)) if match else None

def validate_fasta(fasta_path: Union[str, Path]):
    """
    Check that the first non-blank line of a file is a FASTA header.

    :param fasta_path: Path to the FASTA file.
    :raises FormatError: If the file does not look like FASTA.
    """
    with open(fasta_path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            if not line.strip():
                continue
            if line.startswith(">"):
                return
            break
    raise FormatError(f"{fasta_path} is not a valid FASTA file")

def stream_fasta(fasta_path: Union[str, Path], label: str = "sequences") -> Iterator[SeqRecord]:
    """
    Yield FASTA records one at a time without loading the file into memory.
    Logs progress every PROGRESS_INTERVAL records.

    :param fasta_path: Path to the FASTA file.
    :param label: Noun used in progress messages.
    :return: Iterator of Biopython SeqRecord objects.
    """
    count = 0
    # Handle is closed even when the caller stops iterating early
    with open(fasta_path, "r", encoding="utf-8", errors="replace") as handle:
        for record in SeqIO.parse(handle, "fasta"):
            count += 1
            if count % PROGRESS_INTERVAL == 0:
                logger.debug(f"{record.id}... ({count} {label} so far)")
            yield record
