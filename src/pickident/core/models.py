"""
Data models for pickident.
Defines the ContigRecord class, the SortKey enum and the per-stage result types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

class SortKey(Enum):
    """
    Enum naming the numeric field contigs are ranked by.
    The value is the name used on the command line.
    """
    LENGTH = "length"
    IDENTITY = "identity"
    READS = "reads"

    @property
    def attribute(self) -> str:
        return {
            SortKey.LENGTH: "length",
            SortKey.IDENTITY: "percent_identity",
            SortKey.READS: "reads",
        }[self]

@dataclass
class ContigRecord:
    """
    Data class representing one contig hit from the alignment report,
    enriched with its read support from the trace list.
    """
    # Report Attributes
    contig_id: int
    description: str
    length: int
    percent_identity: int

    # Trace-Specific Attributes
    read_count: Optional[int] = None
    read_ids: List[str] = field(default_factory=list)

    @property
    def is_traced(self) -> bool:
        return self.read_count is not None

    @property
    def reads(self) -> int:
        # Untraced contigs rank and filter as if they had no reads
        return self.read_count if self.read_count is not None else 0

@dataclass
class JoinStats:
    """Counts reported by the trace join."""
    matched: int = 0
    total: int = 0
    skipped: int = 0

@dataclass
class RankedContigs:
    """
    Contig ids split into the relevant and other buckets, both in rank order.
    """
    sort_key: SortKey
    relevant: List[int] = field(default_factory=list)
    other: List[int] = field(default_factory=list)

@dataclass
class ExtractionStats:
    """Counts reported by the two FASTA extraction passes."""
    reads_scanned: int = 0
    reads_matched: int = 0
    reads_missing: int = 0
    contigs_scanned: int = 0
    contigs_matched: int = 0
    files_written: List[str] = field(default_factory=list)

@dataclass
class PipelineResult:
    """
    Everything a run produced, returned by the pipeline driver.
    """
    index: Dict[int, ContigRecord]
    join: JoinStats
    ranked: RankedContigs
    table_text: str
    extraction: ExtractionStats
