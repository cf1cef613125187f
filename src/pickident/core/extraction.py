"""
FASTA extraction for pickident.
Streams the raw reads and the processed contigs once each and collects, for every
relevant contig, its reads followed by the contig itself in Contig<id>.fas.
"""

import os
import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from Bio import SeqIO
from Bio.SeqRecord import SeqRecord

from pickident.core.models import ContigRecord, ExtractionStats
from pickident.core.filtering import build_read_membership_index
from pickident.parsers.fasta_parser import contig_number, stream_fasta, validate_fasta

logger = logging.getLogger(__name__)

def contig_fasta_name(contig_id: int) -> str:
    return f"Contig{contig_id}.fas"

class ContigFileWriter:
    """
    Owns one append-mode output handle per contig for the duration of a run.

    A handle is opened the first time a record is written for its contig. Unless
    no_overwrite is set, an existing Contig<id>.fas is first renamed to
    Contig<id>.fas.bak so the new file only holds this run's records.
    """

    def __init__(self, output_dir: Union[str, Path], no_overwrite: bool = False):
        self.output_dir = Path(output_dir)
        self.no_overwrite = no_overwrite
        self._handles: Dict[int, object] = {}
        self.paths: List[Path] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _open(self, contig_id: int):
        path = self.output_dir / contig_fasta_name(contig_id)
        if path.exists() and not self.no_overwrite:
            backup = path.with_name(path.name + ".bak")
            os.replace(path, backup)
            logger.info(f"Backed up existing {path.name} to {backup.name}")
        handle = open(path, "a", encoding="utf-8")
        self._handles[contig_id] = handle
        self.paths.append(path)
        return handle

    def write(self, contig_id: int, record: SeqRecord):
        handle = self._handles.get(contig_id)
        if handle is None:
            handle = self._open(contig_id)
        SeqIO.write(record, handle, "fasta")

    def close(self):
        for handle in self._handles.values():
            handle.close()
        self._handles.clear()

def collect_reads(
    reads_path: Union[str, Path],
    membership: Dict[str, int],
    writer: ContigFileWriter,
    stats: ExtractionStats
):
    """
    Pass A: append every read listed for a relevant contig to that contig's file.
    The whole file is scanned since reads are not grouped by contig.

    :param reads_path: Path to the raw reads FASTA.
    :param membership: Read lookup {read_id: contig_id}.
    :param writer: Output handles.
    :param stats: Counters updated in place.
    """
    logger.info(f"Going through {reads_path} seeking all reads for the relevant contigs...")
    found: Set[str] = set()
    for record in stream_fasta(reads_path, label="reads"):
        stats.reads_scanned += 1
        owner = membership.get(record.id)
        if owner is None:
            continue
        stats.reads_matched += 1
        found.add(record.id)
        logger.debug(f"Read {record.id} belongs to Contig{owner} (read #{stats.reads_scanned})")
        writer.write(owner, record)

    logger.info(f"Found {stats.reads_matched} matching reads in {stats.reads_scanned} sequences")
    # Repeated read ids in the file must not hide missing ones
    stats.reads_missing = len(membership) - len(found)
    if stats.reads_missing:
        logger.warning(f"{stats.reads_missing} listed reads were not found in {reads_path}")

def collect_contigs(
    contigs_path: Union[str, Path],
    relevant: List[int],
    writer: ContigFileWriter,
    stats: ExtractionStats
):
    """
    Pass B: append each relevant contig to its own file.
    Stops reading as soon as every relevant contig has been found.

    :param contigs_path: Path to the processed contigs FASTA.
    :param relevant: Relevant contig ids.
    :param writer: Output handles.
    :param stats: Counters updated in place.
    """
    logger.info(f"Going through {contigs_path} picking out the relevant contigs...")
    remaining: Set[int] = set(relevant)
    for record in stream_fasta(contigs_path, label="contigs"):
        stats.contigs_scanned += 1
        contig_id = contig_number(record.id)
        if contig_id not in remaining:
            continue
        remaining.discard(contig_id)
        stats.contigs_matched += 1
        logger.debug(f"Found relevant contig {contig_id}, appending to {contig_fasta_name(contig_id)}")
        writer.write(contig_id, record)
        if not remaining:
            logger.debug(f"All relevant contigs found after {stats.contigs_scanned} sequences")
            break

    logger.info(f"Found {stats.contigs_matched} contigs, appended to their respective files")
    if remaining:
        missing = ", ".join(str(cid) for cid in sorted(remaining))
        logger.warning(f"Relevant contigs missing from {contigs_path}: {missing}")

def extract_contig_fastas(
    index: Dict[int, ContigRecord],
    relevant: List[int],
    output_dir: Union[str, Path],
    reads_path: Optional[Union[str, Path]] = None,
    contigs_path: Optional[Union[str, Path]] = None,
    no_overwrite: bool = False
) -> ExtractionStats:
    """
    Write one Contig<id>.fas per relevant contig holding its reads and then the contig.
    Either input may be omitted; the matching pass is then skipped.

    :param index: Contig records keyed by contig id.
    :param relevant: Relevant contig ids in rank order.
    :param output_dir: Directory receiving the Contig<id>.fas files.
    :param reads_path: Optional raw reads FASTA.
    :param contigs_path: Optional processed contigs FASTA.
    :param no_overwrite: Append to existing files instead of backing them up.
    :return: ExtractionStats for both passes.
    """
    stats = ExtractionStats()
    if not relevant:
        logger.info("No relevant contigs, nothing to extract")
        return stats
    if reads_path is None and contigs_path is None:
        logger.info("Neither reads nor contigs file defined, skipping FASTA extraction")
        return stats

    Path(output_dir).mkdir(parents=True, exist_ok=True)
    with ContigFileWriter(output_dir, no_overwrite=no_overwrite) as writer:
        if reads_path is not None:
            validate_fasta(reads_path)
            membership = build_read_membership_index(index, relevant)
            collect_reads(reads_path, membership, writer, stats)
        else:
            logger.info("Reads data file not defined, skipping reads")

        if contigs_path is not None:
            validate_fasta(contigs_path)
            collect_contigs(contigs_path, relevant, writer, stats)
        else:
            logger.info("Contig data file not defined, skipping contigs")

    stats.files_written = [p.name for p in writer.paths]
    for name in stats.files_written:
        logger.info(f"Wrote {name}")
    return stats
