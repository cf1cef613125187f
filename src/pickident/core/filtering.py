"""
Core ranking and filtering logic for pickident.
Sorts the joined contigs, splits them into relevant and other contigs and
builds the read lookup used by the FASTA extraction.
"""

import logging
from typing import Dict, List

from pickident.core.config import DEFAULT_IDENTITY_THRESHOLD, DEFAULT_READ_THRESHOLD
from pickident.core.models import ContigRecord, RankedContigs, SortKey

logger = logging.getLogger(__name__)

def is_relevant(record: ContigRecord, read_threshold: int, identity_threshold: int) -> bool:
    """
    A contig is relevant when it has trace data, enough reads and enough identity.
    """
    return (
        record.is_traced
        and record.read_count >= read_threshold
        and record.percent_identity >= identity_threshold
    )

def rank_and_filter(
    index: Dict[int, ContigRecord],
    sort_key: SortKey = SortKey.READS,
    read_threshold: int = DEFAULT_READ_THRESHOLD,
    identity_threshold: int = DEFAULT_IDENTITY_THRESHOLD
) -> RankedContigs:
    """
    Sort contigs by the chosen field (descending) and split them by the thresholds.

    The sort is stable, so contigs with equal values keep the order in which
    they were read from the report.

    :param index: Contig records keyed by contig id.
    :param sort_key: Field to rank by.
    :param read_threshold: Minimum number of reads for a relevant contig.
    :param identity_threshold: Minimum percent identity for a relevant contig.
    :return: RankedContigs with both buckets in rank order.
    """
    attribute = sort_key.attribute
    # sorted() is stable with reverse=True as well
    ranked_ids = sorted(index, key=lambda cid: getattr(index[cid], attribute), reverse=True)

    result = RankedContigs(sort_key=sort_key)
    for contig_id in ranked_ids:
        if is_relevant(index[contig_id], read_threshold, identity_threshold):
            result.relevant.append(contig_id)
        else:
            result.other.append(contig_id)

    logger.info(
        f"{len(result.relevant)} contigs have >= {read_threshold} reads and >= {identity_threshold}% identity "
        f"({len(result.other)} other contigs)"
    )
    return result

def build_read_membership_index(index: Dict[int, ContigRecord], relevant: List[int]) -> Dict[str, int]:
    """
    Map every read ID of the relevant contigs to the contig that owns it.

    A read listed under several relevant contigs stays with the contig that
    ranks first; each conflict is logged.

    :param index: Contig records keyed by contig id.
    :param relevant: Relevant contig ids in rank order.
    :return: A dictionary {read_id: contig_id}.
    """
    membership: Dict[str, int] = {}
    conflicts = 0
    for contig_id in relevant:
        for read_id in index[contig_id].read_ids:
            owner = membership.get(read_id)
            if owner is None:
                membership[read_id] = contig_id
            elif owner != contig_id:
                conflicts += 1
                logger.warning(f"Read {read_id} is listed for Contig{owner} and Contig{contig_id}; keeping Contig{owner}")

    logger.debug(f"Read lookup holds {len(membership)} read IDs for {len(relevant)} relevant contigs")
    if conflicts:
        logger.warning(f"{conflicts} read IDs are shared between relevant contigs")
    return membership
