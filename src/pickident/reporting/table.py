"""
Table generation module for pickident.
Renders the ranked contigs into the fixed-column text written to table.txt and the console.
"""

import sys
import logging
from pathlib import Path
from typing import Dict, List, TextIO, Union

import pandas as pd

from pickident.core.models import ContigRecord, RankedContigs

logger = logging.getLogger(__name__)

RELEVANT_COLUMNS = ["ID", "description", "length", "ident%", "#reads", "read IDs"]
OTHER_COLUMNS = RELEVANT_COLUMNS[:-1]
RULE = "-" * 68

def _contig_row(record: ContigRecord, with_reads: bool) -> Dict[str, object]:
    row = {
        "ID": record.contig_id,
        "description": record.description,
        "length": record.length,
        "ident%": record.percent_identity,
        "#reads": record.reads,
    }
    if with_reads:
        row["read IDs"] = " ".join(record.read_ids)
    return row

def _frame_to_text(df: pd.DataFrame, columns: List[str]) -> str:
    if df.empty:
        return "  ".join(columns)
    return df.to_string(index=False, columns=columns, justify="left")

def build_section(index: Dict[int, ContigRecord], contig_ids: List[int], with_reads: bool) -> pd.DataFrame:
    """
    Collect the table rows for a list of contigs, in the given order.

    :param index: Contig records keyed by contig id.
    :param contig_ids: Contig ids to include.
    :param with_reads: Whether to add the space-joined read IDs column.
    :return: A pandas DataFrame with one row per contig.
    """
    columns = RELEVANT_COLUMNS if with_reads else OTHER_COLUMNS
    rows = [_contig_row(index[cid], with_reads) for cid in contig_ids]
    return pd.DataFrame(rows, columns=columns)

def render_table(
    index: Dict[int, ContigRecord],
    ranked: RankedContigs,
    include_other: bool,
    read_threshold: int,
    identity_threshold: int
) -> str:
    """
    Render the summary table. The other contigs are listed without read IDs.

    :param index: Contig records keyed by contig id.
    :param ranked: Relevant and other contig ids in rank order.
    :param include_other: Whether to add the section for the other contigs.
    :param read_threshold: Read threshold used for the caption.
    :param identity_threshold: Identity threshold used for the caption.
    :return: The table as a single string ending in a newline.
    """
    relevant_df = build_section(index, ranked.relevant, with_reads=True)
    lines = [
        f"These contigs have identities of >= {identity_threshold}% and >= {read_threshold} reads "
        f"(sorted by {ranked.sort_key.value}):",
        "",
        RULE,
        _frame_to_text(relevant_df, RELEVANT_COLUMNS),
        "",
    ]

    if include_other:
        other_df = build_section(index, ranked.other, with_reads=False)
        lines += [
            f"These contigs have identities of < {identity_threshold}% or < {read_threshold} reads:",
            "",
            RULE,
            _frame_to_text(other_df, OTHER_COLUMNS),
            "",
        ]

    return "\n".join(lines)

def write_table(text: str, table_path: Union[str, Path], stream: TextIO = None):
    """
    Write the rendered table to table_path and to the console stream.
    Both sinks receive the same string.

    :param text: Output of render_table.
    :param table_path: Path to table.txt.
    :param stream: Console stream, stdout by default.
    """
    table_path = Path(table_path)
    table_path.parent.mkdir(parents=True, exist_ok=True)
    with open(table_path, "w", encoding="utf-8") as f:
        f.write(text)

    stream = stream if stream is not None else sys.stdout
    stream.write(text)
    stream.flush()

    logger.info(f"Tabular output printed into {table_path}")
