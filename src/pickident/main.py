"""
Main entry point for the pickident command-line tool.
This module orchestrates the pipeline, from parsing the BLAST report and the
contig trace list to writing the summary table and the per-contig FASTA files.
"""

import argparse
import logging
import sys
import time
from logging.handlers import QueueListener
from pathlib import Path
from typing import List, Optional

from pickident.core.config import PipelineConfig, DEFAULT_READ_THRESHOLD, DEFAULT_IDENTITY_THRESHOLD
from pickident.core.exceptions import PickIdentError
from pickident.core.extraction import extract_contig_fastas
from pickident.core.filtering import rank_and_filter
from pickident.core.models import PipelineResult, SortKey
from pickident.parsers.blast_parser import parse_blast_report
from pickident.parsers.trace_parser import join_trace_list
from pickident.reporting.table import render_table, write_table
from pickident.utils.logging import flush_logging, setup_logging

__version__ = "0.3.0"

TABLE_FILE_NAME = "table.txt"

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pickident",
        description="pickident: Pick taxon-specific contigs and their reads from BLAST results.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Mandatory
    parser.add_argument("-s", "--search", required=True, help="Search string the BLAST hit name must contain (case-insensitive)")
    parser.add_argument("-B", "--blast", required=True, help="BLAST result file (text report)")
    parser.add_argument("-T", "--trace", required=True, help="Contig trace list")

    # Optional
    parser.add_argument("-R", "--reads", help="Reads (raw data) FASTA file")
    parser.add_argument("-C", "--contigs", help="Contigs (processed) FASTA file")
    parser.add_argument("-o", "--output", default=".", help="Output directory for results")

    # Configurable
    parser.add_argument("-t", "--read-threshold", type=int, default=DEFAULT_READ_THRESHOLD, help="Minimum number of reads")
    parser.add_argument("-i", "--identity-threshold", type=int, default=DEFAULT_IDENTITY_THRESHOLD, help="Minimum percent identity")
    parser.add_argument("--sort", choices=[k.value for k in SortKey], default=SortKey.READS.value, help="Field to sort the table by (descending)")
    parser.add_argument("-a", "--all", action="store_true", help="Also list the contigs below the thresholds in the table")
    parser.add_argument("-n", "--no-overwrite", action="store_true", help="Append to existing Contig files instead of backing them up")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug messages to the console")

    return parser

def config_from_args(args: argparse.Namespace) -> PipelineConfig:
    return PipelineConfig(
        search_string=args.search,
        blast_path=Path(args.blast),
        trace_path=Path(args.trace),
        reads_path=Path(args.reads) if args.reads else None,
        contigs_path=Path(args.contigs) if args.contigs else None,
        output_dir=Path(args.output),
        read_threshold=args.read_threshold,
        identity_threshold=args.identity_threshold,
        sort_key=SortKey(args.sort),
        include_other=args.all,
        no_overwrite=args.no_overwrite
    )

def run_pipeline(config: PipelineConfig, log_listener: Optional[QueueListener] = None) -> PipelineResult:
    """
    Run every stage in order. Any error aborts the run; files already written
    by earlier stages are left in place.

    :param config: Run settings; validated here before any file is opened.
    :param log_listener: Logging listener drained before the table is printed.
    :return: PipelineResult with the index, counters and rendered table.
    """
    config.validate()
    logger.info(f"Search string: {config.search_string}")
    logger.info(f"Reads threshold: {config.read_threshold}")
    logger.info(f"Identity threshold: {config.identity_threshold}")

    # Phase 1: BLAST report
    logger.info(f"Phase 1: Parsing BLAST report {config.blast_path}...")
    index = parse_blast_report(config.blast_path, config.search_string)

    # Phase 2: Trace list
    logger.info(f"Phase 2: Joining trace list {config.trace_path}...")
    join_stats = join_trace_list(index, config.trace_path)

    # Phase 3: Ranking
    logger.info(f"Phase 3: Sorting by {config.sort_key.value} and filtering...")
    ranked = rank_and_filter(index, config.sort_key, config.read_threshold, config.identity_threshold)

    # Phase 4: Table
    logger.info("Phase 4: Writing table...")
    table_text = render_table(index, ranked, config.include_other, config.read_threshold, config.identity_threshold)
    flush_logging(log_listener)
    write_table(table_text, config.output_dir / TABLE_FILE_NAME)

    # Phase 5: FASTA extraction
    logger.info("Phase 5: Extracting reads and contigs...")
    extraction = extract_contig_fastas(
        index,
        ranked.relevant,
        config.output_dir,
        reads_path=config.reads_path,
        contigs_path=config.contigs_path,
        no_overwrite=config.no_overwrite
    )

    return PipelineResult(
        index=index,
        join=join_stats,
        ranked=ranked,
        table_text=table_text,
        extraction=extraction
    )

def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    output_dir = Path(args.output)
    log_listener = setup_logging(output_dir, verbose=args.verbose)

    started = time.perf_counter()
    try:
        logger.info(f"Starting pickident {__version__}...")
        run_pipeline(config_from_args(args), log_listener)
        logger.info(f"Pipeline complete in {time.perf_counter() - started:.2f}s. Results saved in {output_dir}")
    except (PickIdentError, OSError, ValueError) as e:
        logger.error(f"Critical failure: {e}")
        sys.exit(1)
    finally:
        log_listener.stop()

if __name__ == "__main__":
    main()
