"""
Logging utilities for pickident.
Mirrors progress messages to the console and to log.txt.
"""

import logging
import queue
import sys
from pathlib import Path
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

LOG_FILE_NAME = "log.txt"

def setup_logging(output_dir: Path, verbose: bool = False) -> QueueListener:
    """
    Setup logging to both stdout (INFO) and log.txt (DEBUG) in output directory.
    Records go through a queue so that writing to both handlers never
    interleaves partial lines.

    :param output_dir: Directory to save log.txt.
    :param verbose: Also print DEBUG messages to the console.
    :return: The started QueueListener; call stop() when the run is over.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    log_file = output_dir / LOG_FILE_NAME

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # Console handler (INFO)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(formatter)

    # File handler (DEBUG), truncated each run
    file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    log_queue = queue.Queue(-1)
    listener = QueueListener(log_queue, console_handler, file_handler, respect_handler_level=True)
    listener.start()

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    # Remove existing handlers
    for h in root.handlers[:]:
        root.removeHandler(h)
    root.addHandler(QueueHandler(log_queue))

    root.info(f"Logging initialized. Log file: {log_file}")

    return listener

def flush_logging(listener: Optional[QueueListener]):
    """
    Block until every queued record has been handled, so that text written
    directly to stdout afterwards cannot interleave with earlier log lines.

    :param listener: Listener returned by setup_logging, or None.
    """
    if listener is None:
        return
    listener.stop()
    listener.start()
