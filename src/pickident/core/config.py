"""
Run configuration for pickident.
Holds the validated settings the pipeline stages consume.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from pickident.core.exceptions import ConfigError
from pickident.core.models import SortKey

DEFAULT_READ_THRESHOLD = 10
DEFAULT_IDENTITY_THRESHOLD = 100

@dataclass
class PipelineConfig:
    """
    Settings for a single pickident run.
    """
    search_string: str
    blast_path: Path
    trace_path: Optional[Path]
    reads_path: Optional[Path] = None
    contigs_path: Optional[Path] = None
    output_dir: Path = Path(".")
    read_threshold: int = DEFAULT_READ_THRESHOLD
    identity_threshold: int = DEFAULT_IDENTITY_THRESHOLD
    sort_key: Union[SortKey, str] = SortKey.READS
    include_other: bool = False
    no_overwrite: bool = False

    def validate(self) -> "PipelineConfig":
        """
        Check the settings before any file is touched.

        :return: The same config, with the sort key normalised to a SortKey.
        :raises ConfigError: If a required value is missing or out of range.
        """
        if not self.search_string or not self.search_string.strip():
            raise ConfigError("Must define a search string")
        self.search_string = self.search_string.strip()

        if not self.blast_path:
            raise ConfigError("No BLAST result file provided")
        if not self.trace_path:
            raise ConfigError("Contig trace list not defined")

        for name in ("read_threshold", "identity_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")

        if self.read_threshold < 0:
            raise ConfigError(f"Read threshold must be non-negative, got {self.read_threshold}")
        # 101 is accepted so that nothing can be relevant
        if not 0 <= self.identity_threshold <= 101:
            raise ConfigError(f"Identity threshold must be between 0 and 101, got {self.identity_threshold}")

        if not isinstance(self.sort_key, SortKey):
            try:
                self.sort_key = SortKey(self.sort_key)
            except ValueError:
                choices = ", ".join(k.value for k in SortKey)
                raise ConfigError(f"Unknown sort key {self.sort_key!r} (choose from {choices})") from None

        self.blast_path = Path(self.blast_path)
        self.trace_path = Path(self.trace_path)
        self.output_dir = Path(self.output_dir)
        if self.reads_path:
            self.reads_path = Path(self.reads_path)
        if self.contigs_path:
            self.contigs_path = Path(self.contigs_path)
        return self
