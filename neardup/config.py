"""Configuration defaults for the near-duplicate line finder."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class DedupConfig:
    """
    Configuration for one near-duplicate run.

    The defaults reproduce the reference deployment: five-token head/tail windows
    hashed with the multiplicative family, scanned on a single thread.
    """

    window_size: int = 5  # Tokens hashed at each end of a sentence.
    hash_family: str = "multiplicative"  # Signature family used as bucket key ("multiplicative" or "fnv").
    workers: int = 1  # Threads for the pairwise bucket scan; 1 keeps it serial.
    max_print_pairs: int = 30  # Print individual pairs only when fewer than this many were found.
    skip_malformed: bool = False  # Skip unparsable lines instead of aborting the run.
    log_level: str = "WARNING"  # Root log level for the CLI.
    report_path: Optional[Path] = Path("reports/neardup_report.json")  # JSON counters for the run.


DEFAULT_CONFIG = DedupConfig()
