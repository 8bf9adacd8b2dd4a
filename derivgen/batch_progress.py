"""
BatchProgress - Reports per-pair progress while a batch runs.
"""

import logging
from typing import Optional

from .batch_stats import BatchStats
from .derivative import Derivative
from .instruction import Instruction
from .source_image import SourceImage


class BatchProgress:
    """
    Tracks and displays batch progress with optional per-file output.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each pair as it's processed
            log_interval: Log summary progress every N pairs (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0

    def on_derivative(self, derivative: Derivative) -> None:
        """Called when a derivative is produced."""
        if self.show_files:
            print(f"  [OK] {derivative.format_status()}")

    def on_message(self, message: str) -> None:
        """Called when a pair produces a message instead of a derivative."""
        if self.show_files:
            print(f"  [SKIP] {message}")

    def on_filtered(self, image: SourceImage, instruction: Instruction) -> None:
        """Called when an image's labels exclude an instruction."""
        if self.show_files:
            print(f"  [FILTERED] {image.path} -> {instruction.label} not requested")

    def on_error(self, image: SourceImage, error: BaseException) -> None:
        """Called when the batch stops on an error."""
        if self.show_files:
            print(f"  [ERROR] {image.path} -> {error}")

    def on_progress_update(self, stats: BatchStats) -> None:
        """
        Called after each pair to report overall progress.

        Args:
            stats: Current batch statistics
        """
        total_done = stats.completed_pairs

        if not self.show_files and total_done - self.last_logged >= self.log_interval:
            self.last_logged = total_done
            self.logger.info(
                f"Progress: {stats.derivatives} derivatives, {stats.messages} messages "
                f"({stats.rate_per_second:.1f}/s)"
            )

    def __call__(self, stats: BatchStats) -> None:
        """Allow use as callback for stats updates."""
        self.on_progress_update(stats)
