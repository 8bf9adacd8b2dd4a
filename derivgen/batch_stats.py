"""
BatchStats - Statistics for a single process() run.
"""

import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from .derivative import Action


@dataclass
class BatchStats:
    """
    Statistics for a single process() run.

    Attributes:
        image_type: Image type being processed
        total_images: Number of images in the batch
        derivatives: Derivatives produced
        messages: Messages produced (missing path, too small)
        filtered: Pairs skipped by an image's label restriction
        errors: Hard errors (0 or 1, the batch stops at the first)
        actions: Derivatives produced per action
        start_time: Start timestamp
        error_detail: Error message if the batch failed
    """
    image_type: str = ''
    total_images: int = 0
    derivatives: int = 0
    messages: int = 0
    filtered: int = 0
    errors: int = 0
    actions: Counter = field(default_factory=Counter)
    start_time: float = field(default_factory=time.time)
    error_detail: Optional[str] = None

    def record_derivative(self, action: Action) -> None:
        self.derivatives += 1
        self.actions[action] += 1

    def record_error(self, error: BaseException) -> None:
        self.errors += 1
        self.error_detail = str(error)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_second(self) -> float:
        """Derivatives produced per second."""
        if self.elapsed_seconds > 0:
            return self.derivatives / self.elapsed_seconds
        return 0.0

    @property
    def completed_pairs(self) -> int:
        """Pairs attempted so far (derivatives + messages + filtered + errors)."""
        return self.derivatives + self.messages + self.filtered + self.errors

    def summary(self) -> str:
        """One-line summary for logging."""
        parts = ', '.join(
            f"{count} {action.value}" for action, count in sorted(
                self.actions.items(), key=lambda item: item[0].value
            )
        )
        breakdown = f" ({parts})" if parts else ""
        return (
            f"{self.derivatives} derivatives{breakdown}, {self.messages} messages, "
            f"{self.filtered} filtered, {self.errors} errors "
            f"({self.elapsed_seconds:.1f}s)"
        )
