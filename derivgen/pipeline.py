"""
Pipeline - Runs every instruction of an image type over a batch of images.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Mapping, Optional, Sequence

from .batch_progress import BatchProgress
from .batch_stats import BatchStats
from .decision_engine import DecisionEngine
from .derivative import Derivative
from .errors import InvalidTypeError
from .image_engine import ImageEngine
from .instruction import Instruction
from .instruction_registry import InstructionRegistry
from .source_image import SourceImage


@dataclass(frozen=True)
class Step:
    """
    One unit of work in a batch.

    Attributes:
        kind: 'missing_path', 'filtered' or 'run'
        index: Position of the image in the batch
        image: The source image
        instruction: The instruction (None for 'missing_path')
    """
    kind: str
    index: int
    image: SourceImage
    instruction: Optional[Instruction] = None


def iter_steps(
    index: int,
    image: SourceImage,
    instructions: Sequence[Instruction]
) -> Iterator[Step]:
    """
    Walk one image's instructions in order.

    An image without a path yields a single 'missing_path' step.
    """
    if not image.path:
        yield Step('missing_path', index, image)
        return

    for instruction in instructions:
        if not image.wants(instruction.label):
            yield Step('filtered', index, image, instruction)
        else:
            yield Step('run', index, image, instruction)


def _to_image_list(images: Any) -> List[Any]:
    """Wrap a single image in a list. Entries are converted one at a time."""
    if images is None:
        return []
    if isinstance(images, (SourceImage, Mapping, str)):
        return [images]
    return list(images)


class Pipeline:
    """
    Produces derivatives for a batch of images of one type.

    Pairs run strictly one after another. The first error stops the batch.

    `stats` describes the most recent process() call only. Callers running
    batches concurrently need one Pipeline each; they may share a registry.
    """

    MISSING_PATH_MESSAGE = "Image at index {index} has no path specified, so it was not processed."

    def __init__(
        self,
        registry: InstructionRegistry,
        image_engine: Optional[ImageEngine] = None,
        dry_run: bool = False,
        progress: Optional[BatchProgress] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            registry: Instructions to apply, by image type
            image_engine: Engine performing pixel work (default: ImageEngine())
            dry_run: If True, decide but don't write any files
            progress: Optional progress tracker
            logger: Optional logger instance
        """
        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)
        self.decision_engine = DecisionEngine(image_engine, dry_run=dry_run, logger=self.logger)
        self.dry_run = dry_run
        self.progress = progress
        self.stats = BatchStats()

    def process(
        self,
        image_type: Optional[str] = None,
        images: Any = None,
        callback: Optional[Callable[..., Any]] = None
    ) -> None:
        """
        Generate derivatives for every image and every instruction of a type.

        The callback is called exactly once: callback(error) if the type is
        unknown or a pair fails, otherwise callback(None, derivatives, messages).
        Without a callable callback nothing happens.

        Args:
            image_type: Registered image type (e.g. 'product')
            images: A SourceImage, mapping or path, or a list of them
            callback: Completion callback
        """
        if not callable(callback):
            return None

        if image_type not in self.registry:
            self.logger.error(f"Invalid image type: {image_type}")
            callback(InvalidTypeError(image_type))
            return None

        images = _to_image_list(images)
        instructions = self.registry.get(image_type)
        self.stats = BatchStats(image_type=image_type, total_images=len(images))

        mode_str = " [DRY RUN]" if self.dry_run else ""
        self.logger.info(
            f"Processing {len(images)} {image_type} images with "
            f"{len(instructions)} instructions{mode_str}"
        )

        derivatives: List[Derivative] = []
        messages: List[str] = []
        error = None

        for index, value in enumerate(images):
            image = SourceImage()
            try:
                image = SourceImage.from_value(value)
                for step in iter_steps(index, image, instructions):
                    self._handle_step(step, derivatives, messages)
                    if self.progress:
                        self.progress.on_progress_update(self.stats)
            except Exception as e:
                self.logger.error(f"Error processing image at index {index} ({image.path}): {e}")
                self.stats.record_error(e)
                if self.progress:
                    self.progress.on_error(image, e)
                    self.progress.on_progress_update(self.stats)
                error = e
                break

        if error is not None:
            callback(error)
            return None

        self.logger.info(f"Batch complete: {self.stats.summary()}")
        callback(None, derivatives, messages)
        return None

    def _handle_step(
        self,
        step: Step,
        derivatives: List[Derivative],
        messages: List[str]
    ) -> None:
        """Run one step, appending its derivative or message."""
        if step.kind == 'missing_path':
            message = self.MISSING_PATH_MESSAGE.format(index=step.index)
            self.logger.warning(message)
            self._add_message(message, messages)
            return

        if step.kind == 'filtered':
            self.logger.debug(f"Skipping {step.instruction.label} for {step.image.path}: label not requested")
            self.stats.filtered += 1
            if self.progress:
                self.progress.on_filtered(step.image, step.instruction)
            return

        result = self.decision_engine.run(step.image, step.instruction)

        if result.derivative is not None:
            derivatives.append(result.derivative)
            self.stats.record_derivative(result.derivative.action)
            if self.progress:
                self.progress.on_derivative(result.derivative)

        if result.message is not None:
            self.logger.info(result.message)
            self._add_message(result.message, messages)

    def _add_message(self, message: str, messages: List[str]) -> None:
        messages.append(message)
        self.stats.messages += 1
        if self.progress:
            self.progress.on_message(message)
