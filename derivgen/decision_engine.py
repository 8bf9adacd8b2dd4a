"""
DecisionEngine - Decides and performs the action for one image/instruction pair.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .derivative import Action, Derivative
from .image_engine import ImageEngine
from .instruction import Instruction
from .source_image import SourceImage


@dataclass(frozen=True)
class DecisionResult:
    """
    Outcome of one pair: a derivative, or a message saying why there is none.

    Attributes:
        derivative: The produced derivative, if any
        message: Human-readable reason no derivative was produced
    """
    derivative: Optional[Derivative] = None
    message: Optional[str] = None


def target_path(image_path: str, label: str) -> str:
    """
    Output path for a derivative: <dir>/<stem>-<label><ext>.

    The derivative sits next to its source and keeps the source's extension.
    """
    directory, filename = os.path.split(image_path)
    stem, ext = os.path.splitext(filename)
    return os.path.join(directory, f"{stem}-{label}{ext}")


class DecisionEngine:
    """
    Chooses between copy, resize and crop for a single image and instruction,
    then runs it through the image engine.

    Errors from the image engine are never caught here.
    """

    TOO_SMALL_MESSAGE = "Image dimensions are too small, so {label} image not created for {filename}"

    def __init__(
        self,
        image_engine: Optional[ImageEngine] = None,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize decision engine.

        Args:
            image_engine: Engine performing pixel work (default: ImageEngine())
            dry_run: If True, decide but don't write any files
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.engine = image_engine or ImageEngine(logger=self.logger)
        self.dry_run = dry_run

    @staticmethod
    def decide(
        image: SourceImage,
        instruction: Instruction,
        width: int,
        height: int
    ) -> Action:
        """
        Pick the action for a source of the given pixel size.

        Args:
            image: Source image (only its crop override is consulted)
            instruction: Normalized instruction
            width: Source width in pixels
            height: Source height in pixels
        """
        if not instruction.force and (width < instruction.width or height < instruction.height):
            return Action.SKIP

        if instruction.crop:
            if image.crop_region is not None:
                return Action.REGION_CROP
            return Action.CROP

        desired_aspect_ratio = instruction.aspect_ratio
        actual_aspect_ratio = width / height

        if actual_aspect_ratio > desired_aspect_ratio:
            # Width is the limiting factor
            if width > instruction.width:
                return Action.RESIZE_WIDTH
            return Action.COPY

        # Height is the limiting factor (ties land here)
        if height > instruction.height:
            return Action.RESIZE_HEIGHT
        return Action.COPY

    def run(self, image: SourceImage, instruction: Instruction) -> DecisionResult:
        """
        Produce the derivative for one pair.

        Args:
            image: Source image with a path
            instruction: Normalized instruction

        Returns:
            DecisionResult with either a derivative or a message

        Raises:
            OSError: If the source can't be read or the output can't be written
            ValueError: If the engine rejects the crop parameters
        """
        src_path = image.path
        filename = os.path.basename(src_path)
        dst_path = target_path(src_path, instruction.label)

        width, height = self.engine.identify(src_path)
        action = self.decide(image, instruction, width, height)
        self.logger.debug(
            f"{filename} ({width}x{height}) / {instruction.label} "
            f"({instruction.width}x{instruction.height}): {action.value}"
        )

        if action is Action.SKIP:
            return DecisionResult(message=self.TOO_SMALL_MESSAGE.format(
                label=instruction.label, filename=filename
            ))

        if not self.dry_run:
            self._perform(action, image, instruction, dst_path)

        return DecisionResult(derivative=Derivative(
            label=instruction.label,
            local=dst_path,
            original=src_path,
            name=filename,
            action=action,
        ))

    def _perform(
        self,
        action: Action,
        image: SourceImage,
        instruction: Instruction,
        dst_path: str
    ) -> None:
        """Run the chosen action through the image engine."""
        src_path = image.path

        if action is Action.REGION_CROP:
            self.engine.crop_region(
                src_path, dst_path, image.crop_region,
                width=instruction.width,
                height=instruction.height,
                quality=instruction.quality,
            )
        elif action is Action.CROP:
            self.engine.crop(
                src_path, dst_path,
                width=instruction.width,
                height=instruction.height,
                gravity=instruction.gravity,
                quality=instruction.quality,
            )
        elif action is Action.RESIZE_WIDTH:
            self.engine.resize(src_path, dst_path, width=instruction.width, quality=instruction.quality)
        elif action is Action.RESIZE_HEIGHT:
            self.engine.resize(src_path, dst_path, height=instruction.height, quality=instruction.quality)
        else:
            self.engine.copy(src_path, dst_path)
