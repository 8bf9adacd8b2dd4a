"""
Derivative Generation Package

Builds named image variants (thumbnail, main, ...) from source images:
    1. Register instructions, grouped by image type
    2. Process a batch of images against one type's instructions

Each image/instruction pair is cropped, resized or copied next to the source.
"""

__version__ = "1.0.0"

from .config import DerivgenConfig
from .errors import DerivgenError, InvalidTypeError
from .instruction import Instruction
from .instruction_registry import InstructionRegistry
from .source_image import CropRegion, SourceImage
from .derivative import Action, Derivative
from .image_engine import ImageEngine
from .decision_engine import DecisionEngine, DecisionResult
from .batch_stats import BatchStats
from .batch_progress import BatchProgress
from .pipeline import Pipeline

__all__ = [
    "DerivgenConfig",
    "DerivgenError",
    "InvalidTypeError",
    "Instruction",
    "InstructionRegistry",
    "CropRegion",
    "SourceImage",
    "Action",
    "Derivative",
    "ImageEngine",
    "DecisionEngine",
    "DecisionResult",
    "BatchStats",
    "BatchProgress",
    "Pipeline",
]
