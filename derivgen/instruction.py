"""
Instruction - A named sizing policy for one image type.
"""

import math
from dataclasses import dataclass, asdict
from numbers import Real
from typing import Any, Mapping, Optional

from .config import DEFAULT_GRAVITY, DEFAULT_QUALITY


def _is_number(value: Any) -> bool:
    # bool is a subclass of int but never a dimension
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_quality(value: Any) -> bool:
    return _is_number(value) and 0 < value <= 1


@dataclass(frozen=True)
class Instruction:
    """
    A single derivative instruction.

    Attributes:
        type: Image type this instruction belongs to (e.g. 'product')
        label: Derivative name, appended to the output filename
        width: Target box width in pixels
        height: Target box height in pixels
        gravity: Crop anchor (ImageMagick gravity name)
        quality: Output quality in (0, 1]
        crop: Always crop to exactly width x height
        force: Process images smaller than the target box anyway
    """
    type: str
    label: str
    width: float
    height: float
    gravity: str = DEFAULT_GRAVITY
    quality: float = DEFAULT_QUALITY
    crop: bool = False
    force: bool = True

    @property
    def aspect_ratio(self) -> float:
        """Width over height of the target box."""
        return self.width / self.height

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_spec(
        cls,
        spec: Any,
        default_gravity: str = DEFAULT_GRAVITY,
        default_quality: float = DEFAULT_QUALITY
    ) -> Optional['Instruction']:
        """
        Build an instruction from a spec mapping.

        Returns None instead of raising when the spec is missing a required
        field or a field has the wrong type. Width and height must be finite
        and positive. A quality outside (0, 1] is replaced by the default.

        Args:
            spec: Mapping with type, label, width, height and optional
                gravity, quality, crop, force
            default_gravity: Gravity used when the spec doesn't set one
            default_quality: Quality used when the spec doesn't set one
        """
        if isinstance(spec, Instruction):
            return spec

        if not spec or not isinstance(spec, Mapping):
            return None

        if not isinstance(spec.get('type'), str):
            return None
        if not isinstance(spec.get('label'), str):
            return None

        height = spec.get('height')
        width = spec.get('width')
        if not _is_number(height) or not _is_number(width):
            return None
        if height <= 0 or width <= 0:
            return None

        gravity = spec.get('gravity')
        quality = spec.get('quality')
        crop = spec.get('crop')
        force = spec.get('force')

        return cls(
            type=spec['type'],
            label=spec['label'],
            width=width,
            height=height,
            gravity=default_gravity if gravity is None else gravity,
            quality=quality if _is_quality(quality) else default_quality,
            crop=False if crop is None else bool(crop),
            force=True if force is None else bool(force),
        )
