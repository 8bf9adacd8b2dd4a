"""
SourceImage - A source image reference and its optional crop override.
"""

import re
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Union


@dataclass(frozen=True)
class CropRegion:
    """
    Explicit pixel region in WxH+X+Y form.

    Attributes:
        width: Region width in pixels
        height: Region height in pixels
        x: Left offset in pixels
        y: Top offset in pixels
    """
    width: int
    height: int
    x: int
    y: int

    # Example: 100x158+50+70
    PATTERN = re.compile(r'(\d+)x(\d+)\+(\d+)\+(\d+)', re.ASCII)

    @classmethod
    def parse(cls, value: Any) -> Optional['CropRegion']:
        """Parse a crop string, returning None if it doesn't match the pattern."""
        if not isinstance(value, str):
            return None
        match = cls.PATTERN.fullmatch(value)
        if not match:
            return None
        width, height, x, y = (int(g) for g in match.groups())
        return cls(width=width, height=height, x=x, y=y)

    @property
    def box(self) -> tuple:
        """(left, upper, right, lower) box as used by Pillow."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}+{self.x}+{self.y}"


def _to_labels(labels: Union[str, Iterable[str], None]) -> Optional[FrozenSet[str]]:
    if labels is None:
        return None
    if isinstance(labels, str):
        return frozenset([labels])
    return frozenset(labels)


@dataclass(frozen=True)
class SourceImage:
    """
    One input image.

    Attributes:
        path: Filesystem path of the source image (required for processing)
        labels: If set, only instructions with these labels apply
        crop: Optional explicit crop region string (WxH+X+Y)
    """
    path: Optional[str] = None
    labels: Optional[FrozenSet[str]] = None
    crop: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'labels', _to_labels(self.labels))

    @property
    def crop_region(self) -> Optional[CropRegion]:
        """Parsed crop override, or None if absent or malformed."""
        return CropRegion.parse(self.crop)

    def wants(self, label: str) -> bool:
        """Check if an instruction label applies to this image."""
        return self.labels is None or label in self.labels

    @classmethod
    def from_value(cls, value: Any) -> 'SourceImage':
        """
        Build from a SourceImage, a mapping, or a bare path string.

        Mappings are read, never modified. Unknown keys are ignored.
        """
        if isinstance(value, SourceImage):
            return value
        if isinstance(value, str):
            return cls(path=value)
        if isinstance(value, Mapping):
            return cls(
                path=value.get('path'),
                labels=value.get('labels'),
                crop=value.get('crop'),
            )
        return cls()
