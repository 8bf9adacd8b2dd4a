"""
Derivative - Record of one generated image variant.
"""

from dataclasses import dataclass, asdict
from enum import Enum


class Action(str, Enum):
    """What the decision engine does for one image/instruction pair."""
    SKIP = 'skip'
    REGION_CROP = 'region_crop'
    CROP = 'crop'
    RESIZE_WIDTH = 'resize_width'
    RESIZE_HEIGHT = 'resize_height'
    COPY = 'copy'


@dataclass(frozen=True)
class Derivative:
    """
    A derivative produced from a source image under one instruction.

    Attributes:
        label: Instruction label
        local: Path of the generated file
        original: Path of the source image
        name: Filename of the source image
        action: How the file was produced
    """
    label: str
    local: str
    original: str
    name: str
    action: Action = Action.COPY

    def to_dict(self) -> dict:
        data = asdict(self)
        data['action'] = self.action.value
        return data

    def format_status(self) -> str:
        """Status line like "kitty.jpg -> kitty-main.jpg [main, resize_height]"."""
        return f"{self.name} -> {self.local} [{self.label}, {self.action.value}]"
