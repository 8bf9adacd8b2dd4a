"""
InstructionRegistry - Instructions grouped by image type, in application order.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .config import DerivgenConfig
from .instruction import Instruction


class InstructionRegistry:
    """
    Stores validated instructions keyed by image type.

    Instructions are only ever appended. The order they were added in is
    the order they are applied to each image.
    """

    def __init__(
        self,
        instructions: Any = None,
        config: Optional[DerivgenConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize registry.

        Args:
            instructions: Optional spec, or list of specs, to add right away
            config: Configuration supplying the default gravity and quality
            logger: Optional logger instance
        """
        self.config = config or DerivgenConfig()
        self.logger = logger or logging.getLogger(__name__)
        self._instructions: Dict[str, List[Instruction]] = {}
        self.count = 0

        if instructions:
            self.add(instructions)

    def add(self, new_instructions: Any = None) -> int:
        """
        Add one or more instruction specs.

        Invalid specs are skipped without raising.

        Args:
            new_instructions: A spec mapping, an Instruction, or a list of them

        Returns:
            Number of instructions added by this call
        """
        if new_instructions is None:
            return 0

        if not isinstance(new_instructions, (list, tuple)):
            new_instructions = [new_instructions]

        added = 0
        for spec in new_instructions:
            instruction = Instruction.from_spec(
                spec,
                default_gravity=self.config.default_gravity,
                default_quality=self.config.default_quality,
            )
            if instruction is None:
                self.logger.debug(f"Skipping invalid instruction: {spec!r}")
                continue

            self._instructions.setdefault(instruction.type, []).append(instruction)
            added += 1

        self.count += added
        return added

    def __contains__(self, image_type: object) -> bool:
        return isinstance(image_type, str) and image_type in self._instructions

    def get(self, image_type: str) -> Tuple[Instruction, ...]:
        """Instructions for a type in application order (empty if unknown)."""
        return tuple(self._instructions.get(image_type, ()))

    @property
    def types(self) -> List[str]:
        """Registered image types in the order they were first seen."""
        return list(self._instructions)

    @property
    def instructions(self) -> Dict[str, List[Instruction]]:
        """Copy of the type -> instructions mapping."""
        return {
            image_type: list(instructions)
            for image_type, instructions in self._instructions.items()
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            image_type: [i.to_dict() for i in instructions]
            for image_type, instructions in self._instructions.items()
        }

    @classmethod
    def load(
        cls,
        filepath: str,
        config: Optional[DerivgenConfig] = None,
        logger: Optional[logging.Logger] = None
    ) -> 'InstructionRegistry':
        """
        Load instructions from a JSON file.

        The file holds either a list of specs or an object with an
        "instructions" list.
        """
        with open(Path(filepath), 'r') as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = data.get('instructions', [])

        registry = cls(config=config, logger=logger)
        registry.add(data)
        registry.logger.info(f"Loaded {registry.count} instructions from {filepath}")
        return registry
