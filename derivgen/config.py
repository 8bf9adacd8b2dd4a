"""
DerivgenConfig - Defaults and engine settings for derivative generation.
"""

import os
from dataclasses import dataclass
from typing import List

from PIL import Image


DEFAULT_GRAVITY = 'Center'
DEFAULT_QUALITY = 0.9
DEFAULT_RESAMPLE = 'lanczos'

RESAMPLE_FILTERS = {
    'nearest': Image.Resampling.NEAREST,
    'bilinear': Image.Resampling.BILINEAR,
    'bicubic': Image.Resampling.BICUBIC,
    'lanczos': Image.Resampling.LANCZOS,
}


@dataclass
class DerivgenConfig:
    """
    Configuration for derivative generation.

    Attributes:
        default_gravity: Gravity applied to instructions that don't set one
        default_quality: Quality applied to instructions that don't set one
        resample: Name of the Pillow resampling filter used when scaling
    """
    default_gravity: str = DEFAULT_GRAVITY
    default_quality: float = DEFAULT_QUALITY
    resample: str = DEFAULT_RESAMPLE

    @classmethod
    def from_env(cls) -> 'DerivgenConfig':
        """Create configuration from environment variables."""
        quality = os.environ.get('DERIVGEN_DEFAULT_QUALITY')
        try:
            default_quality = float(quality) if quality else DEFAULT_QUALITY
        except ValueError:
            # Out of range, so validate() reports it
            default_quality = -1.0

        return cls(
            default_gravity=os.environ.get('DERIVGEN_DEFAULT_GRAVITY', DEFAULT_GRAVITY),
            default_quality=default_quality,
            resample=os.environ.get('DERIVGEN_RESAMPLE', DEFAULT_RESAMPLE).lower(),
        )

    def validate(self) -> List[str]:
        """
        Check the configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not self.default_gravity:
            errors.append("Default gravity must not be empty")

        if not 0 < self.default_quality <= 1:
            errors.append(
                f"Default quality must be in (0, 1], got {self.default_quality}"
            )

        if self.resample not in RESAMPLE_FILTERS:
            choices = ', '.join(sorted(RESAMPLE_FILTERS))
            errors.append(f"Unknown resample filter '{self.resample}' (choose from {choices})")

        return errors

    @property
    def resample_filter(self) -> Image.Resampling:
        """Pillow resampling filter for the configured name."""
        return RESAMPLE_FILTERS[self.resample]
