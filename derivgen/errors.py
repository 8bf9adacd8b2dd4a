"""
Exceptions raised by derivgen.
"""


class DerivgenError(Exception):
    """Base class for derivgen errors."""


class InvalidTypeError(DerivgenError, ValueError):
    """Raised when a batch is requested for an image type with no instructions."""

    def __init__(self, image_type):
        self.image_type = image_type
        super().__init__(f"invalid image type: {image_type}")
