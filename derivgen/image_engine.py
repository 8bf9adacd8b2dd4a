"""
ImageEngine - Pixel operations used to produce derivatives.
"""

import logging
import shutil
from typing import Optional, Tuple

from PIL import Image, ImageOps

from .config import DEFAULT_GRAVITY, DEFAULT_QUALITY, DerivgenConfig
from .source_image import CropRegion


class ImageEngine:
    """
    Identifies, resizes, crops and copies images using Pillow.

    Output keeps the source's format. Quality is a fraction in (0, 1].
    """

    # ImageMagick gravity names -> ImageOps.fit centering
    GRAVITY_CENTERING = {
        'northwest': (0.0, 0.0),
        'north': (0.5, 0.0),
        'northeast': (1.0, 0.0),
        'west': (0.0, 0.5),
        'center': (0.5, 0.5),
        'east': (1.0, 0.5),
        'southwest': (0.0, 1.0),
        'south': (0.5, 1.0),
        'southeast': (1.0, 1.0),
    }

    QUALITY_FORMATS = {'JPEG', 'WEBP'}

    def __init__(
        self,
        config: Optional[DerivgenConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize image engine.

        Args:
            config: Configuration supplying the resampling filter
            logger: Optional logger instance
        """
        self.config = config or DerivgenConfig()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def resample(self) -> Image.Resampling:
        return self.config.resample_filter

    def identify(self, path: str) -> Tuple[int, int]:
        """
        Get the pixel dimensions of an image.

        Raises:
            FileNotFoundError: If the file does not exist
            PIL.UnidentifiedImageError: If the file is not a readable image
        """
        with Image.open(path) as img:
            return img.size

    def resize(
        self,
        src_path: str,
        dst_path: str,
        width: Optional[float] = None,
        height: Optional[float] = None,
        quality: float = DEFAULT_QUALITY
    ) -> None:
        """
        Scale an image to a width or a height, keeping its aspect ratio.

        When both are given the image is fitted inside the box.
        """
        if width is None and height is None:
            raise ValueError("resize needs a width or a height")

        with Image.open(src_path) as img:
            output_format = img.format
            src_w, src_h = img.size

            if width is not None and height is not None:
                scale = min(width / src_w, height / src_h)
            elif width is not None:
                scale = width / src_w
            else:
                scale = height / src_h

            size = self._scaled_size(src_w, src_h, scale)
            self.logger.debug(f"Resizing {src_path} {src_w}x{src_h} -> {size[0]}x{size[1]}")
            resized = img.resize(size, self.resample)

        self._save(resized, dst_path, output_format, quality)

    def crop(
        self,
        src_path: str,
        dst_path: str,
        width: float,
        height: float,
        gravity: str = DEFAULT_GRAVITY,
        quality: float = DEFAULT_QUALITY
    ) -> None:
        """
        Fill the box and crop the overflow to exactly width x height.

        Raises:
            ValueError: If gravity is not a known gravity name
        """
        centering = self._get_centering(gravity)
        size = (max(1, round(width)), max(1, round(height)))

        with Image.open(src_path) as img:
            output_format = img.format
            self.logger.debug(
                f"Cropping {src_path} {img.size[0]}x{img.size[1]} -> "
                f"{size[0]}x{size[1]} ({gravity})"
            )
            cropped = ImageOps.fit(img, size, method=self.resample, centering=centering)

        self._save(cropped, dst_path, output_format, quality)

    def crop_region(
        self,
        src_path: str,
        dst_path: str,
        region: CropRegion,
        width: float,
        height: float,
        quality: float = DEFAULT_QUALITY
    ) -> None:
        """
        Crop an explicit region, then scale it to fit within width x height.

        The region is clipped to the image bounds.

        Raises:
            ValueError: If the region lies entirely outside the image
        """
        with Image.open(src_path) as img:
            output_format = img.format
            src_w, src_h = img.size

            left, upper, right, lower = region.box
            box = (min(left, src_w), min(upper, src_h), min(right, src_w), min(lower, src_h))
            crop_w = box[2] - box[0]
            crop_h = box[3] - box[1]
            if crop_w <= 0 or crop_h <= 0:
                raise ValueError(
                    f"Crop region {region} is outside {src_path} ({src_w}x{src_h})"
                )

            scale = min(width / crop_w, height / crop_h)
            size = self._scaled_size(crop_w, crop_h, scale)
            self.logger.debug(f"Cropping {src_path} to {region}, resizing to {size[0]}x{size[1]}")
            result = img.crop(box).resize(size, self.resample)

        self._save(result, dst_path, output_format, quality)

    def copy(self, src_path: str, dst_path: str) -> None:
        """Copy the file byte for byte."""
        self.logger.debug(f"Copying {src_path} -> {dst_path}")
        shutil.copyfile(src_path, dst_path)

    def _get_centering(self, gravity: str) -> Tuple[float, float]:
        """Look up the ImageOps.fit centering for a gravity name."""
        try:
            return self.GRAVITY_CENTERING[(gravity or '').lower()]
        except KeyError:
            raise ValueError(f"Unknown gravity: {gravity}") from None

    @staticmethod
    def _scaled_size(width: int, height: int, scale: float) -> Tuple[int, int]:
        return (max(1, round(width * scale)), max(1, round(height * scale)))

    def _save(
        self,
        img: Image.Image,
        dst_path: str,
        output_format: Optional[str],
        quality: float
    ) -> None:
        """Save in the source's format, applying quality where it applies."""
        options = {}

        if output_format == 'JPEG':
            img = self._convert_color_mode(img)
            options['optimize'] = True
        elif output_format == 'PNG':
            options['optimize'] = True

        if output_format in self.QUALITY_FORMATS:
            options['quality'] = self._encoder_quality(quality)

        img.save(dst_path, format=output_format, **options)

    @staticmethod
    def _encoder_quality(quality: float) -> int:
        """Map a (0, 1] quality fraction to Pillow's 1-100 scale."""
        return min(100, max(1, round(quality * 100)))

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten alpha and palette images onto white for JPEG output."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode not in ('RGB', 'L', 'CMYK'):
            return img.convert('RGB')
        return img
