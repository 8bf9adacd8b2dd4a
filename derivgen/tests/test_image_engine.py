"""Tests for ImageEngine class."""

import pytest
from PIL import Image, UnidentifiedImageError

from derivgen.image_engine import ImageEngine
from derivgen.source_image import CropRegion


class TestImageEngine:
    """Tests for ImageEngine class."""

    def test_identify(self, make_image):
        """Test reading dimensions."""
        path = make_image(size=(120, 80))

        assert ImageEngine().identify(path) == (120, 80)

    def test_identify_missing_file(self, tmp_path):
        """Test identifying a file that doesn't exist."""
        with pytest.raises(FileNotFoundError):
            ImageEngine().identify(str(tmp_path / 'missing.jpg'))

    def test_identify_not_an_image(self, tmp_path):
        """Test identifying a file that isn't an image."""
        path = tmp_path / 'fake.jpg'
        path.write_bytes(b'not an image')

        with pytest.raises(UnidentifiedImageError):
            ImageEngine().identify(str(path))

    def test_resize_width(self, make_image, tmp_path):
        """Test resizing to a width keeps the aspect ratio."""
        src = make_image(size=(200, 100))
        dst = str(tmp_path / 'out.jpg')

        ImageEngine().resize(src, dst, width=50)

        with Image.open(dst) as img:
            assert img.size == (50, 25)
            assert img.format == 'JPEG'

    def test_resize_height(self, make_image, tmp_path):
        """Test resizing to a height keeps the aspect ratio."""
        src = make_image(size=(200, 100))
        dst = str(tmp_path / 'out.jpg')

        ImageEngine().resize(src, dst, height=20)

        with Image.open(dst) as img:
            assert img.size == (40, 20)

    def test_resize_box(self, make_image, tmp_path):
        """Test resizing into a box."""
        src = make_image(size=(200, 100))
        dst = str(tmp_path / 'out.jpg')

        ImageEngine().resize(src, dst, width=50, height=50)

        with Image.open(dst) as img:
            assert img.size == (50, 25)

    def test_resize_needs_bound(self, make_image, tmp_path):
        """Test resize without width or height."""
        src = make_image()

        with pytest.raises(ValueError):
            ImageEngine().resize(src, str(tmp_path / 'out.jpg'))

    def test_resize_keeps_png(self, make_image, tmp_path):
        """Test PNG sources stay PNG with alpha."""
        src = make_image('alpha.png', size=(100, 100), mode='RGBA', fmt='PNG')
        dst = str(tmp_path / 'out.png')

        ImageEngine().resize(src, dst, width=10)

        with Image.open(dst) as img:
            assert img.format == 'PNG'
            assert img.mode == 'RGBA'

    def test_crop_exact_size(self, make_image, tmp_path):
        """Test crop gives exactly the requested box."""
        src = make_image(size=(200, 100))
        dst = str(tmp_path / 'out.jpg')

        ImageEngine().crop(src, dst, width=60, height=40)

        with Image.open(dst) as img:
            assert img.size == (60, 40)

    def test_crop_gravity(self, tmp_path):
        """Test gravity picks which side is kept."""
        src = str(tmp_path / 'halves.png')
        img = Image.new('RGB', (200, 100), color='white')
        img.paste((0, 0, 0), (0, 0, 100, 100))
        img.save(src)

        engine = ImageEngine()
        west = str(tmp_path / 'west.png')
        east = str(tmp_path / 'east.png')
        engine.crop(src, west, width=50, height=50, gravity='West')
        engine.crop(src, east, width=50, height=50, gravity='east')

        with Image.open(west) as img:
            assert img.getpixel((25, 25)) == (0, 0, 0)
        with Image.open(east) as img:
            assert img.getpixel((25, 25)) == (255, 255, 255)

    def test_crop_unknown_gravity(self, make_image, tmp_path):
        """Test an unknown gravity is rejected."""
        src = make_image()

        with pytest.raises(ValueError, match='gravity'):
            ImageEngine().crop(src, str(tmp_path / 'out.jpg'), 10, 10, gravity='Middle')

    def test_crop_region(self, make_image, tmp_path):
        """Test cropping a region then fitting it into the box."""
        src = make_image(size=(200, 200))
        dst = str(tmp_path / 'out.jpg')

        ImageEngine().crop_region(src, dst, CropRegion(100, 50, 0, 0), width=40, height=40)

        with Image.open(dst) as img:
            assert img.size == (40, 20)

    def test_crop_region_clipped(self, make_image, tmp_path):
        """Test a region running off the image is clipped."""
        src = make_image(size=(200, 200))
        dst = str(tmp_path / 'out.jpg')

        ImageEngine().crop_region(src, dst, CropRegion(100, 100, 150, 100), width=100, height=200)

        with Image.open(dst) as img:
            # 50x100 region scaled by 2
            assert img.size == (100, 200)

    def test_crop_region_outside(self, make_image, tmp_path):
        """Test a region entirely outside the image."""
        src = make_image(size=(200, 200))

        with pytest.raises(ValueError):
            ImageEngine().crop_region(src, str(tmp_path / 'out.jpg'), CropRegion(10, 10, 300, 300), 10, 10)

    def test_copy(self, make_image, tmp_path):
        """Test copy is byte for byte."""
        src = make_image()
        dst = tmp_path / 'copy.jpg'

        ImageEngine().copy(src, str(dst))

        with open(src, 'rb') as f:
            assert dst.read_bytes() == f.read()

    def test_copy_missing_file(self, tmp_path):
        """Test copying a file that doesn't exist."""
        with pytest.raises(FileNotFoundError):
            ImageEngine().copy(str(tmp_path / 'missing.jpg'), str(tmp_path / 'out.jpg'))

    @pytest.mark.parametrize('quality,expected', [(0.9, 90), (1, 100), (0.001, 1), (0.75, 75)])
    def test_encoder_quality(self, quality, expected):
        """Test quality fractions map onto 1-100."""
        assert ImageEngine._encoder_quality(quality) == expected

    def test_convert_color_mode_rgba(self):
        """Test RGBA is flattened for JPEG."""
        img = Image.new('RGBA', (10, 10), color=(255, 0, 0, 128))

        result = ImageEngine()._convert_color_mode(img)

        assert result.mode == 'RGB'
