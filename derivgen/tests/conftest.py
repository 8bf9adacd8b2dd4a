"""
Pytest fixtures for derivgen tests.
"""

import json

import pytest


@pytest.fixture
def make_image(tmp_path):
    """Fixture providing a factory that writes a synthetic image to tmp_path."""
    from PIL import Image

    def _make_image(name='image.jpg', size=(100, 100), mode='RGB', fmt='JPEG', color='red'):
        path = tmp_path / name
        if mode == 'RGBA' and isinstance(color, str):
            color = (255, 0, 0, 128)
        Image.new(mode, size, color=color).save(path, format=fmt)
        return str(path)

    return _make_image


@pytest.fixture
def kitty(make_image):
    """Fixture providing a 1200x1800 portrait JPEG."""
    return make_image('kitty.jpg', size=(1200, 1800), color='orange')


@pytest.fixture
def quokka(make_image):
    """Fixture providing a 1600x1200 landscape JPEG."""
    return make_image('quokka.jpg', size=(1600, 1200), color='brown')


@pytest.fixture
def thumbnail_spec():
    """Fixture providing a crop instruction spec."""
    return {'type': 'product', 'label': 'thumbnail', 'crop': True, 'height': 40, 'width': 60, 'force': True}


@pytest.fixture
def main_spec():
    """Fixture providing a resize instruction spec."""
    return {'type': 'product', 'label': 'main', 'height': 400, 'width': 600, 'gravity': 'Center', 'quality': 0.75}


@pytest.fixture
def mock_engine():
    """Fixture providing a mocked image engine for a 1200x1800 source."""
    from unittest.mock import MagicMock
    from derivgen.image_engine import ImageEngine

    engine = MagicMock(spec=ImageEngine)
    engine.identify.return_value = (1200, 1800)
    return engine


@pytest.fixture
def instructions_file(tmp_path, thumbnail_spec, main_spec):
    """Fixture providing a temporary instructions file."""
    filepath = tmp_path / "instructions.json"
    user_spec = {'type': 'user', 'label': 'avatar', 'height': 64, 'width': 64, 'crop': True}
    filepath.write_text(json.dumps({'instructions': [thumbnail_spec, main_spec, user_spec]}))
    return str(filepath)


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
