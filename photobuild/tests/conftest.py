"""
Pytest fixtures for photobuild tests.
"""

import io
import logging
from pathlib import Path

import pytest
from PIL import Image


def encode_image(width, height, fmt='JPEG', mode='RGB', color='red'):
    """Encode a solid-colour test image."""
    if mode == 'RGBA' and isinstance(color, str):
        color = (255, 0, 0, 128)
    img = Image.new(mode, (width, height), color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image_bytes():
    """Fixture providing a factory for encoded test images."""
    return encode_image


@pytest.fixture
def sample_image_bytes():
    """Fixture providing a 1000x500 JPEG."""
    return encode_image(1000, 500)


@pytest.fixture
def sample_png_bytes():
    """Fixture providing a 100x100 PNG with transparency."""
    return encode_image(100, 100, fmt='PNG', mode='RGBA')


@pytest.fixture
def write_image():
    """Fixture providing a helper that writes a test image to disk."""
    def _write(path: Path, width: int = 1000, height: int = 500, fmt: str = 'JPEG', color='red') -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encode_image(width, height, fmt=fmt, color=color))
        return path
    return _write


@pytest.fixture
def source_root(tmp_path, write_image):
    """
    Fixture providing a small source tree:

        photos/2024/iceland/  a.jpg (1000x500), b.jpg (300x200), meta.json (cover b.jpg)
        photos/2023/city_walks/  c.png (2000x1000)
    """
    root = tmp_path / 'src' / 'photos'
    write_image(root / '2024' / 'iceland' / 'a.jpg', 1000, 500)
    write_image(root / '2024' / 'iceland' / 'b.jpg', 300, 200, color='blue')
    (root / '2024' / 'iceland' / 'meta.json').write_text('{"cover": "b.jpg"}', encoding='utf-8')
    write_image(root / '2023' / 'city_walks' / 'c.png', 2000, 1000, fmt='PNG', color='green')
    return root


@pytest.fixture
def build_config(tmp_path, source_root):
    """Fixture providing a BuildConfig for the sample source tree."""
    from photobuild.config import BuildConfig

    return BuildConfig(
        source_root=source_root,
        output_root=tmp_path / '_site',
        cache_dir=tmp_path / 'cache',
        site_title='Test Site',
    )


@pytest.fixture
def cache_store(tmp_path, logger):
    """Fixture providing an empty, loaded CacheStore."""
    from photobuild.cache_store import CacheStore

    store = CacheStore(tmp_path / 'cache', logger=logger)
    store.load()
    return store


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')


@pytest.fixture
def make_result():
    """Fixture providing a factory for ProcessResult objects."""
    from photobuild.descriptors import PhotoDescriptor
    from photobuild.pipeline import ProcessResult
    from photobuild.source_image import SourceImage

    def _make(outcome, variants=(), bytes_written=0, error=None):
        image = SourceImage(path=Path('/src/2024/x/a.jpg'), year='2024', slug='x', filename='a.jpg')
        return ProcessResult(
            image=image,
            outcome=outcome,
            photo=PhotoDescriptor(src='photos/2024/x/a.webp', srcset='', width=1, height=1),
            output_name='a.webp',
            variants=list(variants),
            bytes_written=bytes_written,
            error=error,
        )
    return _make
