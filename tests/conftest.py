# pngstego Test Configuration
# This file contains test settings and fixtures

import pytest
import sys
import os

import numpy as np
from PIL import Image

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return os.path.dirname(os.path.dirname(__file__))


@pytest.fixture
def temp_directory(tmp_path):
    """Provide a temporary directory for test operations."""
    return tmp_path


def noisy_pixels(width, height, seed=0):
    """Random (height, width, 3) uint8 pixel data."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


@pytest.fixture
def make_pixels():
    """Factory for random truecolor pixel arrays."""
    return noisy_pixels


@pytest.fixture
def make_buffer():
    """Factory for PixelBuffers filled with random pixels."""
    from pngstego.stego.buffer import PixelBuffer

    def _make(width, height, seed=0):
        return PixelBuffer(noisy_pixels(width, height, seed))
    return _make


@pytest.fixture
def make_png(temp_directory):
    """Factory writing a random truecolor PNG and returning its path."""
    def _make(width=100, height=100, name="carrier.png", seed=0):
        path = temp_directory / name
        Image.fromarray(noisy_pixels(width, height, seed)).save(str(path), format="PNG")
        return str(path)
    return _make


@pytest.fixture
def sample_data(temp_directory):
    """Provide a sample message file."""
    data_file = temp_directory / "sample.txt"
    data_file.write_text("Hello, World! This is a hidden test message.")
    return data_file


@pytest.fixture
def sample_binary_data(temp_directory):
    """Provide a sample binary message file."""
    binary_file = temp_directory / "sample.bin"
    binary_file.write_bytes(b'\x00\x01\x02\x03\x04\x05\xff\xfe\xfd')
    return binary_file
