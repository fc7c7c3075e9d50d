"""
Configuration file for pytest.

This file defines shared fixtures for the test suite.
Fixtures defined here are automatically available to all tests.
"""

import pathlib
import tempfile

import numpy as np
import pytest

from rasterlab.pipeline.image_buffer import RasterImage


@pytest.fixture(scope="function")
def temp_dir():
    """
    Pytest fixture to create a temporary directory for a test function.

    Yields:
        pathlib.Path: The path to the created temporary directory.

    The directory and its contents are automatically removed after the test finishes.
    """
    with tempfile.TemporaryDirectory(prefix="rasterlab_test_") as tmpdir:
        yield pathlib.Path(tmpdir)


@pytest.fixture(scope="session")
def project_root():
    """
    Pytest fixture to get the root directory of the project.

    Returns:
        pathlib.Path: The project root directory.
    """
    # Assumes conftest.py is in the 'tests' directory, one level below the root
    return pathlib.Path(__file__).parent.parent


@pytest.fixture()
def random_image():
    """A reproducible 7x5 image with values spread over [0, 255]."""
    rng = np.random.default_rng(1234)
    return RasterImage(rng.integers(0, 256, (5, 7, 3)))


@pytest.fixture()
def corner_image():
    """2x2 image with four distinct corner colors."""
    return RasterImage(
        np.array(
            [
                [[255, 0, 0], [0, 255, 0]],
                [[0, 0, 255], [250, 200, 10]],
            ]
        )
    )
