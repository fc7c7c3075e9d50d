"""Lossy image compression with a 2D Haar wavelet transform.

Each channel is padded to a power-of-two square, transformed, thresholded
by cumulative coefficient energy, inverse transformed and unpadded.

The ``percentage`` argument is the share of total coefficient energy to
discard: larger values remove more detail. Front ends sometimes label it
"detail retained"; that reading is wrong, 0 keeps the image intact.
"""

import math

import numpy as np

from rasterlab.exceptions import InvalidArgumentError
from rasterlab.utils.log import get_logger

from .image_buffer import Channel, RasterImage
from .primitives import clamp, round_half_up

LOGGER = get_logger(__name__)

SQRT2 = math.sqrt(2.0)


def next_power_of_two(n: int) -> int:
    power = 1
    while power < n:
        power *= 2
    return power


def _haar_step(block: np.ndarray) -> np.ndarray:
    """Pairwise averages then differences along the last axis."""
    even = block[..., 0::2]
    odd = block[..., 1::2]
    return np.concatenate(((even + odd) / SQRT2, (even - odd) / SQRT2), axis=-1)


def _inverse_haar_step(block: np.ndarray) -> np.ndarray:
    half = block.shape[-1] // 2
    avg = block[..., :half]
    diff = block[..., half:]
    restored = np.empty_like(block)
    restored[..., 0::2] = (avg + diff) / SQRT2
    restored[..., 1::2] = (avg - diff) / SQRT2
    return restored


def haar_forward(data: np.ndarray) -> np.ndarray:
    """Forward 2D Haar transform of a square power-of-two array.

    For block sizes m = N, N/2, ..., 2 the rows and then the columns of the
    top-left m x m block are transformed.
    """
    coeffs = np.array(data, dtype=np.float64, copy=True)
    m = coeffs.shape[0]
    while m > 1:
        coeffs[:m, :m] = _haar_step(coeffs[:m, :m])
        coeffs[:m, :m] = _haar_step(coeffs[:m, :m].T).T
        m //= 2
    return coeffs


def haar_inverse(coeffs: np.ndarray) -> np.ndarray:
    """Inverse of haar_forward: columns then rows, growing m from 2 to N."""
    data = np.array(coeffs, dtype=np.float64, copy=True)
    size = data.shape[0]
    m = 2
    while m <= size:
        data[:m, :m] = _inverse_haar_step(data[:m, :m].T).T
        data[:m, :m] = _inverse_haar_step(data[:m, :m])
        m *= 2
    return data


def energy_threshold(coeffs: np.ndarray, percentage: float) -> float:
    """Smallest magnitude whose ascending cumulative sum reaches the target energy."""
    magnitudes = np.sort(np.abs(coeffs).ravel(), kind="stable")
    target = magnitudes.sum() * (percentage / 100.0)
    running = np.cumsum(magnitudes)
    index = int(np.searchsorted(running, target, side="left"))
    # Accumulated rounding can leave the final sum a hair below the target.
    index = min(index, magnitudes.size - 1)
    return float(magnitudes[index])


def apply_threshold(coeffs: np.ndarray, percentage: float) -> np.ndarray:
    """Zero every coefficient whose magnitude is at or below the energy threshold.

    A percentage of 0 discards nothing.
    """
    if percentage <= 0:
        return np.array(coeffs, dtype=np.float64, copy=True)
    threshold = energy_threshold(coeffs, percentage)
    return np.where(np.abs(coeffs) <= threshold, 0.0, coeffs)


def compress_channel(plane: np.ndarray, percentage: float) -> np.ndarray:
    """Compress one (H, W) channel and return it as clamped integers."""
    height, width = plane.shape
    size = next_power_of_two(max(height, width))
    padded = np.zeros((size, size), dtype=np.float64)
    padded[:height, :width] = plane
    restored = haar_inverse(apply_threshold(haar_forward(padded), percentage))
    return clamp(round_half_up(restored[:height, :width]))


def validate_percentage(percentage: float) -> None:
    """Raise InvalidArgumentError unless percentage lies within [0, 100]."""
    if not 0 <= percentage <= 100:
        raise InvalidArgumentError(f"Compression percentage must be within [0, 100], got {percentage}", "percentage")


def compress(image: RasterImage, percentage: float) -> RasterImage:
    """Compress every channel of the image independently.

    Raises:
        InvalidArgumentError: If percentage is outside [0, 100].
    """
    validate_percentage(percentage)
    LOGGER.debug("Compressing %sx%s image, discarding %s%% of energy", image.width, image.height, percentage)
    result = RasterImage.blank(image.width, image.height)
    for channel in Channel:
        result.set_channel(channel, compress_channel(image.channel_view(channel), percentage))
    return result
