"""Transform primitives shared by the standard transform library.

Provides the generic per-pixel map, the 3x3 color-matrix transform, kernel
convolution under two border policies, and clamping. Every primitive reads
its source and writes a freshly allocated output image.
"""

from collections.abc import Callable
from enum import Enum

import numpy as np

from rasterlab.exceptions import InvalidArgumentError
from rasterlab.utils.log import get_logger

from .image_buffer import PIXEL_DTYPE, RasterImage

LOGGER = get_logger(__name__)

PIXEL_MIN = 0
PIXEL_MAX = 255

PixelFunction = Callable[[np.ndarray], np.ndarray]


class BorderPolicy(Enum):
    """How convolution treats pixels whose neighbourhood leaves the image."""

    # Pixels within floor(k/2) of the border pass through unconvolved.
    SKIP = "skip"
    # Out-of-range neighbours read the nearest valid row/column.
    REPLICATE = "replicate"


def clamp(values: np.ndarray) -> np.ndarray:
    """Saturate values into [0, 255] and return them as pixel integers."""
    return np.clip(values, PIXEL_MIN, PIXEL_MAX).astype(PIXEL_DTYPE)


def round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def map_pixels(image: RasterImage, func: PixelFunction) -> RasterImage:
    """Apply a pure pixel function to every pixel.

    Args:
        image: Source image, left untouched.
        func: Receives the (H, W, 3) pixel array and returns an array of the
            same shape. It must treat each pixel independently.

    Returns:
        RasterImage: A new image of identical dimensions.
    """
    result = np.asarray(func(image.pixels.copy()))
    if result.shape != image.pixels.shape:
        raise InvalidArgumentError(
            f"Pixel function changed the array shape from {image.pixels.shape} to {result.shape}", "func"
        )
    return RasterImage(result.astype(PIXEL_DTYPE))


def apply_color_matrix(image: RasterImage, matrix: np.ndarray) -> RasterImage:
    """Apply a 3x3 weighting of (R, G, B) to every pixel.

    Row i of ``matrix`` holds the weights of output component i. Each
    weighted sum is truncated toward zero and then clamped to [0, 255].
    """
    weights = np.asarray(matrix, dtype=np.float64)
    if weights.shape != (3, 3):
        raise InvalidArgumentError(f"Color matrix must be 3x3, got {weights.shape}", "matrix")

    def _weigh(pixels: np.ndarray) -> np.ndarray:
        return clamp(np.trunc(pixels.astype(np.float64) @ weights.T))

    return map_pixels(image, _weigh)


def _validate_kernel(kernel: np.ndarray) -> np.ndarray:
    weights = np.asarray(kernel, dtype=np.float64)
    if weights.ndim != 2 or weights.shape[0] != weights.shape[1] or weights.shape[0] % 2 == 0:
        raise InvalidArgumentError(f"Kernel must be square with odd size, got {weights.shape}", "kernel")
    return weights


def _weighted_sum(padded: np.ndarray, weights: np.ndarray, out_height: int, out_width: int) -> np.ndarray:
    """Correlate ``weights`` with ``padded``, producing an out_height x out_width x 3 array."""
    size = weights.shape[0]
    total = np.zeros((out_height, out_width, 3), dtype=np.float64)
    for ky in range(size):
        for kx in range(size):
            weight = weights[ky, kx]
            if weight:
                total += weight * padded[ky : ky + out_height, kx : kx + out_width]
    return total


def convolve(image: RasterImage, kernel: np.ndarray, border: BorderPolicy = BorderPolicy.SKIP) -> RasterImage:
    """Convolve the image with a square odd kernel.

    Every output pixel is the weighted sum of its neighbourhood read from the
    source image, clamped to [0, 255].

    Args:
        image: Source image, left untouched.
        kernel: Square odd matrix of weights, indexed [dy, dx].
        border: BorderPolicy.SKIP copies the margin of floor(k/2) pixels
            through unchanged and rounds half up; BorderPolicy.REPLICATE
            clamps neighbour coordinates to the image so every pixel is
            convolved, truncating toward zero.

    Returns:
        RasterImage: A new convolved image.
    """
    weights = _validate_kernel(kernel)
    margin = weights.shape[0] // 2
    source = image.pixels.astype(np.float64)
    height, width = image.height, image.width
    LOGGER.debug("Convolving %sx%s image with %s kernel (%s border)", width, height, weights.shape, border.value)

    if border is BorderPolicy.REPLICATE:
        padded = np.pad(source, ((margin, margin), (margin, margin), (0, 0)), mode="edge")
        return RasterImage(clamp(np.trunc(_weighted_sum(padded, weights, height, width))))

    result = image.pixels.copy()
    inner_height = height - 2 * margin
    inner_width = width - 2 * margin
    if inner_height <= 0 or inner_width <= 0:
        return RasterImage(result)
    convolved = _weighted_sum(source, weights, inner_height, inner_width)
    result[margin : height - margin, margin : width - margin] = clamp(round_half_up(convolved))
    return RasterImage(result)
