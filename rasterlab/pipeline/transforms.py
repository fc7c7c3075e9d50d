"""Standard transform library.

Color transforms, flips, filters, channel visualisations, channel split and
combine, and nearest-neighbour downscaling. Every function is pure: it
returns a new RasterImage and never modifies its inputs.
"""

import numpy as np

from rasterlab.exceptions import InvalidArgumentError
from rasterlab.utils.log import get_logger

from .image_buffer import PIXEL_DTYPE, Channel, RasterImage
from .primitives import BorderPolicy, apply_color_matrix, clamp, convolve, map_pixels

LOGGER = get_logger(__name__)

LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)

GRAYSCALE_MATRIX = np.array([LUMA_WEIGHTS, LUMA_WEIGHTS, LUMA_WEIGHTS])

SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ]
)

BLUR_KERNEL = np.array(
    [
        [1 / 16, 1 / 8, 1 / 16],
        [1 / 8, 1 / 4, 1 / 8],
        [1 / 16, 1 / 8, 1 / 16],
    ]
)

SHARPEN_KERNEL = np.array(
    [
        [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
        [-1 / 8, 1 / 4, 1 / 4, 1 / 4, -1 / 8],
        [-1 / 8, 1 / 4, 1.0, 1 / 4, -1 / 8],
        [-1 / 8, 1 / 4, 1 / 4, 1 / 4, -1 / 8],
        [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
    ]
)


# ─── Color transforms ──────────────────────────────────────────────


def grayscale(image: RasterImage) -> RasterImage:
    """Replace every channel with the Rec. 709 luma of the pixel."""
    return apply_color_matrix(image, GRAYSCALE_MATRIX)


def sepia(image: RasterImage) -> RasterImage:
    return apply_color_matrix(image, SEPIA_MATRIX)


def brighten(image: RasterImage, increment: int) -> RasterImage:
    """Add ``increment`` to every channel and clamp; negative values darken."""
    return map_pixels(image, lambda pixels: clamp(pixels.astype(np.int64) + int(increment)))


# ─── Geometry ──────────────────────────────────────────────────────


def flip_horizontal(image: RasterImage) -> RasterImage:
    """Mirror (x, y) to (W-1-x, y)."""
    return RasterImage(image.pixels[:, ::-1].copy())


def flip_vertical(image: RasterImage) -> RasterImage:
    """Mirror (x, y) to (x, H-1-y)."""
    return RasterImage(image.pixels[::-1].copy())


def downscale(image: RasterImage, new_width: int, new_height: int) -> RasterImage:
    """Shrink the image with nearest-neighbour sampling.

    Target pixel (x, y) samples the source at
    (floor(x * W / new_width), floor(y * H / new_height)).

    Raises:
        InvalidArgumentError: If a target dimension is not positive or is
            larger than the source (only downscaling is supported).
    """
    if new_width <= 0 or new_height <= 0 or new_width > image.width or new_height > image.height:
        raise InvalidArgumentError(
            f"Invalid dimensions {new_width}x{new_height}: they must be positive and no larger "
            f"than the original {image.width}x{image.height}"
        )
    rows = np.arange(new_height) * image.height // new_height
    cols = np.arange(new_width) * image.width // new_width
    LOGGER.debug("Downscaling %sx%s -> %sx%s", image.width, image.height, new_width, new_height)
    return RasterImage(image.pixels[np.ix_(rows, cols)].copy())


# ─── Filters ───────────────────────────────────────────────────────


def blur(image: RasterImage, border: BorderPolicy = BorderPolicy.SKIP) -> RasterImage:
    return convolve(image, BLUR_KERNEL, border)


def sharpen(image: RasterImage, border: BorderPolicy = BorderPolicy.SKIP) -> RasterImage:
    return convolve(image, SHARPEN_KERNEL, border)


# ─── Channel visualisation ─────────────────────────────────────────


def visualize_channel(image: RasterImage, channel: Channel) -> RasterImage:
    """Keep one channel and zero the other two."""
    result = np.zeros_like(image.pixels)
    result[:, :, channel] = image.pixels[:, :, channel]
    return RasterImage(result)


def visualize_red(image: RasterImage) -> RasterImage:
    return visualize_channel(image, Channel.RED)


def visualize_green(image: RasterImage) -> RasterImage:
    return visualize_channel(image, Channel.GREEN)


def visualize_blue(image: RasterImage) -> RasterImage:
    return visualize_channel(image, Channel.BLUE)


def _broadcast_gray(values: np.ndarray) -> np.ndarray:
    return np.repeat(values[:, :, np.newaxis], 3, axis=2).astype(PIXEL_DTYPE)


def visualize_value(image: RasterImage) -> RasterImage:
    """Set every channel to max(R, G, B)."""
    return map_pixels(image, lambda pixels: _broadcast_gray(pixels.max(axis=2)))


def visualize_intensity(image: RasterImage) -> RasterImage:
    """Set every channel to floor((R + G + B) / 3)."""
    return map_pixels(image, lambda pixels: _broadcast_gray(pixels.astype(np.int64).sum(axis=2) // 3))


def visualize_luma(image: RasterImage) -> RasterImage:
    """Set every channel to the truncated luma 0.2126R + 0.7152G + 0.0722B."""

    def _luma(pixels: np.ndarray) -> np.ndarray:
        return _broadcast_gray(np.floor(pixels.astype(np.float64) @ np.array(LUMA_WEIGHTS)))

    return map_pixels(image, _luma)


# ─── Channel split / combine ───────────────────────────────────────


def split_rgb(image: RasterImage) -> tuple[RasterImage, RasterImage, RasterImage]:
    """Split into three full-size images, each holding only its own channel."""
    return (
        visualize_channel(image, Channel.RED),
        visualize_channel(image, Channel.GREEN),
        visualize_channel(image, Channel.BLUE),
    )


def combine_rgb(red: RasterImage, green: RasterImage, blue: RasterImage) -> RasterImage:
    """Build an image from the red channel of ``red``, green of ``green`` and blue of ``blue``.

    Raises:
        InvalidArgumentError: If the three images differ in size.
    """
    if not (red.same_size(green) and red.same_size(blue)):
        raise InvalidArgumentError(
            f"Images to combine must share dimensions, got {red.size}, {green.size} and {blue.size}"
        )
    result = np.empty_like(red.pixels)
    result[:, :, Channel.RED] = red.pixels[:, :, Channel.RED]
    result[:, :, Channel.GREEN] = green.pixels[:, :, Channel.GREEN]
    result[:, :, Channel.BLUE] = blue.pixels[:, :, Channel.BLUE]
    return RasterImage(result)
