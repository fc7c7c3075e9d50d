"""Piecewise-linear levels (black / mid / white point) adjustment."""

import numpy as np

from rasterlab.exceptions import InvalidArgumentError

from .image_buffer import RasterImage
from .primitives import PIXEL_MAX, clamp, round_half_up

MID_OUTPUT = 127


def validate_levels(black: int, mid: int, white: int) -> None:
    """Check 0 <= black < mid < white <= 255.

    Raises:
        InvalidArgumentError: If the points are out of range or misordered.
    """
    if not (0 <= black < mid < white <= PIXEL_MAX):
        raise InvalidArgumentError(
            f"Invalid black, mid and white values ({black}, {mid}, {white}): "
            f"they must satisfy 0 <= black < mid < white <= {PIXEL_MAX}",
            "levels",
        )


def levels_curve(values: np.ndarray, black: int, mid: int, white: int) -> np.ndarray:
    """Map channel values through the levels curve.

    v <= black maps to 0, black..mid maps linearly onto 0..127, mid..white
    maps onto 127..255, and v > white maps to 255. Results are rounded half
    up.
    """
    v = np.asarray(values, dtype=np.float64)
    lower = (v - black) * MID_OUTPUT / (mid - black)
    upper = (v - mid) * (PIXEL_MAX - MID_OUTPUT) / (white - mid) + MID_OUTPUT
    mapped = np.select([v <= black, v <= mid, v <= white], [0.0, lower, upper], default=float(PIXEL_MAX))
    return round_half_up(mapped)


def levels_adjust(image: RasterImage, black: int, mid: int, white: int) -> RasterImage:
    """Apply a levels adjustment to every channel of every pixel.

    Note that a mid value at 128 maps to 127, not 128: the lower segment
    ends at output 127 exactly.
    """
    validate_levels(black, mid, white)
    return RasterImage(clamp(levels_curve(image.pixels, black, mid, white)))
