"""image_buffer.py.

Defines RasterImage, the in-memory RGB pixel buffer every engine operation
reads and produces, and the Channel enumeration used by per-channel
algorithms. The buffer owns its storage; copy() yields a fully independent
clone.
"""

import copy as _copy
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Sequence

import numpy as np

from rasterlab.exceptions import BoundsError, InvalidArgumentError

PIXEL_DTYPE = np.int32


class Channel(IntEnum):
    """Index of one RGB component in the pixel triple."""

    RED = 0
    GREEN = 1
    BLUE = 2


@dataclass(eq=False)
class RasterImage:
    """Container for RGB pixel data and associated metadata.

    Attributes:
        pixels (np.ndarray): Pixel grid of shape (height, width, 3), indexed
            [y, x, channel]. Values are normally within [0, 255] but the
            container does not enforce it; clamping belongs to each transform.
        metadata (Dict[str, Any]): Arbitrary metadata (processing history,
            source information supplied by a loader).
    """

    pixels: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise InvalidArgumentError(f"Pixel array must have shape (H, W, 3), got {pixels.shape}", "pixels")
        if pixels.shape[0] <= 0 or pixels.shape[1] <= 0:
            raise InvalidArgumentError(f"Image dimensions must be positive, got {pixels.shape[1]}x{pixels.shape[0]}")
        if pixels.dtype != PIXEL_DTYPE:
            pixels = pixels.astype(PIXEL_DTYPE)
        self.pixels = pixels

    @classmethod
    def blank(cls, width: int, height: int) -> "RasterImage":
        """Create a black image of the given size."""
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Image dimensions must be positive, got {width}x{height}")
        return cls(np.zeros((height, width, 3), dtype=PIXEL_DTYPE))

    @classmethod
    def from_array(cls, array: np.ndarray, metadata: dict[str, Any] | None = None) -> "RasterImage":
        """Create an image from a copy of an (H, W, 3) array."""
        return cls(np.array(array, dtype=PIXEL_DTYPE, copy=True), dict(metadata or {}))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) of the image."""
        return self.width, self.height

    def same_size(self, other: "RasterImage") -> bool:
        return self.size == other.size

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise BoundsError(x, y, self.width, self.height)

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """Return the (R, G, B) triple at column x, row y.

        Raises:
            BoundsError: If (x, y) lies outside the image.
        """
        self._check_bounds(x, y)
        red, green, blue = self.pixels[y, x]
        return int(red), int(green), int(blue)

    def set_pixel(self, x: int, y: int, rgb: Sequence[int]) -> None:
        """Overwrite the pixel at column x, row y.

        Raises:
            BoundsError: If (x, y) lies outside the image.
            InvalidArgumentError: If rgb is not a triple.
        """
        self._check_bounds(x, y)
        if len(rgb) != 3:
            raise InvalidArgumentError(f"Expected an (R, G, B) triple, got {len(rgb)} values", "rgb")
        self.pixels[y, x] = rgb

    def channel_view(self, channel: Channel) -> np.ndarray:
        """Return a writable (H, W) view of one channel."""
        return self.pixels[:, :, Channel(channel)]

    def get_channel(self, channel: Channel) -> np.ndarray:
        """Return an independent (H, W) copy of one channel."""
        return self.channel_view(channel).copy()

    def set_channel(self, channel: Channel, values: np.ndarray) -> None:
        values = np.asarray(values)
        if values.shape != (self.height, self.width):
            raise InvalidArgumentError(
                f"Channel data must have shape {(self.height, self.width)}, got {values.shape}", "values"
            )
        self.pixels[:, :, Channel(channel)] = values

    def copy(self) -> "RasterImage":
        """Return a deep copy; the clone shares no storage with this image."""
        return RasterImage(self.pixels.copy(), _copy.deepcopy(self.metadata))

    def to_array(self) -> np.ndarray:
        return self.pixels.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RasterImage(width={self.width}, height={self.height})"
