"""Histogram analysis and histogram-based color correction.

Builds per-channel 256-bucket histograms, finds their peaks, aligns the
channel peaks for automatic color correction, and renders the histograms as
a line plot with Pillow.
"""

from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageDraw

from rasterlab.utils.log import get_logger

from .image_buffer import Channel, RasterImage
from .primitives import PIXEL_MAX, PIXEL_MIN, clamp

LOGGER = get_logger(__name__)

BUCKETS = 256
CANVAS_SIZE = 256

CHANNEL_COLORS: dict[Channel, tuple[int, int, int]] = {
    Channel.RED: (255, 0, 0),
    Channel.GREEN: (0, 255, 0),
    Channel.BLUE: (0, 0, 255),
}


@dataclass
class ChannelHistograms:
    """Frequency counts of each channel value, one 256-bucket array per channel."""

    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray

    def for_channel(self, channel: Channel) -> np.ndarray:
        return (self.red, self.green, self.blue)[Channel(channel)]

    def peaks(self) -> tuple[int, int, int]:
        """Peak bucket of the red, green and blue histograms."""
        return (find_peak_value(self.red), find_peak_value(self.green), find_peak_value(self.blue))


def generate_histogram(image: RasterImage) -> ChannelHistograms:
    """Count how many pixels take each value, separately per channel.

    Values outside [0, 255] are counted in the nearest edge bucket.
    """
    values = np.clip(image.pixels, PIXEL_MIN, PIXEL_MAX)
    counts = [np.bincount(values[:, :, channel].ravel(), minlength=BUCKETS) for channel in Channel]
    return ChannelHistograms(*counts)


def find_peak_value(histogram: np.ndarray) -> int:
    """Return the index of the largest bucket; ties go to the lowest index."""
    return int(np.argmax(histogram))


def color_correct(image: RasterImage) -> RasterImage:
    """Align the histogram peaks of the three channels.

    The target is the floored mean of the three peaks; each channel is
    shifted by (target - its peak) and clamped to [0, 255].
    """
    peaks = generate_histogram(image).peaks()
    target = sum(peaks) // 3
    offsets = np.array([target - peak for peak in peaks], dtype=np.int64)
    LOGGER.debug("Color correction peaks=%s target=%s offsets=%s", peaks, target, offsets.tolist())
    return RasterImage(clamp(image.pixels.astype(np.int64) + offsets))


def _curve_points(histogram: np.ndarray, height: int) -> list[tuple[int, int]]:
    top = int(histogram.max())
    scaled = (histogram.astype(np.float64) / top * height).astype(np.int64)
    return [(x, height - int(h)) for x, h in enumerate(scaled)]


def render_histogram(histograms: ChannelHistograms, background: str = "white") -> RasterImage:
    """Draw the three histograms as line plots on a 256x256 canvas.

    Each curve is scaled by its own channel's maximum count, so channels of
    very different magnitude all stay visible.
    """
    canvas = Image.new("RGB", (CANVAS_SIZE, CANVAS_SIZE), background)
    draw = ImageDraw.Draw(canvas)
    for channel, color in CHANNEL_COLORS.items():
        counts = histograms.for_channel(channel)
        if counts.max() <= 0:
            continue
        points = _curve_points(counts, CANVAS_SIZE)
        for start, end in zip(points, points[1:]):
            draw.line([start, end], fill=color)
    return RasterImage(np.asarray(canvas))


def histogram_image(image: RasterImage, background: str = "white") -> RasterImage:
    """Render the histogram of ``image``."""
    return render_histogram(generate_histogram(image), background)
