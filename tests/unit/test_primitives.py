"""Tests for the transform primitives."""

import numpy as np
import pytest

from rasterlab.exceptions import InvalidArgumentError
from rasterlab.pipeline.image_buffer import RasterImage
from rasterlab.pipeline.primitives import (
    BorderPolicy,
    apply_color_matrix,
    clamp,
    convolve,
    map_pixels,
    round_half_up,
)

IDENTITY_KERNEL = np.array([[0, 0, 0], [0, 1, 0], [0, 0, 0]], dtype=float)
HALF_KERNEL = np.array([[0, 0, 0], [0, 0.5, 0], [0, 0, 0]])


class TestClampAndRounding:
    def test_clamp_saturates(self) -> None:  # noqa: PLR6301
        result = clamp(np.array([-5, 0, 128, 255, 300]))

        assert result.tolist() == [0, 0, 128, 255, 255]
        assert result.dtype == np.int32

    def test_round_half_up(self) -> None:  # noqa: PLR6301
        assert round_half_up(np.array([0.5, 1.5, 2.4, 2.5, -0.5])).tolist() == [1.0, 2.0, 2.0, 3.0, 0.0]


class TestMapAndMatrix:
    def test_map_pixels_does_not_touch_source(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        before = random_image.copy()

        def _invert(pixels: np.ndarray) -> np.ndarray:
            pixels[:] = 255 - pixels
            return pixels

        result = map_pixels(random_image, _invert)

        assert random_image == before
        assert result == RasterImage(255 - before.pixels)

    def test_map_pixels_rejects_shape_change(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        with pytest.raises(InvalidArgumentError):
            map_pixels(random_image, lambda pixels: pixels[:, :, :2])

    def test_identity_matrix(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        assert apply_color_matrix(random_image, np.eye(3)) == random_image

    def test_matrix_truncates_then_clamps(self) -> None:  # noqa: PLR6301
        image = RasterImage(np.array([[[3, 3, 3], [200, 200, 200]]]))
        halved = apply_color_matrix(image, np.eye(3) * 0.5)
        doubled = apply_color_matrix(image, np.eye(3) * 2)

        assert halved.get_pixel(0, 0) == (1, 1, 1)
        assert doubled.get_pixel(1, 0) == (255, 255, 255)

    def test_matrix_must_be_3x3(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        with pytest.raises(InvalidArgumentError):
            apply_color_matrix(random_image, np.eye(2))


class TestConvolve:
    @pytest.mark.parametrize("border", list(BorderPolicy))
    def test_identity_kernel(self, random_image: RasterImage, border: BorderPolicy) -> None:  # noqa: PLR6301
        assert convolve(random_image, IDENTITY_KERNEL, border) == random_image

    @pytest.mark.parametrize("kernel", [np.ones((2, 2)), np.ones((3, 5)), np.ones(3)])
    def test_kernel_must_be_square_and_odd(self, random_image: RasterImage, kernel: np.ndarray) -> None:  # noqa: PLR6301
        with pytest.raises(InvalidArgumentError):
            convolve(random_image, kernel)

    def test_skip_copies_border(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        result = convolve(random_image, np.full((3, 3), 1 / 9))

        assert np.array_equal(result.pixels[0], random_image.pixels[0])
        assert np.array_equal(result.pixels[-1], random_image.pixels[-1])
        assert np.array_equal(result.pixels[:, 0], random_image.pixels[:, 0])
        assert np.array_equal(result.pixels[:, -1], random_image.pixels[:, -1])

    def test_skip_on_image_smaller_than_kernel(self) -> None:  # noqa: PLR6301
        image = RasterImage(np.array([[[1, 2, 3], [4, 5, 6]]]))

        assert convolve(image, np.full((3, 3), 1 / 9)) == image

    def test_skip_rounds_half_up_and_replicate_truncates(self) -> None:  # noqa: PLR6301
        image = RasterImage(np.full((3, 3, 3), 3))

        skipped = convolve(image, HALF_KERNEL, BorderPolicy.SKIP)
        replicated = convolve(image, HALF_KERNEL, BorderPolicy.REPLICATE)

        assert skipped.get_pixel(1, 1) == (2, 2, 2)
        assert skipped.get_pixel(0, 0) == (3, 3, 3)
        assert np.all(replicated.pixels == 1)

    def test_replicate_reads_nearest_edge(self) -> None:  # noqa: PLR6301
        # A kernel that only looks one pixel left samples column 0 again at x=0.
        kernel = np.array([[0, 0, 0], [1, 0, 0], [0, 0, 0]], dtype=float)
        image = RasterImage(np.array([[[10, 10, 10], [20, 20, 20], [30, 30, 30]]]))

        result = convolve(image, kernel, BorderPolicy.REPLICATE)

        assert [result.get_pixel(x, 0)[0] for x in range(3)] == [10, 10, 20]

    def test_results_are_clamped(self) -> None:  # noqa: PLR6301
        image = RasterImage(np.full((3, 3, 3), 200))

        result = convolve(image, IDENTITY_KERNEL * 2, BorderPolicy.REPLICATE)

        assert np.all(result.pixels == 255)
