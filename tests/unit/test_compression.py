"""Tests for Haar wavelet compression."""

import numpy as np
import pytest

from rasterlab.exceptions import InvalidArgumentError
from rasterlab.pipeline import compression
from rasterlab.pipeline.image_buffer import RasterImage


class TestHaar:
    @pytest.mark.parametrize(("n", "expected"), [(1, 1), (2, 2), (3, 4), (4, 4), (5, 8), (200, 256)])
    def test_next_power_of_two(self, n: int, expected: int) -> None:  # noqa: PLR6301
        assert compression.next_power_of_two(n) == expected

    def test_inverse_undoes_forward(self) -> None:  # noqa: PLR6301
        rng = np.random.default_rng(7)
        data = rng.uniform(0, 255, (8, 8))

        assert np.allclose(compression.haar_inverse(compression.haar_forward(data)), data)

    def test_forward_2x2(self) -> None:  # noqa: PLR6301
        coeffs = compression.haar_forward(np.array([[1.0, 3.0], [5.0, 7.0]]))

        assert np.allclose(coeffs, [[8.0, -2.0], [-4.0, 0.0]])

    def test_forward_preserves_energy(self) -> None:  # noqa: PLR6301
        rng = np.random.default_rng(3)
        data = rng.uniform(0, 255, (16, 16))

        assert np.isclose(np.sum(compression.haar_forward(data) ** 2), np.sum(data**2))


class TestThreshold:
    def test_energy_threshold(self) -> None:  # noqa: PLR6301
        coeffs = np.array([[4.0, -1.0], [3.0, 2.0]])

        # magnitudes 1, 2, 3, 4 accumulate to 1, 3, 6, 10; half of 10 is reached at 3
        assert compression.energy_threshold(coeffs, 50) == 3.0

    def test_apply_threshold_zeroes_small_coefficients(self) -> None:  # noqa: PLR6301
        coeffs = np.array([[4.0, -1.0], [3.0, 2.0]])

        assert compression.apply_threshold(coeffs, 50).tolist() == [[4.0, 0.0], [0.0, 0.0]]

    def test_zero_percent_discards_nothing(self) -> None:  # noqa: PLR6301
        coeffs = np.array([[0.5, -1.0], [3.0, 2.0]])

        assert np.array_equal(compression.apply_threshold(coeffs, 0), coeffs)


class TestCompress:
    def test_zero_percent_is_identity(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        assert compression.compress(random_image, 0) == random_image

    def test_full_compression_flattens(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        result = compression.compress(random_image, 100)

        assert result.size == random_image.size
        assert not result.pixels.any()

    def test_preserves_dimensions(self) -> None:  # noqa: PLR6301
        image = RasterImage(np.full((3, 5, 3), 80))

        assert compression.compress(image, 30).size == (5, 3)

    def test_padded_plane_golden(self) -> None:  # noqa: PLR6301
        # 3x2 red plane with one lit pixel pads to 4x4. Its Haar coefficients are
        # four of magnitude 1 and three of magnitude 2 (total 10); discarding 35%
        # zeroes the four small ones. That leaves 3 at the lit pixel, and the
        # rest comes back zero or negative and clamps to 0.
        pixels = np.zeros((2, 3, 3), dtype=np.int32)
        pixels[0, 0, 0] = 4

        result = compression.compress(RasterImage(pixels), 35)

        assert result.pixels[:, :, 0].tolist() == [[3, 0, 0], [0, 0, 0]]
        assert not result.pixels[:, :, 1:].any()

    def test_is_deterministic(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        assert compression.compress(random_image, 40) == compression.compress(random_image, 40)

    def test_output_is_in_range(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        result = compression.compress(random_image, 60)

        assert result.pixels.min() >= 0
        assert result.pixels.max() <= 255

    def test_does_not_modify_input(self, random_image: RasterImage) -> None:  # noqa: PLR6301
        before = random_image.copy()
        compression.compress(random_image, 50)

        assert random_image == before

    @pytest.mark.parametrize("percentage", [-1, 101, 250])
    def test_rejects_invalid_percentage(self, random_image: RasterImage, percentage: int) -> None:  # noqa: PLR6301
        with pytest.raises(InvalidArgumentError):
            compression.compress(random_image, percentage)
