"""
Image format converters for the processor framework.

Provides converters between RasterImage, plain numpy arrays and Pillow
images so front ends can feed the engine and display its output. File
decoding stays with the caller.
"""

from typing import Any

import numpy as np
from PIL import Image

from rasterlab.pipeline.image_buffer import RasterImage

from .base import ImageProcessingResult, ProcessorBase


class ArrayToImageConverter(ProcessorBase):
    """Converts (H, W, 3) numpy arrays to RasterImage objects."""

    def __init__(self) -> None:
        super().__init__("array_to_image")

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        if not isinstance(input_data, np.ndarray):
            return ImageProcessingResult.failure_result(
                self._create_error(f"Expected numpy array, got {type(input_data).__name__}")
            )
        return self._run_engine(
            RasterImage.from_array,
            input_data,
            metadata={"original_shape": input_data.shape, "original_dtype": str(input_data.dtype)},
        )


class ImageToArrayConverter(ProcessorBase):
    """Converts RasterImage objects to independent numpy arrays."""

    def __init__(self) -> None:
        super().__init__("image_to_array")

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        failure = self._expect_image(input_data)
        if failure is not None:
            return failure
        array = input_data.to_array()
        return ImageProcessingResult.success_result(array, {"shape": array.shape})


class ImageToPILConverter(ProcessorBase):
    """Converts RasterImage to an 8-bit RGB PIL image for display."""

    def __init__(self) -> None:
        super().__init__("image_to_pil")

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        failure = self._expect_image(input_data)
        if failure is not None:
            return failure

        result = ImageProcessingResult.success_result(None)
        pixels = input_data.pixels
        if pixels.min() < 0 or pixels.max() > 255:
            result.add_warning("Clamped out-of-range channel values to [0, 255]")
            pixels = np.clip(pixels, 0, 255)
        result.data = Image.fromarray(pixels.astype(np.uint8))
        result.metadata["size"] = result.data.size
        return result


class PILToImageConverter(ProcessorBase):
    """Converts PIL images of any mode to RasterImage via RGB."""

    def __init__(self) -> None:
        super().__init__("pil_to_image")

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        if not isinstance(input_data, Image.Image):
            return ImageProcessingResult.failure_result(
                self._create_error(f"Expected PIL image, got {type(input_data).__name__}")
            )

        original_mode = input_data.mode
        rgb = input_data if original_mode == "RGB" else input_data.convert("RGB")
        result = self._run_engine(RasterImage, np.asarray(rgb), metadata={"original_mode": original_mode})
        if result.success and original_mode != "RGB":
            result.add_warning(f"Converted {original_mode} image to RGB")
        return result
