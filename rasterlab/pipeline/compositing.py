"""Compositing of original and processed pixels.

Split view keeps the original left of a vertical boundary and shows the
processed image right of it; mask-gated application takes the processed
pixel only where a companion mask is near-black.
"""

import numpy as np

from rasterlab.exceptions import InvalidArgumentError
from rasterlab.utils.log import get_logger

from .image_buffer import RasterImage
from .operations import Operation, OperationSpec, apply_operation, apply_pixel_operation, with_step

LOGGER = get_logger(__name__)

MASK_BLACK_THRESHOLD = 10


def split_boundary(width: int, split_percent: int) -> int:
    """Column index where the processed half of a split view starts."""
    if not 0 <= split_percent <= 100:
        raise InvalidArgumentError(f"Split position must be within [0, 100], got {split_percent}", "split_percent")
    return width * split_percent // 100


def apply_split_view(image: RasterImage, spec: OperationSpec | Operation, split_percent: int) -> RasterImage:
    """Preview an operation on the right-hand part of the image.

    Column x keeps the original pixel when x < W * split_percent / 100 and
    takes the processed pixel otherwise, so 0 shows the fully processed
    image and 100 the untouched original.

    Args:
        image: Source image, left untouched.
        spec: Operation to preview. Levels adjustment must carry its
            black/mid/white payload.
        split_percent: Boundary position as a percentage of the width.

    Returns:
        RasterImage: The composited preview.

    Raises:
        InvalidArgumentError: If split_percent is outside [0, 100].
    """
    if isinstance(spec, Operation):
        spec = OperationSpec(spec)
    boundary = split_boundary(image.width, split_percent)
    LOGGER.debug("Split view of %s at column %s/%s", spec.name, boundary, image.width)
    processed = apply_operation(image, spec)
    result = processed.pixels.copy()
    result[:, :boundary] = image.pixels[:, :boundary]
    return RasterImage(result, with_step(image, {**spec.describe(), "split_percent": split_percent}))


def near_black(mask: RasterImage) -> np.ndarray:
    """Boolean (H, W) array, true where every mask channel is below the threshold."""
    return np.all(mask.pixels < MASK_BLACK_THRESHOLD, axis=2)


def apply_with_mask(source: RasterImage, mask: RasterImage, operation: Operation | OperationSpec) -> RasterImage:
    """Apply a per-pixel operation only where the mask is near-black.

    Supported operations are grayscale, sepia, the red/green/blue
    components, blur and sharpen. Blur and sharpen replicate edge pixels,
    so border pixels under the mask are convolved too.

    Raises:
        InvalidArgumentError: If the mask size differs from the source or
            the operation cannot be masked.
    """
    if isinstance(operation, OperationSpec):
        operation = operation.operation
    if not operation.maskable:
        raise InvalidArgumentError(f"Operation '{operation.value}' cannot be applied through a mask", "operation")
    if not source.same_size(mask):
        raise InvalidArgumentError(
            f"Source and mask images must have the same dimensions, got {source.size} and {mask.size}", "mask"
        )
    gate = near_black(mask)
    LOGGER.debug("Masked %s over %s of %s pixels", operation.value, int(gate.sum()), gate.size)
    processed = apply_pixel_operation(source, operation)
    result = np.where(gate[:, :, np.newaxis], processed.pixels, source.pixels)
    return RasterImage(result, with_step(source, {"operation": operation.value, "masked": True}))
