"""Pixel-buffer engine: image buffer, transforms, analysis and compositing."""

from rasterlab.exceptions import BoundsError, InvalidArgumentError, PipelineError, RasterLabError

from .compositing import apply_split_view, apply_with_mask
from .image_buffer import Channel, RasterImage
from .operations import (
    BrightenParams,
    CompressParams,
    LevelsParams,
    Operation,
    OperationSpec,
    apply_operation,
)

__all__ = [
    "BoundsError",
    "BrightenParams",
    "Channel",
    "CompressParams",
    "InvalidArgumentError",
    "LevelsParams",
    "Operation",
    "OperationSpec",
    "PipelineError",
    "RasterImage",
    "RasterLabError",
    "apply_operation",
    "apply_split_view",
    "apply_with_mask",
]
