"""
Image processing framework for chaining engine operations.

This module provides composable processors and pipelines that wrap the
engine's operations, previews and format conversions behind a single
process() protocol with structured success and failure results.
"""

from .base import CompositeProcessor, ImageProcessingError, ImageProcessingResult, ProcessorBase
from .converters import ArrayToImageConverter, ImageToArrayConverter, ImageToPILConverter, PILToImageConverter
from .pipeline import ImageProcessingPipeline
from .processors import HistogramProcessor, MaskedOperationProcessor, OperationProcessor, SplitViewProcessor

__all__ = [
    "ImageProcessingError",
    "ImageProcessingResult",
    "ProcessorBase",
    "CompositeProcessor",
    "ArrayToImageConverter",
    "ImageToArrayConverter",
    "ImageToPILConverter",
    "PILToImageConverter",
    "ImageProcessingPipeline",
    "OperationProcessor",
    "SplitViewProcessor",
    "MaskedOperationProcessor",
    "HistogramProcessor",
]
