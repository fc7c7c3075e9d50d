"""Base classes for the processor framework.

A processor wraps one step a front end performs on an image (convert it,
run an engine operation, render a preview) behind ``process()``. Processors
never raise for bad input or rejected parameters; they return an
ImageProcessingResult describing the failure so a pipeline can report which
stage went wrong.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from PIL import Image

from rasterlab.exceptions import RasterLabError
from rasterlab.pipeline.image_buffer import RasterImage

ProcessedData = RasterImage | np.ndarray | Image.Image | None


class ImageProcessingError(RasterLabError):
    """A failure reported by a processor, tagged with the stage that produced it."""

    def __init__(self, message: str, stage: str | None = None, cause: BaseException | None = None) -> None:
        self.message = message
        self.stage = stage
        self.cause = cause
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.stage:
            return f"Stage '{self.stage}' failed: {self.message}"
        return f"Processing failed: {self.message}"


@dataclass
class ImageProcessingResult:
    """Outcome of one processor or a whole pipeline.

    Attributes:
        success: False once any error has been recorded.
        data: The produced image (or array / PIL image for converters);
            None on failure.
        errors: Errors in the order they were raised.
        warnings: Non-fatal remarks, e.g. a lossy mode conversion.
        metadata: Stage-specific details such as the applied operation.
    """

    success: bool
    data: ProcessedData = None
    errors: list[ImageProcessingError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success_result(cls, data: ProcessedData, metadata: dict[str, Any] | None = None) -> "ImageProcessingResult":
        return cls(success=True, data=data, metadata=dict(metadata or {}))

    @classmethod
    def failure_result(
        cls, error: ImageProcessingError, metadata: dict[str, Any] | None = None
    ) -> "ImageProcessingResult":
        return cls(success=False, errors=[error], metadata=dict(metadata or {}))

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def add_error(self, error: ImageProcessingError) -> None:
        """Record an error; the result counts as failed from now on."""
        self.errors.append(error)
        self.success = False

    def unwrap(self) -> ProcessedData:
        """Return the data of a successful result or raise its first error.

        Raises:
            ImageProcessingError: If the result is a failure.
        """
        if not self.success:
            raise self.errors[0] if self.errors else ImageProcessingError("no result produced")
        return self.data


class ProcessorBase(ABC):
    """Base class for all processors."""

    def __init__(self, stage_name: str) -> None:
        self.stage_name = stage_name

    @abstractmethod
    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        """Process input data.

        Args:
            input_data: Usually a RasterImage; converters accept arrays or
                PIL images.
            context: Per-run values shared by every stage of a pipeline,
                e.g. ``mask`` or ``split_percent``.

        Returns:
            ImageProcessingResult indicating success or failure
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.stage_name!r})"

    def _create_error(self, message: str, cause: BaseException | None = None) -> ImageProcessingError:
        return ImageProcessingError(message, stage=self.stage_name, cause=cause)

    def _expect_image(self, input_data: Any) -> ImageProcessingResult | None:
        """Return a failure result unless input_data is a RasterImage."""
        if isinstance(input_data, RasterImage):
            return None
        return ImageProcessingResult.failure_result(
            self._create_error(f"Expected RasterImage, got {type(input_data).__name__}")
        )

    def _run_engine(
        self, func: Callable[..., RasterImage], *args: Any, metadata: dict[str, Any] | None = None
    ) -> ImageProcessingResult:
        """Call an engine function, turning its validation errors into a failure result."""
        try:
            image = func(*args)
        except RasterLabError as e:
            return ImageProcessingResult.failure_result(self._create_error(str(e), e), metadata)
        return ImageProcessingResult.success_result(image, metadata)


class CompositeProcessor(ProcessorBase):
    """Runs processors in sequence, feeding each one the previous output."""

    def __init__(self, processors: list[ProcessorBase], stage_name: str = "composite") -> None:
        super().__init__(stage_name)
        self.processors = processors

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        combined = ImageProcessingResult.success_result(input_data)

        for processor in self.processors:
            result = processor.process(combined.data, context)
            if not result.success:
                return result
            combined.data = result.data
            combined.metadata.update(result.metadata)
            combined.warnings.extend(result.warnings)

        return combined
