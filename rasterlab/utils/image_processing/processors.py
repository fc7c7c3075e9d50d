"""
Processors wrapping engine operations.

Each processor adapts one engine entry point (whole-image operation, split
view preview, masked operation, histogram rendering) to the ProcessorBase
protocol so it can be chained in an ImageProcessingPipeline.
"""

from typing import Any

from rasterlab.pipeline.compositing import apply_split_view, apply_with_mask
from rasterlab.pipeline.histogram import generate_histogram, render_histogram
from rasterlab.pipeline.image_buffer import RasterImage
from rasterlab.pipeline.operations import Operation, OperationSpec, apply_operation
from rasterlab.utils import config

from .base import ImageProcessingResult, ProcessorBase


def _as_spec(operation: Operation | OperationSpec) -> OperationSpec:
    return operation if isinstance(operation, OperationSpec) else OperationSpec(operation)


class OperationProcessor(ProcessorBase):
    """Applies one operation to the whole image."""

    def __init__(self, spec: Operation | OperationSpec) -> None:
        self.spec = _as_spec(spec)
        super().__init__(self.spec.name)

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        failure = self._expect_image(input_data)
        if failure is not None:
            return failure
        return self._run_engine(apply_operation, input_data, self.spec, metadata={"operation": self.spec.describe()})


class SplitViewProcessor(ProcessorBase):
    """Renders a before/after split preview of one operation.

    The split position comes from the constructor argument, then
    ``context["split_percent"]``, then the ``preview.split_percent`` config
    value.
    """

    def __init__(self, spec: Operation | OperationSpec, split_percent: int | None = None) -> None:
        self.spec = _as_spec(spec)
        self.split_percent = split_percent
        super().__init__(f"split_view:{self.spec.name}")

    def _resolve_split(self, context: dict[str, Any] | None) -> int:
        if self.split_percent is not None:
            return self.split_percent
        if context and "split_percent" in context:
            return int(context["split_percent"])
        return config.get_default_split_percent()

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        failure = self._expect_image(input_data)
        if failure is not None:
            return failure

        split_percent = self._resolve_split(context)
        return self._run_engine(
            apply_split_view,
            input_data,
            self.spec,
            split_percent,
            metadata={"operation": self.spec.describe(), "split_percent": split_percent},
        )


class MaskedOperationProcessor(ProcessorBase):
    """Applies a maskable operation where ``context["mask"]`` is near black."""

    def __init__(self, operation: Operation | OperationSpec) -> None:
        self.spec = _as_spec(operation)
        super().__init__(f"masked:{self.spec.name}")

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        failure = self._expect_image(input_data)
        if failure is not None:
            return failure

        mask = (context or {}).get("mask")
        if not isinstance(mask, RasterImage):
            return ImageProcessingResult.failure_result(
                self._create_error("A RasterImage mask is required in context['mask']")
            )

        return self._run_engine(
            apply_with_mask, input_data, mask, self.spec, metadata={"operation": self.spec.describe(), "masked": True}
        )


class HistogramProcessor(ProcessorBase):
    """Replaces the image with a rendering of its channel histograms."""

    def __init__(self, background: str | None = None) -> None:
        super().__init__("histogram")
        self.background = background

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        failure = self._expect_image(input_data)
        if failure is not None:
            return failure

        background = self.background or config.get_histogram_background()
        histograms = generate_histogram(input_data)
        try:
            rendered = render_histogram(histograms, background)
        except ValueError as e:
            # Pillow rejects unknown color names
            return ImageProcessingResult.failure_result(self._create_error(f"Cannot render histogram: {e}", e))

        return ImageProcessingResult.success_result(rendered, {"histogram_peaks": histograms.peaks()})
