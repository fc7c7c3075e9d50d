"""
Image processing pipeline for composing multiple processing operations.

Runs a sequence of processors over an image with per-stage logging,
records which stages ran, and converts unexpected exceptions into failed
results so a front end always gets an ImageProcessingResult back.
"""

from typing import Any

from rasterlab.utils.log import get_logger

from .base import CompositeProcessor, ImageProcessingResult, ProcessorBase

LOGGER = get_logger(__name__)


class ImageProcessingPipeline(CompositeProcessor):
    """Pipeline for executing multiple image processing steps in sequence."""

    def __init__(self, processors: list[ProcessorBase]) -> None:
        super().__init__(processors, "image_processing_pipeline")

    def _run_stage(self, processor: ProcessorBase, data: Any, context: dict[str, Any] | None) -> ImageProcessingResult:
        try:
            return processor.process(data, context)
        except Exception as e:
            LOGGER.exception("Unhandled exception in pipeline stage %s", processor.stage_name)
            return ImageProcessingResult.failure_result(
                self._create_error(f"Unhandled exception in stage {processor.stage_name}: {e}", e)
            )

    def process(self, input_data: Any, context: dict[str, Any] | None = None) -> ImageProcessingResult:
        """Execute all processors in the pipeline.

        The result's ``pipeline_stages`` metadata lists every stage that ran,
        including the one that failed.
        """
        total = len(self.processors)
        stages: list[dict[str, Any]] = []
        combined = ImageProcessingResult.success_result(input_data, {"pipeline_stages": stages})
        LOGGER.debug("Starting image processing pipeline with %s stages", total)

        for index, processor in enumerate(self.processors, start=1):
            LOGGER.debug("Executing stage %s/%s: %s", index, total, processor.stage_name)
            result = self._run_stage(processor, combined.data, context)
            stages.append(
                {
                    "stage": processor.stage_name,
                    "success": result.success,
                    "warnings": len(result.warnings),
                    "errors": len(result.errors),
                }
            )

            if not result.success:
                LOGGER.error("Pipeline failed at stage %s: %s", processor.stage_name, result.errors)
                for error in result.errors:
                    error.message = f"Pipeline stage {index}/{total} ({processor.stage_name}): {error.message}"
                result.metadata["pipeline_stages"] = stages
                return result

            combined.data = result.data
            combined.metadata.update({k: v for k, v in result.metadata.items() if k != "pipeline_stages"})
            combined.warnings.extend(result.warnings)
            if result.warnings:
                LOGGER.warning("Stage %s completed with warnings: %s", processor.stage_name, result.warnings)

        LOGGER.debug("Image processing pipeline completed")
        return combined
