"""operations.py.

Defines the closed set of named image operations and their parameter
payloads. A front end parses a command name once, through
Operation.from_name, and from then on passes an OperationSpec around, so
an unknown or malformed operation is rejected before any pixel is touched.
"""

import copy
from collections.abc import Callable, Sequence
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Union

from rasterlab.exceptions import InvalidArgumentError
from rasterlab.utils.log import get_logger

from . import compression, histogram, levels, transforms
from .image_buffer import RasterImage
from .primitives import BorderPolicy

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class LevelsParams:
    """Black, mid and white points of a levels adjustment."""

    black: int
    mid: int
    white: int

    def __post_init__(self) -> None:
        levels.validate_levels(self.black, self.mid, self.white)


@dataclass(frozen=True)
class BrightenParams:
    increment: int


@dataclass(frozen=True)
class CompressParams:
    """Share of coefficient energy to discard, in percent."""

    percentage: int

    def __post_init__(self) -> None:
        compression.validate_percentage(self.percentage)


OperationParams = Union[LevelsParams, BrightenParams, CompressParams]


class Operation(Enum):
    """Image-to-image operations, valued by their command names."""

    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    BLUR = "blur"
    SHARPEN = "sharpen"
    BRIGHTEN = "brighten"
    HORIZONTAL_FLIP = "horizontal-flip"
    VERTICAL_FLIP = "vertical-flip"
    RED_COMPONENT = "red-component"
    GREEN_COMPONENT = "green-component"
    BLUE_COMPONENT = "blue-component"
    VALUE_COMPONENT = "value-component"
    INTENSITY_COMPONENT = "intensity-component"
    LUMA_COMPONENT = "luma-component"
    COLOR_CORRECT = "color-correct"
    LEVELS_ADJUST = "levels-adjust"
    COMPRESS = "compress"

    @classmethod
    def from_name(cls, name: str) -> "Operation":
        """Look up an operation by its command name.

        Raises:
            InvalidArgumentError: If no operation has that name.
        """
        try:
            return cls(name)
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown operation: {name}", "operation") from exc

    @property
    def params_type(self) -> type | None:
        """Payload class this operation requires, or None."""
        return _PARAMS_TYPES.get(self)

    @property
    def maskable(self) -> bool:
        """Whether the operation can be gated per pixel by a mask."""
        return self in MASKABLE_OPERATIONS


_PARAMS_TYPES: dict[Operation, type] = {
    Operation.LEVELS_ADJUST: LevelsParams,
    Operation.BRIGHTEN: BrightenParams,
    Operation.COMPRESS: CompressParams,
}

MASKABLE_OPERATIONS = frozenset(
    {
        Operation.GRAYSCALE,
        Operation.SEPIA,
        Operation.RED_COMPONENT,
        Operation.GREEN_COMPONENT,
        Operation.BLUE_COMPONENT,
        Operation.BLUR,
        Operation.SHARPEN,
    }
)


@dataclass(frozen=True)
class OperationSpec:
    """An operation together with its parameter payload."""

    operation: Operation
    params: OperationParams | None = None

    def __post_init__(self) -> None:
        expected = self.operation.params_type
        if expected is None and self.params is not None:
            raise InvalidArgumentError(f"Operation '{self.operation.value}' takes no parameters", "params")
        if expected is not None and not isinstance(self.params, expected):
            raise InvalidArgumentError(
                f"Operation '{self.operation.value}' requires {expected.__name__}, got {type(self.params).__name__}",
                "params",
            )

    @classmethod
    def levels(cls, black: int, mid: int, white: int) -> "OperationSpec":
        return cls(Operation.LEVELS_ADJUST, LevelsParams(black, mid, white))

    @classmethod
    def brighten(cls, increment: int) -> "OperationSpec":
        return cls(Operation.BRIGHTEN, BrightenParams(increment))

    @classmethod
    def compress(cls, percentage: int) -> "OperationSpec":
        return cls(Operation.COMPRESS, CompressParams(percentage))

    @classmethod
    def parse(cls, name: str, args: Sequence[int] = ()) -> "OperationSpec":
        """Build a spec from a command name and its integer operands.

        Args:
            name: Command name, e.g. "levels-adjust".
            args: Operands in command order, e.g. (black, mid, white).

        Raises:
            InvalidArgumentError: If the name is unknown or the operand count
                does not match the operation.
        """
        operation = Operation.from_name(name)
        params_type = operation.params_type
        arity = len(fields(params_type)) if params_type else 0
        if len(args) != arity:
            raise InvalidArgumentError(f"Operation '{name}' expects {arity} argument(s), got {len(args)}", "args")
        params = params_type(*(int(arg) for arg in args)) if params_type else None
        return cls(operation, params)

    @property
    def name(self) -> str:
        return self.operation.value

    def describe(self) -> dict[str, Any]:
        """Metadata record of this operation for processing histories."""
        record: dict[str, Any] = {"operation": self.name}
        if self.params is not None:
            record.update(vars(self.params))
        return record


_SIMPLE_DISPATCH: dict[Operation, Callable[[RasterImage], RasterImage]] = {
    Operation.GRAYSCALE: transforms.grayscale,
    Operation.SEPIA: transforms.sepia,
    Operation.BLUR: transforms.blur,
    Operation.SHARPEN: transforms.sharpen,
    Operation.HORIZONTAL_FLIP: transforms.flip_horizontal,
    Operation.VERTICAL_FLIP: transforms.flip_vertical,
    Operation.RED_COMPONENT: transforms.visualize_red,
    Operation.GREEN_COMPONENT: transforms.visualize_green,
    Operation.BLUE_COMPONENT: transforms.visualize_blue,
    Operation.VALUE_COMPONENT: transforms.visualize_value,
    Operation.INTENSITY_COMPONENT: transforms.visualize_intensity,
    Operation.LUMA_COMPONENT: transforms.visualize_luma,
    Operation.COLOR_CORRECT: histogram.color_correct,
}


def _run(image: RasterImage, spec: OperationSpec) -> RasterImage:
    params = spec.params
    if isinstance(params, LevelsParams):
        return levels.levels_adjust(image, params.black, params.mid, params.white)
    if isinstance(params, BrightenParams):
        return transforms.brighten(image, params.increment)
    if isinstance(params, CompressParams):
        return compression.compress(image, params.percentage)
    return _SIMPLE_DISPATCH[spec.operation](image)


def with_step(image: RasterImage, record: dict[str, Any]) -> dict[str, Any]:
    """Deep copy of the image metadata with record appended to its processing history."""
    metadata = copy.deepcopy(image.metadata)
    metadata["processing_steps"] = [*metadata.get("processing_steps", []), record]
    return metadata


def apply_operation(image: RasterImage, spec: OperationSpec | Operation) -> RasterImage:
    """Apply one operation and return the new image.

    The result's metadata carries the input's processing history with this
    operation appended; the input image is not modified.
    """
    if isinstance(spec, Operation):
        spec = OperationSpec(spec)
    LOGGER.debug("Applying %s to %sx%s image", spec.name, image.width, image.height)
    result = _run(image, spec)
    result.metadata = with_step(image, spec.describe())
    return result


def apply_pixel_operation(image: RasterImage, operation: Operation) -> RasterImage:
    """Whole-image form of a maskable operation as evaluated under a mask.

    Kernel filters replicate edge pixels here instead of skipping the border.
    """
    if not operation.maskable:
        raise InvalidArgumentError(f"Operation '{operation.value}' cannot be applied through a mask", "operation")
    if operation is Operation.BLUR:
        return transforms.blur(image, BorderPolicy.REPLICATE)
    if operation is Operation.SHARPEN:
        return transforms.sharpen(image, BorderPolicy.REPLICATE)
    return _SIMPLE_DISPATCH[operation](image)
