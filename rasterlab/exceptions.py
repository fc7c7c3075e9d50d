"""exceptions.py

Defines custom exception classes for rasterlab, providing clear error types
for engine operations and configuration.

All exceptions inherit from RasterLabError, allowing for unified error handling.
"""


class RasterLabError(Exception):  # pylint: disable=too-few-public-methods
    """Base class for all rasterlab errors."""


class PipelineError(RasterLabError):
    """Base exception for errors raised by engine operations."""


class InvalidArgumentError(PipelineError, ValueError):
    """Raised when an operation parameter is out of range or inconsistent.

    Covers misordered levels points, bad downscale targets, mismatched
    image dimensions and unknown operation names.
    """

    def __init__(self, message: str, argument: str = "") -> None:
        """Initialize the error with the name of the offending argument.

        Args:
            message: Error message
            argument: Name of the argument that failed validation
        """
        super().__init__(message)
        self.argument = argument


class BoundsError(PipelineError, IndexError):
    """Raised when a pixel coordinate falls outside the image."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        """Initialize the error with the rejected coordinate.

        Args:
            x: Requested column
            y: Requested row
            width: Image width
            height: Image height
        """
        super().__init__(f"Pixel coordinates ({x}, {y}) are out of bounds for a {width}x{height} image")
        self.x = x
        self.y = y
        self.width = width
        self.height = height


class ConfigurationError(RasterLabError):
    """Raised when configuration is invalid or unreadable."""
