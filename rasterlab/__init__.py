"""rasterlab – in-memory RGB raster transformation and analysis engine."""

__version__ = "0.1.0"
