# errors.py


class ImpactError(Exception):
    """Base class for recoverable analysis failures."""


class InvalidRasterData(ImpactError):
    """Band 0 cannot be turned into a hazard mask (scalar band, wrong size)."""


class DegenerateBounds(ImpactError):
    """Bounding box has zero (or negative) width or height."""


class InvalidPixelArea(ImpactError):
    """Resolution yields a zero or non-finite pixel area."""


class RasterReadError(ImpactError):
    """The raster file could not be opened or read."""


class RoadSourceError(ImpactError):
    """Road features could not be fetched or parsed."""
