"""Error taxonomy shared by every minicv operation."""


class MinicvError(Exception):
    """Base class for all minicv errors."""


class InvalidDimensions(MinicvError, ValueError):
    """Requested dimensions are not strictly positive or otherwise unusable."""


class UnsupportedDataType(MinicvError, TypeError):
    """Element type tag outside the supported set, or accessor type mismatch."""


class ShapeMismatch(MinicvError, ValueError):
    """Matrices that must agree in shape, channels or type do not."""


class UnsupportedOperation(MinicvError, ValueError):
    """Option, code or policy the kernel does not implement."""


class IndexOutOfRange(MinicvError, IndexError):
    """Index or region outside the addressed container."""


class DataSizeMismatch(MinicvError, ValueError):
    """Supplied data does not match the declared dimensions."""


class InvalidOperation(MinicvError, ValueError):
    """Operation applied to a matrix of the wrong dimensionality."""


class CapabilityNotInstalled(MinicvError, RuntimeError):
    """Optional capability requested without a registered implementation."""
