"""Error types raised by the quality algorithms."""


class XQualityError(Exception):
    """Base class for all xquality errors."""


class UnsupportedChannelCount(XQualityError, ValueError):
    """Input image channel count is not 1, 3 or 4."""

    def __init__(self, channels):
        self.channels = channels
        super().__init__(f"Unsupported channel count: {channels} (expected 1, 3 or 4)")


class ModelLoadError(XQualityError, IOError):
    """Model or range resource is missing, unreadable or malformed."""


class DimensionMismatch(XQualityError, ValueError):
    """Feature vector, range table and model widths disagree."""

    def __init__(self, expected: int, actual: int, what: str = "feature vector"):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Dimension mismatch for {what}: expected {expected}, got {actual}")


class SizeMismatch(XQualityError, ValueError):
    """Images differ in size, or the block size cannot partition the image."""


class EmptyReference(XQualityError, RuntimeError):
    """Reference-bound computation requested without a bound reference."""


class PredictionError(XQualityError, RuntimeError):
    """The regression model failed during inference."""
