class ColorMatcherError(Exception):
    """Base class for every error raised by the color matcher."""


class ConfigError(ColorMatcherError):
    """The matcher configuration is missing or malformed. Fatal at start-up."""


class ColorTableError(ColorMatcherError):
    """The color name table resource is missing or malformed. Fatal at start-up."""


class LearningDataError(ColorMatcherError):
    """Persisted training data for one model cannot be read or is malformed."""


class MaskShapeError(ColorMatcherError, ValueError):
    """Image and mask do not describe the same pixel grid."""
