"""
Exception types raised by the pickident pipeline.
Unreadable files surface as the built-in OSError.
"""

class PickIdentError(Exception):
    """Base class for pipeline errors."""

class ConfigError(PickIdentError, ValueError):
    """A required input is missing or a setting is out of range."""

class FormatError(PickIdentError, ValueError):
    """An input file does not contain what the pipeline expects."""
