# netcompat/core/__init__.py
from .exceptions import NetcompatError, Fatal
from .logger import Log

__all__ = ["NetcompatError", "Fatal", "Log"]
