"""Personal contact relationship management data layer."""

__version__ = "0.1.0"
