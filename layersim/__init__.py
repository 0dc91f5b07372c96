"""Layer-based survival combat simulator."""

__version__ = "0.1.0"
