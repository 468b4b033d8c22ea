"""Admin controller for gateway plugin configs."""

__version__ = "0.1.0"
