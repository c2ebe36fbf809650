"""Utility functions for framefx."""

from framefx.utils.logging import get_logger, set_verbose

__all__ = ["get_logger", "set_verbose"]
