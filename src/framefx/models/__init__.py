"""Data models for framefx."""

from framefx.models.schema import MediaDescriptor, RenderResult

__all__ = ["MediaDescriptor", "RenderResult"]
