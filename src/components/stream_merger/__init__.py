"""Multi-stream merger component."""

from .merger import merge_streams

__all__ = ["merge_streams"]
