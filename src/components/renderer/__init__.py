"""Renderer component."""

from .renderer import (
    RenderOptions,
    chunk_paths,
    render_artifacts,
    render_document,
    render_line,
    render_summary,
    split_chunks,
    write_artifacts,
    write_atomic,
)

__all__ = [
    "RenderOptions",
    "chunk_paths",
    "render_artifacts",
    "render_document",
    "render_line",
    "render_summary",
    "split_chunks",
    "write_artifacts",
    "write_atomic",
]
