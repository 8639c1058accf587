"""
Utilities package for harper-frames.

Exports shared helpers for logging and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from harper_frames.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
