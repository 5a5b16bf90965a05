"""
Capture package for recplay.
Screenshot persistence for sessions and playback runs.
"""

from .screenshot import CaptureResult, ScreenshotManager, sanitize

__all__ = [
    "CaptureResult",
    "ScreenshotManager",
    "sanitize",
]
