"""
Feedback tone enumeration.
"""

from __future__ import annotations

from enum import Enum


class Tone(str, Enum):
    """Visual tone of a feedback notification."""

    INFO = "info"
    ERROR = "error"
    SUCCESS = "success"
