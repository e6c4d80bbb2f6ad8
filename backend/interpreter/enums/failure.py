"""
Session failure enumeration.

Failures the reducer reports to the user. The runtime maps each one
to a FeedbackEvent; the reducer never builds user-facing text.
"""

from __future__ import annotations

from enum import Enum


class Failure(str, Enum):
    """
    NOT_SUPPORTED:
        Host has no recognition engine. Not retryable until the
        environment changes.

    RECOGNITION_ERROR:
        Transient engine failure. Retryable by starting again.
    """

    NOT_SUPPORTED = "NOT_SUPPORTED"
    RECOGNITION_ERROR = "RECOGNITION_ERROR"
