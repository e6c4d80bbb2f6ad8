"""
Interpreter exception taxonomy.

None of these are fatal to the hosting application: every one is
converted into a FeedbackEvent before it leaves the interpreter.
"""

from __future__ import annotations


class InterpreterError(Exception):
    """Base class for voice interpreter errors."""


class NotSupportedError(InterpreterError):
    """The host has no speech-recognition capability."""


class RecognitionError(InterpreterError):
    """Transient recognition engine failure. Retryable by starting again."""


class CatalogLookupError(InterpreterError):
    """The product catalog could not be queried."""
