"""
Navigation rule match mode.
"""

from __future__ import annotations

from enum import Enum


class MatchMode(str, Enum):
    """
    EXACT:
        The whole normalized transcript must equal the phrase.

    CONTAINS:
        The phrase may occur anywhere in the normalized transcript.
    """

    EXACT = "exact"
    CONTAINS = "contains"
