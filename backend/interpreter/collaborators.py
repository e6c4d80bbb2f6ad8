"""
Collaborator contracts consumed by the interpreter.

This module contains:
- Narrow Protocols (capabilities, not implementations)
- The Product value type exchanged with catalog and cart
- Zero interpreter logic
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from interpreter.enums.tone import Tone

if TYPE_CHECKING:
    from adapters.recognition.base import RecognitionAdapter
    from adapters.synthesis.base import SynthesisAdapter


# ---------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Product:
    """Catalog entry."""
    id: str
    name: str
    price: float = 0.0
    category: str = ""
    is_active: bool = True
    in_stock: bool = True

    @property
    def orderable(self) -> bool:
        return self.is_active and self.in_stock

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------
# Application collaborators
# ---------------------------------------------------------------------

@runtime_checkable
class Navigator(Protocol):
    def navigate(self, path: str) -> None:
        """Fire-and-forget page navigation."""


@runtime_checkable
class ProductCatalog(Protocol):
    async def lookup_product(self, query: str) -> Product | None:
        """
        Case-insensitive substring match on product name.

        Returns at most one currently orderable product, or None.
        Raises CatalogLookupError when the catalog cannot be queried.
        """


@runtime_checkable
class Cart(Protocol):
    def add_to_cart(self, product: Product) -> None: ...


@runtime_checkable
class Notifier(Protocol):
    def notify(self, title: str, message: str, tone: Tone) -> None:
        """Fire-and-forget visual notification."""


@runtime_checkable
class LocaleSource(Protocol):
    def current_locale(self) -> str: ...


# ---------------------------------------------------------------------
# Host capabilities
# ---------------------------------------------------------------------

@runtime_checkable
class HostCapabilities(Protocol):
    """
    Capability probes. Queried on every use, never cached: a host may
    gain or lose a capability during its lifetime.
    """

    def recognition(self) -> RecognitionAdapter:
        """Raises NotSupportedError when no recognition engine is present."""

    def synthesis(self) -> SynthesisAdapter | None:
        """None when no synthesis engine is present (not an error)."""
