from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from sdiwire._internal.providers import Option

T = TypeVar("T")


class IInjector(ABC):
    """Interface for injector-like objects."""

    @abstractmethod
    def bind(self, name: str, *options: Option) -> None:
        """Bind a named provider configured by ``options``."""

    @abstractmethod
    def create(self, name: str, target: Any) -> Any:
        """Resolve the binding ``name`` as ``target``."""

    @abstractmethod
    def create_all(self, target: Any, into: list[Any] | None = None) -> Any:
        """Create every binding compatible with the element type of ``target``."""

    @abstractmethod
    def inject(self, obj: T) -> T:
        """Assign bindings named by ``inject`` tags to the attributes of ``obj``."""
