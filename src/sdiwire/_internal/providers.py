from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum, auto
from inspect import Parameter
from typing import TYPE_CHECKING, Any, NoReturn, TypeAlias, get_type_hints

from sdiwire._internal.shapes import ShapeInspector
from sdiwire.exceptions import (
    SDIWireFactoryTypeError,
    SDIWireNameConflictError,
    SDIWireNotFoundError,
    SDIWireSingletonConstructorError,
    SDIWireSingletonTypeError,
)

if TYPE_CHECKING:
    from typing_extensions import Self

Factory: TypeAlias = Callable[[], Any]
"""A zero-argument callable whose return annotation names a concrete class."""

_MISSING_ANNOTATION: Any = object()
_SHAPES = ShapeInspector()


class Lifecycle(Enum):
    """Define how a provider produces its object."""

    SINGLETON = auto()
    """Return the same bound instance on every creation."""

    FACTORY = auto()
    """Call the bound factory on every creation. Nothing is cached."""


@dataclass
class ProviderOptions:
    """Collect the configuration applied by ``Option`` callables during ``bind``."""

    instance: Any | None = None
    factory: Factory | None = None


Option: TypeAlias = Callable[[ProviderOptions], None]
"""A composable configuration step applied to a provider under construction."""


def singleton(instance: Any) -> Option:
    """Bind a pre-built instance. Every creation returns this exact object.

    Args:
        instance: Object of a concrete class.

    """

    def apply(options: ProviderOptions) -> None:
        options.instance = instance

    return apply


def constructor(factory: Factory) -> Option:
    """Bind a factory. Every creation calls it again.

    When both ``constructor`` and ``singleton`` are applied to one binding,
    the factory takes precedence.

    Args:
        factory: Callable taking no arguments, annotated to return a concrete
            class, or a concrete class with a no-argument constructor.

    """

    def apply(options: ProviderOptions) -> None:
        options.factory = factory

    return apply


@dataclass(frozen=True)
class ProviderSpec:
    """Describe one named binding and how its object is produced.

    Exactly one of ``instance`` and ``factory`` is set on a validated spec.
    ``concrete_type`` is the class of the singleton, or the class named by the
    factory's return annotation, and drives every compatibility check.
    """

    name: str
    """The binding name used for lookups and ``inject`` tags."""
    concrete_type: type[Any]
    """The concrete class of objects produced by this provider."""
    instance: Any | None = None
    """The bound singleton, if this is a singleton provider."""
    factory: Factory | None = None
    """The bound factory, if this is a factory provider."""

    @classmethod
    def from_options(cls, name: str, options: ProviderOptions) -> Self:
        """Validate collected options and build a spec.

        Args:
            name: Binding name.
            options: Options collected from ``Option`` callables.

        Raises:
            SDIWireSingletonConstructorError: If neither lifecycle is configured.
            SDIWireSingletonTypeError: If the singleton is not an object of a
                concrete class.
            SDIWireFactoryTypeError: If the factory breaks the factory contract.

        """
        if options.factory is not None:
            return cls(
                name=name,
                concrete_type=_FactoryValidator(name, options.factory).validate(),
                factory=options.factory,
            )

        if options.instance is None:
            msg = f"Binding '{name}' needs exactly one of singleton(...) or constructor(...)."
            raise SDIWireSingletonConstructorError(msg)

        if not _SHAPES.is_concrete_instance(options.instance):
            msg = (
                f"Singleton for binding '{name}' must be an object of a concrete class, "
                f"got {options.instance!r}."
            )
            raise SDIWireSingletonTypeError(msg)

        return cls(name=name, concrete_type=type(options.instance), instance=options.instance)

    @property
    def lifecycle(self) -> Lifecycle:
        if self.instance is not None:
            return Lifecycle.SINGLETON
        return Lifecycle.FACTORY

    def create(self) -> Any:
        """Return the singleton, or the result of a fresh factory call.

        Exceptions raised by the factory propagate unchanged.

        Raises:
            SDIWireSingletonConstructorError: If the spec carries neither an
                instance nor a factory.

        """
        if self.instance is not None:
            return self.instance

        if self.factory is None:
            msg = f"Binding '{self.name}' has neither a singleton nor a constructor."
            raise SDIWireSingletonConstructorError(msg)

        return self.factory()


class _FactoryValidator:
    def __init__(self, name: str, factory: Any) -> None:
        self._name = name
        self._factory = factory

    def validate(self) -> type[Any]:
        if not callable(self._factory):
            self._fail("is not callable")

        if inspect.iscoroutinefunction(self._factory):
            self._fail("must be synchronous")

        if inspect.isclass(self._factory) and not _SHAPES.is_concrete_class(self._factory):
            self._fail("must be a concrete class")

        try:
            parameters = inspect.signature(self._factory).parameters.values()
        except (TypeError, ValueError) as error:
            self._fail("has no inspectable signature", error)

        required = [
            parameter.name
            for parameter in parameters
            if parameter.default is Parameter.empty
            and parameter.kind not in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)
        ]
        if required:
            self._fail(f"must take no arguments, but requires {required}")

        if inspect.isclass(self._factory):
            return self._factory

        return_type = _SHAPES.strip_annotated(self._resolved_return_annotation())
        if return_type is _MISSING_ANNOTATION:
            self._fail("must declare a return annotation")
        if not _SHAPES.is_concrete_class(return_type):
            self._fail(f"must be annotated to return a concrete class, got {return_type!r}")
        return return_type

    def _resolved_return_annotation(self) -> Any:
        try:
            return get_type_hints(self._factory, include_extras=True).get(
                "return",
                _MISSING_ANNOTATION,
            )
        except (AttributeError, NameError, TypeError) as error:
            self._fail("has an unresolvable return annotation", error)

    def _fail(self, reason: str, error: Exception | None = None) -> NoReturn:
        factory_name = getattr(self._factory, "__qualname__", repr(self._factory))
        msg = f"Constructor '{factory_name}' for binding '{self._name}' {reason}."
        if error is None:
            raise SDIWireFactoryTypeError(msg)
        full_msg = f"{msg} Original error: {error}"
        raise SDIWireFactoryTypeError(full_msg) from error


class ProviderRegistry:
    """Store provider specs by binding name.

    Names are unique and bindings are never replaced or removed. Iteration
    follows registration order.
    """

    def __init__(self) -> None:
        self._specs_by_name: dict[str, ProviderSpec] = {}

    def add(self, spec: ProviderSpec) -> None:
        """Add a provider spec.

        Args:
            spec: Validated provider spec.

        Raises:
            SDIWireNameConflictError: If ``spec.name`` is already registered.

        """
        if spec.name in self._specs_by_name:
            raise SDIWireNameConflictError(spec.name)
        self._specs_by_name[spec.name] = spec

    def get(self, name: str) -> ProviderSpec:
        """Return the spec bound under ``name``.

        Raises:
            SDIWireNotFoundError: If nothing is bound under ``name``.

        """
        spec = self._specs_by_name.get(name)
        if spec is None:
            raise SDIWireNotFoundError(name)
        return spec

    def find(self, name: str) -> ProviderSpec | None:
        """Return the spec bound under ``name``, if any."""
        return self._specs_by_name.get(name)

    def names(self) -> list[str]:
        return list(self._specs_by_name)

    def values(self) -> list[ProviderSpec]:
        return list(self._specs_by_name.values())

    def __contains__(self, name: object) -> bool:
        return name in self._specs_by_name

    def __iter__(self) -> Iterator[ProviderSpec]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self._specs_by_name)


__all__ = [
    "Factory",
    "Lifecycle",
    "Option",
    "ProviderOptions",
    "ProviderRegistry",
    "ProviderSpec",
    "constructor",
    "singleton",
]
