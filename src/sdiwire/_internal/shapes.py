from __future__ import annotations

import inspect
import types
from collections.abc import Callable, MutableSequence, Sequence
from enum import Enum, auto
from typing import TYPE_CHECKING, Annotated, Any, TypeGuard, Union, get_args, get_origin

from typing_extensions import get_protocol_members, is_protocol

if TYPE_CHECKING:
    from sdiwire._internal.providers import ProviderSpec

_TUPLE_VARIADIC_ARG_COUNT = 2
_LIST_ORIGINS: tuple[Any, ...] = (list, Sequence, MutableSequence)
# Typing constructs and builtin values are never bindable objects.
_NON_USER_MODULES = frozenset({"builtins", "types", "typing", "typing_extensions"})


class Shape(Enum):
    """Classify a requested type for binding and resolution rules."""

    INTERFACE = auto()
    """A ``typing.Protocol`` or an abstract class, matched by implementation."""

    CONCRETE = auto()
    """A concrete user class, matched by class identity."""

    INVALID = auto()
    """Anything else: builtins, generic aliases, non-types."""


class ShapeInspector:
    """Decide which compatibility rule applies to a type and evaluate it.

    Interfaces are protocols and abstract classes. A provider satisfies an
    abstract class through ``issubclass`` and a protocol either nominally or
    structurally, when every protocol member is present on the provider's
    class. Concrete targets match only the exact provider class.

    Structural matching inspects the provider class, not its instances: a
    protocol data member counts as present only when the class defines or
    annotates it. Attributes assigned solely in ``__init__`` are invisible.
    An ABC subclass without abstract methods is a concrete class.
    """

    def classify(self, candidate: Any) -> Shape:
        """Return the shape of ``candidate``.

        Args:
            candidate: Type to classify. Non-types classify as ``INVALID``.

        """
        if self.is_interface(candidate):
            return Shape.INTERFACE
        if self.is_concrete_class(candidate):
            return Shape.CONCRETE
        return Shape.INVALID

    def is_interface(self, candidate: Any) -> bool:
        """Return whether ``candidate`` is a protocol or an abstract class."""
        if not is_runtime_class(candidate):
            return False
        if is_protocol(candidate):
            return True
        return inspect.isabstract(candidate)

    def is_concrete_class(self, candidate: Any) -> bool:
        """Return whether ``candidate`` is a user class that can be instantiated."""
        if not is_runtime_class(candidate):
            return False
        if candidate.__module__ in _NON_USER_MODULES:
            return False
        return not self.is_interface(candidate)

    def is_concrete_instance(self, candidate: Any) -> bool:
        """Return whether ``candidate`` is an object of a concrete class.

        Classes, functions, modules, builtin values and typing constructs are
        rejected.
        """
        if isinstance(candidate, type):
            return False
        return self.is_concrete_class(type(candidate))

    def implements(self, concrete_type: type[Any], interface: type[Any]) -> bool:
        """Return whether ``concrete_type`` satisfies ``interface``.

        Args:
            concrete_type: Class produced by a provider.
            interface: Protocol or abstract class being requested.

        """
        if is_protocol(interface):
            if interface in concrete_type.__mro__:
                return True
            members = _class_members(concrete_type)
            return all(member in members for member in get_protocol_members(interface))
        try:
            return issubclass(concrete_type, interface)
        except TypeError:
            return False

    def matches(self, spec: ProviderSpec, target: Any) -> bool:
        """Return whether the provider described by ``spec`` fits ``target``."""
        shape = self.classify(target)
        if shape is Shape.INTERFACE:
            return self.implements(spec.concrete_type, target)
        if shape is Shape.CONCRETE:
            return spec.concrete_type is target
        return False

    def sequence_element(self, candidate: Any) -> tuple[Any, Callable[[list[Any]], Any]] | None:
        """Unpack a sequence alias into its element type and a builder.

        ``list[T]``, ``typing.List[T]``, ``Sequence[T]`` and
        ``MutableSequence[T]`` build lists; ``tuple[T, ...]`` builds tuples.

        Returns:
            ``(element_type, builder)`` or ``None`` when ``candidate`` is not a
            supported sequence alias.

        """
        origin = get_origin(candidate)
        args = get_args(candidate)
        if origin in _LIST_ORIGINS and len(args) == 1:
            return args[0], list
        if origin is tuple and len(args) == _TUPLE_VARIADIC_ARG_COUNT and args[1] is Ellipsis:
            return args[0], tuple
        return None

    def unwrap_optional(self, annotation: Any) -> Any:
        """Return ``T`` for ``T | None`` and ``Optional[T]``, else ``annotation``."""
        if get_origin(annotation) not in (Union, types.UnionType):
            return annotation
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
        return annotation

    def strip_annotated(self, annotation: Any) -> Any:
        """Return the base type of ``Annotated[T, ...]``, else ``annotation``."""
        if get_origin(annotation) is Annotated:
            return get_args(annotation)[0]
        return annotation


def _class_members(concrete_type: type[Any]) -> set[str]:
    members = set(dir(concrete_type))
    for klass in concrete_type.__mro__:
        members.update(inspect.get_annotations(klass))
    return members


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations."""
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


__all__ = ["Shape", "ShapeInspector"]
