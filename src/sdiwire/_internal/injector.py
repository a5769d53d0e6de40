from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar, overload

from sdiwire._internal.markers import InjectionTarget
from sdiwire._internal.providers import (
    Factory,
    Option,
    ProviderOptions,
    ProviderRegistry,
    ProviderSpec,
    constructor,
)
from sdiwire._internal.shapes import Shape, ShapeInspector
from sdiwire.exceptions import (
    SDIWireBindTypeError,
    SDIWireError,
    SDIWireNameConflictError,
    SDIWireNotFoundError,
    SDIWireObjectPtrError,
    SDIWireSliceTypeError,
)
from sdiwire.injector_interface import IInjector

logger = logging.getLogger(__name__)
# Reachable from Injector.__init__, whose parameter shadows the module name.
_module_logger = logger

T = TypeVar("T")
F = TypeVar("F", bound=Factory)


class Injector(IInjector):
    """Bind named providers and resolve them by name, by type, or into fields.

    Bindings are made once, during startup, with ``bind``. Afterwards objects
    are resolved with ``create`` (one binding into a requested type),
    ``create_all`` (every compatible binding into a sequence) and ``inject``
    (bindings named by ``inject`` tags into the attributes of an object).

    Requested types are either interfaces (protocols and abstract classes),
    satisfied by every provider implementing them, or concrete classes,
    satisfied only by providers of exactly that class.

    Binding is not thread-safe. Resolution only reads the registry and can run
    concurrently once binding is complete. Singletons are returned as bound;
    factories run on every resolution.
    """

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        """Initialize an empty injector.

        Args:
            logger: Logger receiving ``DEBUG`` trace lines for bind and resolve
                decisions. Defaults to the module logger,
                ``sdiwire._internal.injector``.

        """
        self._logger = logger or _module_logger
        self._registry = ProviderRegistry()
        self._shapes = ShapeInspector()

    # region Registration
    def bind(self, name: str, *options: Option) -> None:
        """Bind a provider under ``name``.

        The registry is left untouched when any check fails.

        Args:
            name: Unique binding name.
            *options: Configuration steps such as ``singleton(obj)`` or
                ``constructor(factory)``.

        Raises:
            SDIWireNameConflictError: If ``name`` is already bound.
            SDIWireSingletonConstructorError: If no lifecycle is configured.
            SDIWireSingletonTypeError: If the singleton is not an object of a
                concrete class.
            SDIWireFactoryTypeError: If the constructor breaks the factory
                contract.

        Examples:
            .. code-block:: python

                injector.bind("greeter", singleton(EnglishGreeter()))
                injector.bind("clock", constructor(make_clock))

        """
        if name in self._registry:
            self._logger.debug("bind %r rejected: name already registered", name)
            raise SDIWireNameConflictError(name)

        provider_options = ProviderOptions()
        for option in options:
            option(provider_options)

        try:
            spec = ProviderSpec.from_options(name, provider_options)
        except SDIWireError as error:
            self._logger.debug("bind %r rejected: %s", name, error)
            raise

        self._registry.add(spec)
        self._logger.debug(
            "bind %r as %s of %s",
            name,
            spec.lifecycle.name.lower(),
            spec.concrete_type.__qualname__,
        )

    def provides(self, name: str) -> Callable[[F], F]:
        """Bind the decorated factory under ``name``.

        Equivalent to ``bind(name, constructor(func))``; the function is
        returned unchanged.

        Examples:
            .. code-block:: python

                @injector.provides("clock")
                def make_clock() -> SystemClock:
                    return SystemClock()

        """

        def decorator(func: F) -> F:
            self.bind(name, constructor(func))
            return func

        return decorator

    # endregion Registration

    # region Resolution
    @overload
    def create(self, name: str, target: type[T]) -> T: ...

    @overload
    def create(self, name: str, target: T) -> T: ...

    def create(self, name: str, target: Any) -> Any:
        """Resolve the binding ``name`` as ``target``.

        ``target`` is an interface, a concrete class, or an existing object of
        a concrete class. For an object, the provider's class must be exactly
        ``type(target)`` and the created object's attributes are copied into
        it.

        Args:
            name: Binding name.
            target: Requested type or destination object.

        Returns:
            The created object (the bound instance itself for singletons), or
            ``target`` after copying when an object was given.

        Raises:
            SDIWireObjectPtrError: If ``target`` has an unsupported shape.
            SDIWireNotFoundError: If nothing is bound under ``name``.
            SDIWireBindTypeError: If the provider does not fit ``target``.

        """
        is_destination = self._shapes.is_concrete_instance(target)
        if not is_destination and not isinstance(target, type):
            msg = f"create() expects a class or an object of a concrete class, got {target!r}."
            raise SDIWireObjectPtrError(msg)

        spec = self._registry.find(name)
        if spec is None:
            self._logger.debug("create %r: not found", name)
            raise SDIWireNotFoundError(name)

        if is_destination:
            self._check_compatible(spec, type(target))
            self._copy_attributes(spec.create(), target)
            self._logger.debug("create %r: copied into %s", name, type(target).__qualname__)
            return target

        if self._shapes.classify(target) is Shape.INVALID:
            msg = (
                f"create() expects a protocol, an abstract class or a concrete class, "
                f"got {target!r}."
            )
            raise SDIWireObjectPtrError(msg)

        self._check_compatible(spec, target)
        created = spec.create()
        self._logger.debug("create %r: resolved %s", name, target.__qualname__)
        return created

    def create_all(self, target: Any, into: list[Any] | None = None) -> Any:
        """Create every binding compatible with the element type of ``target``.

        Providers are visited in registration order. A creation failure aborts
        the call before anything is assigned.

        Args:
            target: Sequence alias such as ``list[Greeter]``,
                ``Sequence[Greeter]`` or ``tuple[Greeter, ...]``.
            into: Optional list whose contents are replaced by the created
                objects. It is left untouched when nothing matches.

        Returns:
            ``into`` when given, otherwise a new list (a tuple for
            ``tuple[T, ...]``) of created objects, empty when nothing matches.

        Raises:
            SDIWireSliceTypeError: If ``target`` is not a supported sequence
                alias, its element is not an interface or a concrete class, or
                ``into`` is not a list.

        """
        unpacked = self._shapes.sequence_element(target)
        if unpacked is None:
            msg = f"create_all() expects a sequence alias such as list[T], got {target!r}."
            raise SDIWireSliceTypeError(msg)
        element_type, build = unpacked

        if self._shapes.classify(element_type) is Shape.INVALID:
            msg = (
                "create_all() expects a protocol, an abstract class or a concrete class "
                f"as element type, got {element_type!r}."
            )
            raise SDIWireSliceTypeError(msg)

        if into is not None and not isinstance(into, list):
            msg = f"create_all() parameter 'into' must be a list, got {type(into).__qualname__}."
            raise SDIWireSliceTypeError(msg)

        created = []
        for spec in self._registry:
            if not self._shapes.matches(spec, element_type):
                self._logger.debug(
                    "create_all %s: skip %r of %s",
                    element_type.__qualname__,
                    spec.name,
                    spec.concrete_type.__qualname__,
                )
                continue
            self._logger.debug("create_all %s: match %r", element_type.__qualname__, spec.name)
            created.append(spec.create())

        if into is None:
            return build(created)
        if created:
            into[:] = created
        return into

    def inject(self, obj: T) -> T:
        """Assign bindings named by ``inject`` tags to the attributes of ``obj``.

        Attributes are tagged through ``typing.Annotated`` metadata, either
        ``Inject("name")`` or a struct tag string ``'inject:"name"'``. They are
        processed in declaration order. Every tagged attribute is validated
        before the first one is resolved; a resolution failure leaves earlier
        attributes assigned.

        Raises:
            SDIWireInjectObjectError: If ``obj`` is not an object of a concrete
                class.
            SDIWireInjectFieldError: If a tagged attribute is private or has an
                unsupported type.
            SDIWireNotFoundError: If a tag names an unbound provider.
            SDIWireBindTypeError: If a provider does not fit its attribute.

        """
        target = InjectionTarget.from_object(obj)
        for field in target.fields:
            self._logger.debug(
                "inject %s.%s from %r",
                type(obj).__qualname__,
                field.attribute,
                field.name,
            )
            spec = self._registry.find(field.name)
            if spec is None:
                msg = f"Can't find service '{field.name}' for field '{field.attribute}'."
                raise SDIWireNotFoundError(field.name, msg)

            self._check_compatible(spec, field.field_type)
            setattr(obj, field.attribute, self.create(field.name, field.field_type))

        return obj

    # endregion Resolution

    def names(self) -> list[str]:
        """Return bound names in registration order."""
        return self._registry.names()

    def __contains__(self, name: object) -> bool:
        return name in self._registry

    def _check_compatible(self, spec: ProviderSpec, target: type[Any]) -> None:
        if self._shapes.matches(spec, target):
            return
        self._logger.debug(
            "binding %r of %s does not fit %s",
            spec.name,
            spec.concrete_type.__qualname__,
            target.__qualname__,
        )
        msg = (
            f"Service '{spec.name}' can't cast {spec.concrete_type.__qualname__} "
            f"to {target.__qualname__}."
        )
        raise SDIWireBindTypeError(msg)

    def _copy_attributes(self, source: Any, destination: Any) -> None:
        if hasattr(source, "__dict__"):
            vars(destination).update(vars(source))
        for klass in type(source).__mro__:
            slots = vars(klass).get("__slots__", ())
            for slot in (slots,) if isinstance(slots, str) else slots:
                if slot in ("__dict__", "__weakref__"):
                    continue
                if slot.startswith("__") and not slot.endswith("__"):
                    slot = f"_{klass.__name__.lstrip('_')}{slot}"  # noqa: PLW2901
                if not hasattr(source, slot):
                    continue
                object.__setattr__(destination, slot, getattr(source, slot))


__all__ = ["Injector"]
