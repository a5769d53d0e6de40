from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, NamedTuple, get_args, get_origin, get_type_hints

from sdiwire._internal.shapes import Shape, ShapeInspector
from sdiwire.exceptions import SDIWireInjectFieldError, SDIWireInjectObjectError

INJECT_TAG_KEY = "inject"
_SHAPES = ShapeInspector()


class Inject(NamedTuple):
    """Mark a class attribute for field injection by binding name.

    Attach ``Inject`` metadata with ``typing.Annotated``. ``Injector.inject``
    resolves the binding named ``name`` and assigns it to the attribute.

    Examples:
        .. code-block:: python

            @dataclass
            class Handler:
                greeter: Annotated[Greeter | None, Inject("greeter")] = None

    """

    name: str


class StructTag(str):
    """A struct tag string in the ``key:"value" key2:"value2"`` convention.

    Plain strings in ``Annotated`` metadata are read as struct tags, so
    ``Annotated[Greeter, 'inject:"greeter"']`` is equivalent to
    ``Annotated[Greeter, Inject("greeter")]``. Values are double quoted and
    may contain backslash escapes.
    """

    __slots__ = ()

    def lookup(self, key: str) -> tuple[str, bool]:
        """Return the value associated with ``key`` and whether it was present.

        Parsing stops at the first malformed pair; keys after it are not found.
        """
        tag = str(self)
        while tag:
            tag = tag.lstrip(" ")
            if not tag:
                break

            i = 0
            while i < len(tag) and tag[i] > " " and tag[i] not in ':"\x7f':
                i += 1
            if i == 0 or i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
                break
            name = tag[:i]
            tag = tag[i + 1 :]

            i = 1
            while i < len(tag) and tag[i] != '"':
                if tag[i] == "\\":
                    i += 1
                i += 1
            if i >= len(tag):
                break
            quoted_value = tag[: i + 1]
            tag = tag[i + 1 :]

            if name == key:
                try:
                    value = ast.literal_eval(quoted_value)
                except (SyntaxError, ValueError):
                    break
                return value, True
        return "", False

    def get(self, key: str) -> str:
        """Return the value associated with ``key``, or ``""``."""
        value, _ = self.lookup(key)
        return value


def injection_name(annotation: Any) -> str | None:
    """Return the binding name declared by ``annotation`` metadata.

    ``None`` means the annotation carries neither an ``Inject`` marker nor an
    ``inject`` struct tag.
    """
    annotation = _SHAPES.unwrap_optional(annotation)
    if get_origin(annotation) is not Annotated:
        return None
    for item in get_args(annotation)[1:]:
        if isinstance(item, Inject):
            return item.name
        if isinstance(item, str):
            value, found = StructTag(item).lookup(INJECT_TAG_KEY)
            if found:
                return value
    return None


@dataclass(frozen=True)
class InjectionField:
    """One tagged attribute of an injection target."""

    name: str
    """Binding name declared by the tag."""
    attribute: str
    """Attribute receiving the resolved object."""
    field_type: type[Any]
    """Interface or concrete class the attribute is declared with."""


class InjectionTarget:
    """Tagged attributes of an object, validated before any resolution.

    Fields are listed in declaration order, base class attributes first.
    """

    def __init__(self, obj: Any, fields: list[InjectionField]) -> None:
        self.obj = obj
        self.fields = fields

    @classmethod
    def from_object(cls, obj: Any) -> InjectionTarget:
        """Extract tagged attributes from ``obj``.

        Raises:
            SDIWireInjectObjectError: If ``obj`` is not an object of a concrete
                class, or its annotations cannot be resolved.
            SDIWireInjectFieldError: If a tagged attribute is private or is
                not annotated with an interface or a concrete class.

        """
        if not _SHAPES.is_concrete_instance(obj):
            msg = f"inject() expects an object of a concrete class, got {obj!r}."
            raise SDIWireInjectObjectError(msg)

        target_type = type(obj)
        try:
            hints = get_type_hints(target_type, include_extras=True)
        except (AttributeError, NameError, TypeError) as error:
            msg = (
                f"inject() could not resolve annotations of '{target_type.__qualname__}': "
                f"{error}"
            )
            raise SDIWireInjectObjectError(msg) from error

        fields = []
        for attribute, annotation in hints.items():
            if get_origin(annotation) is ClassVar:
                continue
            name = injection_name(annotation)
            if name is None:
                continue

            if attribute.startswith("_"):
                msg = (
                    f"Injected field '{target_type.__qualname__}.{attribute}' must be public."
                )
                raise SDIWireInjectFieldError(attribute, msg)

            field_type = _field_type(annotation)
            if _SHAPES.classify(field_type) is Shape.INVALID:
                msg = (
                    f"Injected field '{target_type.__qualname__}.{attribute}' must be "
                    f"annotated with a protocol, an abstract class or a concrete class, "
                    f"got {field_type!r}."
                )
                raise SDIWireInjectFieldError(attribute, msg)

            fields.append(InjectionField(name=name, attribute=attribute, field_type=field_type))

        return cls(obj, fields)


def _field_type(annotation: Any) -> Any:
    annotation = _SHAPES.strip_annotated(_SHAPES.unwrap_optional(annotation))
    return _SHAPES.unwrap_optional(annotation)


__all__ = [
    "INJECT_TAG_KEY",
    "Inject",
    "InjectionField",
    "InjectionTarget",
    "StructTag",
    "injection_name",
]
