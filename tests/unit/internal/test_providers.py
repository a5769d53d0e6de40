from typing import Annotated

import pytest

from sdiwire._internal.providers import (
    Lifecycle,
    ProviderOptions,
    ProviderRegistry,
    ProviderSpec,
    constructor,
    singleton,
)
from sdiwire._internal.shapes import ShapeInspector
from sdiwire.exceptions import (
    SDIWireFactoryTypeError,
    SDIWireNameConflictError,
    SDIWireNotFoundError,
    SDIWireSingletonConstructorError,
    SDIWireSingletonTypeError,
)
from tests.support import A, B, Hello, SubA


def make_a() -> A:
    return A(7)


def make_annotated_a() -> Annotated[A, "primary"]:
    return A(8)


def make_with_default(v: int = 3) -> A:
    return A(v)


def make_unannotated():  # noqa: ANN201
    return A(1)


def make_int() -> int:
    return 1


def make_protocol() -> Hello:
    return A(1)


def make_with_argument(v: int) -> A:
    return A(v)


async def make_async() -> A:
    return A(1)


def spec_from(*options: object) -> ProviderSpec:
    provider_options = ProviderOptions()
    for option in options:
        option(provider_options)  # type: ignore[operator]
    return ProviderSpec.from_options("subject", provider_options)


def test_options_record_singleton_and_factory() -> None:
    instance = A(1)
    provider_options = ProviderOptions()

    singleton(instance)(provider_options)
    constructor(make_a)(provider_options)

    assert provider_options.instance is instance
    assert provider_options.factory is make_a


def test_singleton_spec_uses_instance_class() -> None:
    instance = A(1)

    spec = spec_from(singleton(instance))

    assert spec.name == "subject"
    assert spec.concrete_type is A
    assert spec.lifecycle is Lifecycle.SINGLETON


def test_singleton_create_returns_the_bound_instance() -> None:
    instance = A(1)
    spec = spec_from(singleton(instance))

    assert spec.create() is instance
    assert spec.create() is instance


def test_factory_spec_uses_return_annotation() -> None:
    spec = spec_from(constructor(make_a))

    assert spec.concrete_type is A
    assert spec.lifecycle is Lifecycle.FACTORY


def test_factory_return_annotation_metadata_is_stripped() -> None:
    assert spec_from(constructor(make_annotated_a)).concrete_type is A


def test_factory_parameters_with_defaults_are_allowed() -> None:
    assert spec_from(constructor(make_with_default)).create() == A(3)


def test_concrete_class_is_its_own_factory() -> None:
    spec = spec_from(constructor(B))

    assert spec.concrete_type is B
    assert isinstance(spec.create(), B)


def test_factory_is_called_on_every_create() -> None:
    calls: list[A] = []

    def factory() -> A:
        created = A(len(calls))
        calls.append(created)
        return created

    spec = spec_from(constructor(factory))

    first = spec.create()
    second = spec.create()

    assert calls == [first, second]
    assert first is not second


def test_factory_wins_over_singleton() -> None:
    spec = spec_from(singleton(B()), constructor(make_a))

    assert spec.concrete_type is A
    assert spec.instance is None
    assert spec.create() == A(7)


def test_factory_errors_propagate_unchanged() -> None:
    def failing() -> A:
        msg = "database unavailable"
        raise RuntimeError(msg)

    spec = spec_from(constructor(failing))

    with pytest.raises(RuntimeError, match="database unavailable"):
        spec.create()


def test_missing_lifecycle_is_rejected() -> None:
    with pytest.raises(SDIWireSingletonConstructorError, match="exactly one of"):
        spec_from()


def test_none_singleton_counts_as_missing() -> None:
    with pytest.raises(SDIWireSingletonConstructorError):
        spec_from(singleton(None))


@pytest.mark.parametrize("value", [42, "text", [A(1)], A, len, pytest])
def test_singleton_must_be_an_object_of_a_concrete_class(value: object) -> None:
    with pytest.raises(SDIWireSingletonTypeError, match="concrete class"):
        spec_from(singleton(value))


@pytest.mark.parametrize(
    ("factory", "reason"),
    [
        (42, "is not callable"),
        (make_with_argument, "must take no arguments"),
        (make_unannotated, "must declare a return annotation"),
        (make_int, "must be annotated to return a concrete class"),
        (make_protocol, "must be annotated to return a concrete class"),
        (make_async, "must be synchronous"),
        (lambda: A(1), "must declare a return annotation"),
        (Hello, "must be a concrete class"),
        (int, "must be a concrete class"),
    ],
)
def test_factory_contract_is_enforced(factory: object, reason: str) -> None:
    with pytest.raises(SDIWireFactoryTypeError, match=reason):
        spec_from(constructor(factory))  # type: ignore[arg-type]


def test_factory_with_unresolvable_annotation_is_rejected() -> None:
    def factory() -> A:
        return A(1)

    factory.__annotations__["return"] = "MissingType"

    with pytest.raises(SDIWireFactoryTypeError, match="Original error"):
        spec_from(constructor(factory))


def test_hand_built_spec_without_lifecycle_fails_on_create() -> None:
    spec = ProviderSpec(name="broken", concrete_type=A)

    with pytest.raises(SDIWireSingletonConstructorError, match="broken"):
        spec.create()


def test_spec_matching_uses_class_identity_for_concrete_targets() -> None:
    shapes = ShapeInspector()
    spec = spec_from(singleton(SubA(1)))

    assert shapes.matches(spec, SubA)
    assert not shapes.matches(spec, A)
    assert shapes.matches(spec, Hello)
    assert not shapes.matches(spec, int)


class TestProviderRegistry:
    def test_add_and_get(self) -> None:
        registry = ProviderRegistry()
        spec = ProviderSpec(name="a", concrete_type=A, instance=A(1))

        registry.add(spec)

        assert registry.get("a") is spec
        assert registry.find("a") is spec
        assert "a" in registry
        assert len(registry) == 1

    def test_duplicate_name_keeps_first_spec(self) -> None:
        registry = ProviderRegistry()
        first = ProviderSpec(name="a", concrete_type=A, instance=A(1))
        second = ProviderSpec(name="a", concrete_type=B, instance=B())
        registry.add(first)

        with pytest.raises(SDIWireNameConflictError) as exc_info:
            registry.add(second)

        assert exc_info.value.name == "a"
        assert registry.get("a") is first

    def test_missing_name(self) -> None:
        registry = ProviderRegistry()

        assert registry.find("missing") is None
        with pytest.raises(SDIWireNotFoundError) as exc_info:
            registry.get("missing")
        assert exc_info.value.name == "missing"

    def test_iteration_follows_registration_order(self) -> None:
        registry = ProviderRegistry()
        for name in ("c", "a", "b"):
            registry.add(ProviderSpec(name=name, concrete_type=A, instance=A(1)))

        assert registry.names() == ["c", "a", "b"]
        assert [spec.name for spec in registry] == ["c", "a", "b"]
        assert [spec.name for spec in registry.values()] == ["c", "a", "b"]
