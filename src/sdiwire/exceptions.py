class SDIWireError(Exception):
    """Represent a base class for all sdiwire-specific failures.

    Catch this type when you want to handle any sdiwire error path without
    matching each concrete exception class individually.
    """


class SDIWireInvalidRegistrationError(SDIWireError):
    """Signal an invalid ``Injector.bind`` call.

    Every bind-time validation failure derives from this class. A failed bind
    never leaves a partial entry in the registry.
    """


class SDIWireNameConflictError(SDIWireInvalidRegistrationError):
    """Signal that a binding name is already taken.

    Raised by ``Injector.bind`` when the name was bound before. The first
    binding stays in place; names cannot be rebound or removed.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Binding name '{name}' is already registered.")


class SDIWireSingletonConstructorError(SDIWireInvalidRegistrationError):
    """Signal that a binding has neither a singleton nor a constructor.

    Typical fix is passing exactly one of ``singleton(...)`` or
    ``constructor(...)`` to ``Injector.bind``.
    """


class SDIWireFactoryTypeError(SDIWireInvalidRegistrationError):
    """Signal a constructor that does not match the factory contract.

    A factory must be callable without arguments and declare a return
    annotation naming a concrete class. Failures are raised, not returned.
    """


class SDIWireSingletonTypeError(SDIWireInvalidRegistrationError):
    """Signal a singleton value that is not an instance of a concrete class.

    Builtin values (numbers, strings, containers), classes, functions and
    modules cannot be bound as singletons.
    """


class SDIWireInvalidTargetError(SDIWireError):
    """Signal that a resolution target has an unsupported shape.

    Every target validation failure of ``create``, ``create_all`` and
    ``inject`` derives from this class.
    """


class SDIWireInjectObjectError(SDIWireInvalidTargetError):
    """Signal that ``Injector.inject`` received something other than an object.

    The target must be an instance of a concrete class, not a class, a
    builtin value or ``None``.
    """


class SDIWireInjectFieldError(SDIWireInvalidTargetError):
    """Signal an ``inject``-tagged field that cannot receive a dependency.

    Tagged fields must be public (no leading underscore) and annotated with a
    protocol, an abstract class, or a concrete class (optionally wrapped in
    ``Optional``).
    """

    def __init__(self, field_name: str, message: str) -> None:
        self.field_name = field_name
        super().__init__(message)


class SDIWireSliceTypeError(SDIWireInvalidTargetError):
    """Signal an unsupported ``Injector.create_all`` target.

    ``create_all`` expects a sequence alias such as ``list[Service]`` whose
    element is a protocol, an abstract class, or a concrete class.
    """


class SDIWireObjectPtrError(SDIWireInvalidTargetError):
    """Signal an unsupported ``Injector.create`` target.

    ``create`` expects a protocol, an abstract class, a concrete class, or an
    existing instance of a concrete class to copy field values into.
    """


class SDIWireBindTypeError(SDIWireError):
    """Signal that a bound provider does not fit the requested type.

    Raised by ``create``, ``create_all`` and ``inject`` when the provider's
    class does not implement the requested interface, or is not exactly the
    requested concrete class.
    """


class SDIWireNotFoundError(SDIWireError):
    """Signal that no provider is bound under the requested name."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"Binding '{name}' is not registered.")
