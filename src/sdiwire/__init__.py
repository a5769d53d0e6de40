from sdiwire._internal.injector import Injector
from sdiwire._internal.markers import Inject, StructTag
from sdiwire._internal.providers import Lifecycle, ProviderSpec, constructor, singleton
from sdiwire.exceptions import (
    SDIWireBindTypeError,
    SDIWireError,
    SDIWireFactoryTypeError,
    SDIWireInjectFieldError,
    SDIWireInjectObjectError,
    SDIWireInvalidRegistrationError,
    SDIWireInvalidTargetError,
    SDIWireNameConflictError,
    SDIWireNotFoundError,
    SDIWireObjectPtrError,
    SDIWireSingletonConstructorError,
    SDIWireSingletonTypeError,
    SDIWireSliceTypeError,
)
from sdiwire.injector_interface import IInjector

__all__ = [
    "IInjector",
    "Inject",
    "Injector",
    "Lifecycle",
    "ProviderSpec",
    "SDIWireBindTypeError",
    "SDIWireError",
    "SDIWireFactoryTypeError",
    "SDIWireInjectFieldError",
    "SDIWireInjectObjectError",
    "SDIWireInvalidRegistrationError",
    "SDIWireInvalidTargetError",
    "SDIWireNameConflictError",
    "SDIWireNotFoundError",
    "SDIWireObjectPtrError",
    "SDIWireSingletonConstructorError",
    "SDIWireSingletonTypeError",
    "SDIWireSliceTypeError",
    "StructTag",
    "constructor",
    "singleton",
]
