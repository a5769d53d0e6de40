"""Types shared by the sdiwire test suite."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol


class Hello(Protocol):
    def say_hello(self) -> str: ...


class Named(Protocol):
    name: str


class Greeter(ABC):
    @abstractmethod
    def greet(self) -> str: ...


@dataclass
class A:
    v: int = 0

    def say_hello(self) -> str:
        return f"hello {self.v}"


class SubA(A):
    pass


@dataclass
class B:
    label: str = ""


@dataclass
class User:
    name: str


class EnglishGreeter(Greeter):
    def greet(self) -> str:
        return "hello"


class DuckGreeter:
    def greet(self) -> str:
        return "quack"


class Property:
    def __init__(self, name: str, value: str) -> None:
        self._name = name
        self._value = value

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> str:
        return self._value


@dataclass(slots=True)
class Point:
    x: int
    y: int


class Service(ABC):  # noqa: B024
    def run(self) -> str:
        return "running"


class SubService(Service):
    pass


class PlainUser:
    def __init__(self, name: str) -> None:
        self.name = name
