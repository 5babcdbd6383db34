"""Small demo of paramguard contracts on a class and a module function.

Run ``paramguard describe kennel --path examples`` to list the contracts.
"""
from __future__ import annotations

from enum import Enum

from paramguard import not_empty, null_to_undefined, optional, validate


class Breed(Enum):
    GERMAN_SHEPHERD = 0
    SIBERIAN_HUSKY = 1


class Animal:
    def talk(self) -> str:
        raise NotImplementedError


class Dog(Animal):
    def __init__(self, breed: Breed) -> None:
        self.breed = breed

    def talk(self) -> str:
        return "ouaf"


class Greeter:
    def __init__(self) -> None:
        self._salutation = "hello"

    @property
    @validate
    def salutation(self) -> str:
        return self._salutation

    @salutation.setter
    @validate
    @not_empty("value")
    def salutation(self, value: str) -> None:
        self._salutation = value

    @validate
    @optional("animal")
    @null_to_undefined("animal")
    def greet(self, name: str, animal: Animal | None = None) -> str:
        if animal is None:
            return f"{self._salutation} {name}"
        return f"{self._salutation} {name}, {animal.talk()}"


@validate
@not_empty("names")
def roll_call(names: list[str]) -> str:
    return ", ".join(names)
