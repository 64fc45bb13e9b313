"""Outcome values returned by the resource handlers."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


Result = Union[Ok, Failure]


def invalid(message: str) -> Failure:
    return Failure(ErrorKind.VALIDATION, message)


def not_found(message: str) -> Failure:
    return Failure(ErrorKind.NOT_FOUND, message)


def internal(message: str) -> Failure:
    return Failure(ErrorKind.INTERNAL, message)
