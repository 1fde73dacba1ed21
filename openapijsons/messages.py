"""
Diagnostics emitted while converting OpenAPI schemas.

Warnings flow through a message listener (any callable taking a `Message`);
fatal problems are raised as `StructuralError`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from jsonpointer import JsonPointer


class JsonPath:
    """
    Immutable location of a node inside the OpenAPI document.

    `push` never modifies the path it is called on, it returns a longer one.
    """

    __slots__ = ('_segments',)

    def __init__(self, *segments: str):
        self._segments: Tuple[str, ...] = tuple(str(s) for s in segments)

    @property
    def segments(self) -> Tuple[str, ...]:
        return self._segments

    def push(self, segment) -> 'JsonPath':
        """Return a new path with `segment` appended."""
        return JsonPath(*self._segments, str(segment))

    @property
    def pointer(self) -> JsonPointer:
        return JsonPointer.from_parts(list(self._segments))

    def __eq__(self, other):
        if not isinstance(other, JsonPath):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self):
        return hash(self._segments)

    def __str__(self):
        return '#' + (self.pointer.path or '/')

    def __repr__(self):
        return f"JsonPath({str(self)!r})"


class Severity(Enum):
    WARNING = 'WARNING'
    ERROR = 'ERROR'


@dataclass(frozen=True)
class Message:
    """A single diagnostic, optionally tied to a schema location."""
    severity: Severity
    path: Optional[JsonPath]
    message: str

    @classmethod
    def warning(cls, message: str, path: Optional[JsonPath] = None) -> 'Message':
        return cls(Severity.WARNING, path, message)

    @classmethod
    def error(cls, message: str, path: Optional[JsonPath] = None) -> 'Message':
        return cls(Severity.ERROR, path, message)

    def __str__(self):
        if self.path is None:
            return f"{self.severity.value}: {self.message}"
        return f"{self.severity.value}: {self.path}: {self.message}"


MessageListener = Callable[[Message], None]


class MessageCollector:
    """Message listener that keeps every message in emission order."""

    def __init__(self) -> None:
        self.messages: List[Message] = []

    def __call__(self, message: Message) -> None:
        self.messages.append(message)

    @property
    def warnings(self) -> List[Message]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    @property
    def errors(self) -> List[Message]:
        return [m for m in self.messages if m.severity == Severity.ERROR]


class StructuralError(Exception):
    """
    The OpenAPI schema uses a construct that cannot be represented in the output.

    Raised from anywhere inside a conversion; it aborts the whole document.
    """

    def __init__(self, message: str, path: Optional[JsonPath] = None):
        self.message = message
        self.path = path
        super().__init__(message if path is None else f"{path}: {message}")

    def to_message(self) -> Message:
        return Message.error(self.message, self.path)
