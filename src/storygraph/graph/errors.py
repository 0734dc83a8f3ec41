"""Error types raised by graph operations.

Routine not-found and precondition failures are signalled by return
values. These exceptions are reserved for programming errors, such as a
malformed path supplied by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PathError(ValueError):
    """Raised for malformed dotted paths or writes that can't be applied.

    Attributes:
        path: The dotted path as supplied by the caller.
        reason: What is wrong with it.
    """

    path: str
    reason: str

    def __post_init__(self) -> None:
        super().__init__(f"Invalid path '{self.path}': {self.reason}")
