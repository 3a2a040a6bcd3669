"""Per-call cancellation signal.

Each tool invocation owns its own `CancellationSignal`. The signal is an
immutable value; a cancellable one wraps a `threading.Event` that the caller
sets from another thread. Polling observes it only at poll boundaries and
before each delay.
"""

import threading
from dataclasses import dataclass

from language_tools.documents.errors import Cancelled


@dataclass(frozen=True)
class CancellationSignal:
    event: threading.Event | None = None

    @classmethod
    def none(cls) -> "CancellationSignal":
        """Signal that can never fire."""
        return cls()

    @classmethod
    def from_event(cls, event: threading.Event) -> "CancellationSignal":
        return cls(event=event)

    @property
    def can_be_cancelled(self) -> bool:
        return self.event is not None

    @property
    def is_cancelled(self) -> bool:
        return self.event is not None and self.event.is_set()

    def raise_if_cancelled(self, message: str = "Operation was cancelled.") -> None:
        if self.is_cancelled:
            raise Cancelled(message)
