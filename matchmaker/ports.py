"""Collaborators the matchmaker depends on.

The matchmaker never talks to the host directly. Persistence, submission
and intent decoding are injected, which keeps the core testable without
a host runtime.
"""

from __future__ import annotations

from typing import Protocol

from pydantic import ValidationError

from matchmaker.errors import FormatError
from matchmaker.models.intent import SignedIntent


class StateStore(Protocol):
    """Opaque persistence of the graph between invocations."""

    def load_state(self) -> bytes: ...

    def save_state(self, data: bytes) -> None: ...


class SettlementSubmitter(Protocol):
    """Hands settlement payloads to the ledger."""

    def submit(self, payload: bytes) -> None: ...


class IntentDecoder(Protocol):
    """Turns submitted bytes into a verified signed intent.

    Implementations raise FormatError when the bytes cannot be decoded.
    """

    def __call__(self, data: bytes) -> SignedIntent: ...


def decode_intent(data: bytes) -> SignedIntent:
    """Decode a JSON-encoded signed intent.

    Only the structure is validated here; signatures are checked by the
    host before the intent reaches the matchmaker.

    Raises:
        FormatError: If the bytes are not a valid signed intent
    """
    try:
        return SignedIntent.model_validate_json(data)
    except ValidationError as err:
        raise FormatError(f"Malformed intent: {err.error_count()} error(s)") from err


class InMemoryStateStore:
    """StateStore keeping the graph bytes in memory."""

    def __init__(self, data: bytes = b"") -> None:
        self.data = data
        self.saves = 0

    def load_state(self) -> bytes:
        return self.data

    def save_state(self, data: bytes) -> None:
        self.data = data
        self.saves += 1


class RecordingSubmitter:
    """SettlementSubmitter that keeps every submitted payload."""

    def __init__(self) -> None:
        self.payloads: list[bytes] = []

    def submit(self, payload: bytes) -> None:
        self.payloads.append(payload)


__all__ = [
    "StateStore",
    "SettlementSubmitter",
    "IntentDecoder",
    "decode_intent",
    "InMemoryStateStore",
    "RecordingSubmitter",
]
