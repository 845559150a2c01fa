"""Pydantic models for settlement payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from matchmaker.models.intent import SignedExchange, SignedIntent
from matchmaker.models.types import Address, Amount


class Transfer(BaseModel):
    """A single token movement between two owners."""

    source: Address
    target: Address
    token: Address
    amount: Amount

    model_config = ConfigDict(frozen=True)


class IntentTransfers(BaseModel):
    """Settlement of one cycle of intents.

    Transfers, exchanges and intents are all listed in ring order:
    exchanges[i] and intents[i] belong to the owner that gives transfers[i].
    One owner may appear more than once when it has several exchanges in
    the ring.
    """

    transfers: list[Transfer] = Field(default_factory=list)
    exchanges: list[SignedExchange] = Field(default_factory=list)
    intents: list[SignedIntent] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> IntentTransfers:
        """Create a payload with no transfers."""
        return cls()

    @property
    def participants(self) -> set[str]:
        """Owner addresses taking part in the settlement."""
        return {t.source for t in self.transfers} | {t.target for t in self.transfers}
