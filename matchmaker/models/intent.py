"""Pydantic models for signed trading intents.

An intent is signed by its owner and carries one or more exchanges. Each
exchange is signed on its own so that a settlement can prove every
transfer against the exchange that authorized it.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from matchmaker.models.types import Address, Amount, HexBytes, Rate

T = TypeVar("T")


class Signed(BaseModel, Generic[T]):
    """A payload together with its owner's signature.

    Signature verification happens before data reaches the matchmaker;
    the signature is carried through so the settlement can be verified
    downstream.
    """

    data: T
    sig: HexBytes

    model_config = ConfigDict(frozen=True)


class Exchange(BaseModel):
    """Terms under which an owner will trade one token for another.

    Attributes:
        addr: Owner address (source of sell transfers, target of buy transfers)
        token_sell: Token the owner gives
        token_buy: Token the owner wants
        rate_min: Minimum amount received per unit given (token_buy / token_sell)
        max_sell: Upper bound on the amount of token_sell given
        min_buy: Lower bound on the amount of token_buy received
    """

    addr: Address
    token_sell: Address
    token_buy: Address
    rate_min: Rate
    max_sell: Amount
    min_buy: Amount = 0

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_distinct_tokens(self) -> Exchange:
        if self.token_sell == self.token_buy:
            raise ValueError(f"Exchange sells and buys the same token: {self.token_sell}")
        return self

    @property
    def rate(self) -> Fraction:
        """rate_min as an exact Fraction."""
        return Fraction(self.rate_min)


class FungibleTokenIntent(BaseModel):
    """An owner's set of acceptable exchanges."""

    addr: Address
    exchange: list[Signed[Exchange]] = Field(min_length=1)

    model_config = ConfigDict(frozen=True)


SignedExchange = Signed[Exchange]
SignedIntent = Signed[FungibleTokenIntent]
