"""Pydantic models for intents, exchanges and settlements."""

from matchmaker.models.intent import (
    Exchange,
    FungibleTokenIntent,
    Signed,
    SignedExchange,
    SignedIntent,
)
from matchmaker.models.settlement import IntentTransfers, Transfer
from matchmaker.models.types import Address, Amount, HexBytes, Rate, parse_rate

__all__ = [
    # Types
    "Address",
    "Amount",
    "HexBytes",
    "Rate",
    "parse_rate",
    # Intent models
    "Exchange",
    "FungibleTokenIntent",
    "Signed",
    "SignedExchange",
    "SignedIntent",
    # Settlement models
    "IntentTransfers",
    "Transfer",
]
