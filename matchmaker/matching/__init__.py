"""Amount solving and settlement assembly for discovered rings."""

from matchmaker.matching.amounts import (
    CycleAmounts,
    RingViability,
    check_ring_viability,
    solve_amounts,
)
from matchmaker.matching.assembler import (
    build_settlement,
    create_transfer,
    decode_settlement,
    encode_settlement,
    remove_settled,
)

__all__ = [
    "CycleAmounts",
    "RingViability",
    "check_ring_viability",
    "solve_amounts",
    "build_settlement",
    "create_transfer",
    "decode_settlement",
    "encode_settlement",
    "remove_settled",
]
