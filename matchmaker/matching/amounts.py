"""Transfer amounts for a ring of exchanges.

In a ring, participant i gives x[i] of its sell token to participant
i + 1 and receives x[i - 1] from participant i - 1. Every participant
requires:

    x[i] <= max_sell[i]                  (never gives more than offered)
    x[i] >= min_buy[i + 1]               (receiver gets at least its minimum)
    x[i - 1] >= rate_min[i] * x[i]       (received / given >= rate_min)

Multiplying the rate constraints around the ring shows a ring is only
viable when the product of all rate_min is <= 1:
- product < 1: surplus exists (participants are collectively generous)
- product = 1: everyone gets exactly their limit
- product > 1: not viable (participants demand more than the ring holds)

Once participant 0's volume V = x[0] is fixed, giving each later
participant exactly its limit rate determines the rest of the ring, so
the problem reduces to a linear feasibility problem in one variable:
every hop's bound becomes an interval on V.

IMPORTANT: All calculations use exact arithmetic. Rates are Fractions,
amounts go through SafeInt, and limit checks use integer
cross-multiplication. No floats, no tolerances; every validator must
compute identical amounts.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from fractions import Fraction

import structlog

from matchmaker.errors import InfeasibleCycle
from matchmaker.graph.exchange_graph import ExchangeNode
from matchmaker.models.intent import Exchange
from matchmaker.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class RingViability:
    """Result of checking the rate product of a ring.

    Attributes:
        viable: Whether product <= 1
        product: Product of rate_min around the ring
    """

    viable: bool
    product: Fraction

    @property
    def surplus_ratio(self) -> Fraction:
        """1 - product. >0 means surplus available, 0 means exact match."""
        return 1 - self.product


@dataclass(frozen=True)
class CycleAmounts:
    """Solved transfer amounts for a ring.

    Attributes:
        amounts: amounts[i] is what ring[i] gives to ring[(i + 1) % n]
        volume: amounts[0], the ring's common trade volume
        binding_index: Hop whose max_sell bound limits the volume
        surplus: What ring[0] receives above its limit, in units of
            ring[-1]'s sell token
    """

    amounts: list[int]
    volume: int
    binding_index: int
    surplus: Fraction


def check_ring_viability(ring: Sequence[ExchangeNode]) -> RingViability:
    """Check whether the rate product of a ring allows any settlement."""
    product = Fraction(1)
    for node in ring:
        product *= node.exchange.data.rate
    return RingViability(viable=product <= 1, product=product)


def solve_amounts(
    ring: Sequence[ExchangeNode],
    node_indices: Sequence[int] = (),
) -> CycleAmounts:
    """Compute per-hop transfer amounts satisfying every participant's bounds.

    Volume policy: the largest volume every bound allows. Participants
    after the first receive exactly their limit rate for what they give;
    participant 0 keeps any surplus. When rounding a later hop down breaks
    a bound at that volume, the volume drops to the largest one at which
    no hop rounds.

    Args:
        ring: Exchange nodes in flow order (ring[i] gives to ring[i + 1])
        node_indices: Graph indices of the ring, attached to errors

    Returns:
        CycleAmounts with one amount per hop

    Raises:
        InfeasibleCycle: If no integer amounts satisfy every constraint
    """
    n = len(ring)
    if n < 2:
        raise InfeasibleCycle("ring_too_short", node_indices)

    viability = check_ring_viability(ring)
    if not viability.viable:
        logger.debug(
            "ring_rate_product_exceeds_one",
            product=str(viability.product),
            ring_size=n,
        )
        raise InfeasibleCycle("rate_product_exceeds_one", node_indices)

    exchanges = [node.exchange.data for node in ring]
    rate_nums = [e.rate.numerator for e in exchanges]
    rate_dens = [e.rate.denominator for e in exchanges]

    # Forward pass: scale[i] = x[i] / V = prod_{j=1..i} den[j] / num[j]
    # kept as integer ratio scale_num[i] / scale_den[i]
    scale_num: list[int] = [1]
    scale_den: list[int] = [1]
    for i in range(1, n):
        scale_num.append(scale_num[i - 1] * rate_dens[i])
        scale_den.append(scale_den[i - 1] * rate_nums[i])

    # Upper bound on V from each hop: max_sell[i] * scale_den[i] / scale_num[i]
    # Binding hop found via cross-multiplication
    binding = 0
    for i in range(1, n):
        lhs = S(exchanges[i].max_sell) * S(scale_den[i]) * S(scale_num[binding])
        rhs = S(exchanges[binding].max_sell) * S(scale_den[binding]) * S(scale_num[i])
        if lhs < rhs:
            binding = i
    volume_max = (S(exchanges[binding].max_sell) * S(scale_den[binding])) // S(scale_num[binding])

    # Lower bound on V from each receiver's min_buy
    volume_min = S(1)
    for i in range(n):
        receiver = exchanges[(i + 1) % n]
        bound = (S(receiver.min_buy) * S(scale_den[i])).ceiling_div(S(scale_num[i]))
        volume_min = volume_min.max(bound)

    if volume_min > volume_max:
        logger.debug(
            "ring_bounds_conflict",
            volume_min=volume_min.value,
            volume_max=volume_max.value,
            binding_index=binding,
        )
        raise InfeasibleCycle("bounds_conflict", node_indices)

    try:
        amounts = _chain_amounts(volume_max, rate_nums, rate_dens)
        _verify_amounts(exchanges, amounts, rate_nums, rate_dens, node_indices)
    except InfeasibleCycle as err:
        # A multiple of the chain period rounds nowhere, so every later hop
        # gets exactly its limit and participant 0 keeps the rate product.
        period = S(_chain_period(scale_num, scale_den))
        exact_volume = (volume_max // period) * period
        if exact_volume < volume_min or exact_volume == volume_max:
            raise
        logger.debug(
            "ring_volume_reduced",
            volume_max=volume_max.value,
            volume=exact_volume.value,
            reason=err.reason,
        )
        amounts = _chain_amounts(exact_volume, rate_nums, rate_dens)
        _verify_amounts(exchanges, amounts, rate_nums, rate_dens, node_indices)

    # Surplus of participant 0: received - rate_min[0] * given
    surplus = amounts[-1] - exchanges[0].rate * amounts[0]

    return CycleAmounts(
        amounts=amounts,
        volume=amounts[0],
        binding_index=binding,
        surplus=surplus,
    )


def _chain_amounts(volume: S, rate_nums: list[int], rate_dens: list[int]) -> list[int]:
    """Amounts when each participant after the first gives what its limit
    rate allows for what it received, rounded down."""
    amounts: list[int] = [volume.to_amount()]
    for i in range(1, len(rate_nums)):
        given = (S(amounts[i - 1]) * S(rate_dens[i])) // S(rate_nums[i])
        amounts.append(given.to_amount())
    return amounts


def _chain_period(scale_num: list[int], scale_den: list[int]) -> int:
    """Smallest volume step for which every scaled hop is an integer."""
    return math.lcm(*(den // math.gcd(num, den) for num, den in zip(scale_num, scale_den)))


def _verify_amounts(
    exchanges: Sequence[Exchange],
    amounts: list[int],
    rate_nums: list[int],
    rate_dens: list[int],
    node_indices: Sequence[int],
) -> None:
    """Re-check every constraint on the final integer amounts.

    Rounding down can push the last hop below participant 0's limit or a
    receiver below its min_buy even when the rational volume was feasible.

    Raises:
        InfeasibleCycle: On the first violated constraint
    """
    n = len(amounts)
    for i in range(n):
        given = amounts[i]
        received = amounts[i - 1]
        exchange = exchanges[i]
        receiver = exchanges[(i + 1) % n]

        if given <= 0:
            raise InfeasibleCycle("zero_amount", node_indices)
        if given > exchange.max_sell:
            raise InfeasibleCycle("max_sell_exceeded", node_indices)
        if given < receiver.min_buy:
            raise InfeasibleCycle("min_buy_not_met", node_indices)

        # received / given >= num / den  <=>  received * den >= num * given
        if S(received) * S(rate_dens[i]) < S(rate_nums[i]) * S(given):
            logger.debug(
                "ring_limit_rate_violated",
                hop=i,
                given=given,
                received=received,
                rate_min=exchange.rate_min,
            )
            raise InfeasibleCycle("rate_min_violated", node_indices)


__all__ = ["RingViability", "CycleAmounts", "check_ring_viability", "solve_amounts"]
