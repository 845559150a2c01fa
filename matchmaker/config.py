"""Matchmaker configuration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchmakerConfig:
    """Behaviour flags for one matchmaker.

    Every validator replays invocations, so all validators must run with
    the same configuration.

    Attributes:
        max_cycle_size: Rings with more participants are left unresolved.
            None means no limit.
        resolve_until_stable: After a pass that settles at least one ring,
            search the remaining graph again. Members left behind when a
            ring is extracted from a larger component get another chance
            in the same invocation.
    """

    max_cycle_size: int | None = None
    resolve_until_stable: bool = True

    def __post_init__(self) -> None:
        if self.max_cycle_size is not None and self.max_cycle_size < 2:
            raise ValueError(f"max_cycle_size must be at least 2, got {self.max_cycle_size}")


# Default configuration instance
DEFAULT_CONFIG = MatchmakerConfig()
