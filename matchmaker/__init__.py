"""Intent matchmaker - multilateral barter matching core."""

from matchmaker.matchmaker import Matchmaker, MatchResult

__version__ = "0.1.0"
__all__ = ["Matchmaker", "MatchResult", "__version__"]
