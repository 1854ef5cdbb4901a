"""
Scoring scheme and gap sentinel for global alignment
"""
from dataclasses import dataclass
from typing import Any


class Gap:
    """Placeholder for a gap position in an aligned sequence"""
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "GAP"

    def __str__(self) -> str:
        return "-"

    def __reduce__(self):
        return (Gap, ())


GAP = Gap()


def is_gap(symbol: Any) -> bool:
    return symbol is GAP


@dataclass(frozen=True)
class ScoringScheme:
    """
    Reward/penalty values used while aligning

    Parameters:
    -----------
    match : int
        Added when two aligned symbols are equal (default 1)
    mismatch : int
        Added when two aligned symbols differ (default -1)
    gap : int
        Added for every symbol aligned against a gap (default 0)
    """
    match: int = 1
    mismatch: int = -1
    gap: int = 0

    def substitution(self, a: Any, b: Any) -> int:
        return self.match if a == b else self.mismatch

    def as_dict(self) -> dict:
        return {"match": self.match, "mismatch": self.mismatch, "gap": self.gap}


DEFAULT_SCORING = ScoringScheme()
