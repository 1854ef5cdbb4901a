"""
Sequence Alignment Module
Provides global pairwise alignment (Needleman-Wunsch)
"""

from .scoring import (
    GAP,
    DEFAULT_SCORING,
    ScoringScheme,
    is_gap
)
from .pairwise import (
    NeedlemanWunschAligner,
    Alignment,
    AlignmentResult,
    align,
    align_async
)
from .records import (
    AlignmentConfigError,
    AlignmentJob,
    parse_job,
    read_job,
    read_fasta_pair,
    result_to_record,
    write_result
)

__all__ = [
    "GAP",
    "DEFAULT_SCORING",
    "ScoringScheme",
    "is_gap",
    "NeedlemanWunschAligner",
    "Alignment",
    "AlignmentResult",
    "align",
    "align_async",
    "AlignmentConfigError",
    "AlignmentJob",
    "parse_job",
    "read_job",
    "read_fasta_pair",
    "result_to_record",
    "write_result"
]
