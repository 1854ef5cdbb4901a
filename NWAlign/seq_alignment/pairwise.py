"""
Pairwise Global Sequence Alignment Module
Needleman-Wunsch with a linear gap penalty
"""

import asyncio
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from .scoring import DEFAULT_SCORING, GAP, ScoringScheme, is_gap


@dataclass(frozen=True)
class Alignment:
    """Two equal-length aligned sequences, each element a symbol or GAP"""
    seq1: Tuple[Any, ...]
    seq2: Tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.seq1)

    def calc_score(self, scoring: ScoringScheme) -> int:
        """
        Score the aligned pair column by column

        Equal symbols add ``match``, a column with a gap on either side adds
        ``gap``, anything else adds ``mismatch``. The result can differ from
        the corner of the score matrix because the traceback always follows
        a symbol match diagonally.
        """
        score = 0
        for a, b in zip(self.seq1, self.seq2):
            if a == b:
                score += scoring.match
            elif is_gap(a) or is_gap(b):
                score += scoring.gap
            else:
                score += scoring.mismatch
        return score

    def format(self, gap_char: str = "-") -> Tuple[str, str]:
        """Render both rows as strings, drawing GAP as ``gap_char``"""
        if not isinstance(gap_char, str) or len(gap_char) != 1:
            raise ValueError(f"gap_char must be a single character, got {gap_char!r}")

        def render(row):
            return "".join(gap_char if is_gap(s) else str(s) for s in row)

        return render(self.seq1), render(self.seq2)

    def ungapped(self) -> Tuple[Tuple[Any, ...], Tuple[Any, ...]]:
        """Original input sequences recovered from the aligned rows"""
        return (
            tuple(s for s in self.seq1 if not is_gap(s)),
            tuple(s for s in self.seq2 if not is_gap(s)),
        )

    def path(self) -> List[Tuple[int, int]]:
        """Matrix cells visited by the alignment, from (0, 0) to (m, n)"""
        i, j = 0, 0
        cells = [(0, 0)]
        for a, b in zip(self.seq1, self.seq2):
            if not is_gap(a):
                i += 1
            if not is_gap(b):
                j += 1
            cells.append((i, j))
        return cells

    @property
    def gaps(self) -> int:
        return sum(1 for s in self.seq1 if is_gap(s)) + sum(1 for s in self.seq2 if is_gap(s))

    def nmatch(self) -> int:
        """Number of matching positions"""
        return sum(1 for a, b in zip(self.seq1, self.seq2) if a == b)

    @property
    def identity(self) -> float:
        return self.nmatch() / len(self) if len(self) > 0 else 0.0


@dataclass(frozen=True, eq=False)
class AlignmentResult:
    """Store alignment, evaluated score and the full score matrix"""
    alignment: Alignment
    score: int
    matrix: np.ndarray
    scoring: ScoringScheme = DEFAULT_SCORING

    @property
    def matrix_score(self) -> int:
        """Bottom-right cell of the score matrix"""
        return int(self.matrix[-1, -1])

    @property
    def seq1_aligned(self) -> str:
        return self.alignment.format()[0]

    @property
    def seq2_aligned(self) -> str:
        return self.alignment.format()[1]

    def match_string(self) -> str:
        """``|`` for a match, ``.`` for a mismatch, space for a gap"""
        marks = []
        for a, b in zip(self.alignment.seq1, self.alignment.seq2):
            if is_gap(a) or is_gap(b):
                marks.append(" ")
            elif a == b:
                marks.append("|")
            else:
                marks.append(".")
        return "".join(marks)

    def __str__(self) -> str:
        return (
            f"Alignment Score: {self.score}\n"
            f"Matrix Score: {self.matrix_score}\n"
            f"Length: {len(self.alignment)}\n"
            f"Gaps: {self.alignment.gaps}\n"
            f"Identity: {self.alignment.identity:.2%}\n"
            f"Scoring: match={self.scoring.match}, mismatch={self.scoring.mismatch}, "
            f"gap={self.scoring.gap}\n"
        )

    def report(self, gap_char: str = "-") -> str:
        """Results block with score, aligned rows and the whole matrix"""
        aligned1, aligned2 = self.alignment.format(gap_char)
        lines = [
            "Results ",
            "",
            f"Score: {self.score}",
            f"Seq1:: {aligned1}",
            f"Seq2:: {aligned2}",
            "Matrix:: ",
        ]
        for row in self.matrix.tolist():
            lines.append("".join(f"{value} \t" for value in row))
        return "\n".join(lines) + "\n"

    def view(self, gap_char: str = "-") -> None:
        """Print the results block"""
        print(self.report(gap_char), end="")


class NeedlemanWunschAligner:
    """Global pairwise aligner with match/mismatch/gap scoring"""

    def __init__(self, scoring: Optional[ScoringScheme] = None):
        """
        Parameters:
        -----------
        scoring : ScoringScheme, optional
            Match, mismatch and gap values (default 1, -1, 0)
        """
        self.scoring = scoring if scoring is not None else DEFAULT_SCORING

    def _matrix_dtype(self, len1: int, len2: int):
        """int64 when every reachable score fits, Python ints otherwise"""
        largest = max(abs(self.scoring.match), abs(self.scoring.mismatch), abs(self.scoring.gap))
        # a cell and its candidates sum at most len1 + len2 + 1 scores
        if (len1 + len2 + 1) * largest <= int(np.iinfo(np.int64).max):
            return np.int64
        return object

    def _initialize_matrix(self, len1: int, len2: int) -> np.ndarray:
        """Zero matrix with gap accumulations along row 0 and column 0"""
        score_matrix = np.zeros((len1 + 1, len2 + 1), dtype=self._matrix_dtype(len1, len2))
        gap = self.scoring.gap
        for i in range(1, len1 + 1):
            score_matrix[i, 0] = score_matrix[i - 1, 0] + gap
        for j in range(1, len2 + 1):
            score_matrix[0, j] = score_matrix[0, j - 1] + gap
        return score_matrix

    def _fill_matrix(
        self,
        seq1: Sequence,
        seq2: Sequence,
        score_matrix: np.ndarray,
        verbose: bool = False
    ) -> np.ndarray:
        """Fill the interior cells row by row"""
        len1, len2 = len(seq1), len(seq2)
        substitute = self.scoring.substitution
        gap = self.scoring.gap

        if verbose:
            print(f"\nFilling alignment matrix for sequences of length {len1} x {len2}")
            print(f"Total cells to compute: {len1 * len2}")
            print("Computing ", end="")

        # rows are filled as python ints and written back whole
        prev = score_matrix[0].tolist()
        for i in range(1, len1 + 1):
            a = seq1[i - 1]
            row = [int(score_matrix[i, 0])] + [0] * len2
            for j in range(1, len2 + 1):
                substitution = prev[j - 1] + substitute(a, seq2[j - 1])
                delete = prev[j] + gap
                insert = row[j - 1] + gap
                row[j] = max(substitution, delete, insert)
            score_matrix[i, :] = row
            prev = row

            if verbose and i % max(1, len1 // 10) == 0:
                print("█", end="", flush=True)

        if verbose:
            print(" 100.0%")
            print("✓ Matrix computation complete!")
            print(f"Matrix score: {score_matrix[len1, len2]} at position {(len1, len2)}")

        return score_matrix

    def _traceback(
        self,
        seq1: Sequence,
        seq2: Sequence,
        score_matrix: np.ndarray,
        verbose: bool = False
    ) -> Alignment:
        """
        Walk back from the bottom-right corner to the origin

        A symbol match always steps diagonally, even when the diagonal
        neighbour is not the largest of the three. Otherwise the first of
        (i-1, j-1), (i-1, j) and (i, j-1) that is >= the other two wins.
        """
        aligned1, aligned2 = [], []
        i, j = len(seq1), len(seq2)

        if verbose:
            print(f"\nPerforming traceback from ({i}, {j})")

        while i > 0 and j > 0:
            diag = score_matrix[i - 1, j - 1]
            left = score_matrix[i - 1, j]
            up = score_matrix[i, j - 1]

            if seq1[i - 1] == seq2[j - 1] or (diag >= up and diag >= left):
                aligned1.append(seq1[i - 1])
                aligned2.append(seq2[j - 1])
                i -= 1
                j -= 1
            elif left >= up and left >= diag:
                aligned1.append(seq1[i - 1])
                aligned2.append(GAP)
                i -= 1
            else:
                # up >= left and up >= diag
                aligned1.append(GAP)
                aligned2.append(seq2[j - 1])
                j -= 1

        while i > 0:
            aligned1.append(seq1[i - 1])
            aligned2.append(GAP)
            i -= 1
        while j > 0:
            aligned1.append(GAP)
            aligned2.append(seq2[j - 1])
            j -= 1

        if verbose:
            print(f"✓ Traceback complete! Alignment length: {len(aligned1)}")

        return Alignment(tuple(reversed(aligned1)), tuple(reversed(aligned2)))

    def align(
        self,
        seq1: Sequence,
        seq2: Sequence,
        verbose: bool = False
    ) -> AlignmentResult:
        """
        Perform global pairwise sequence alignment

        Parameters:
        -----------
        seq1 : str or sequence of symbols
            First sequence
        seq2 : str or sequence of symbols
            Second sequence
        verbose : bool
            If True, display progress during alignment

        Returns:
        --------
        AlignmentResult
            Aligned pair, evaluated score and the read-only score matrix
        """
        if verbose:
            print("\n" + "=" * 70)
            print("GLOBAL PAIRWISE ALIGNMENT (NEEDLEMAN-WUNSCH)")
            print("=" * 70)
            print(f"Sequence 1: {seq1}")
            print(f"Sequence 2: {seq2}")
            print(f"Match: {self.scoring.match}, Mismatch: {self.scoring.mismatch}, "
                  f"Gap: {self.scoring.gap}")
            print("=" * 70)
            print("\nInitializing alignment matrix...")

        score_matrix = self._initialize_matrix(len(seq1), len(seq2))

        if verbose:
            print(f"✓ Matrix initialized: {len(seq1) + 1} x {len(seq2) + 1}")

        score_matrix = self._fill_matrix(seq1, seq2, score_matrix, verbose)
        score_matrix.setflags(write=False)

        alignment = self._traceback(seq1, seq2, score_matrix, verbose)
        score = alignment.calc_score(self.scoring)

        result = AlignmentResult(
            alignment=alignment,
            score=score,
            matrix=score_matrix,
            scoring=self.scoring
        )

        if verbose:
            print("\nALIGNMENT RESULTS")
            print("=" * 70)
            print(f"Score: {score}")
            print(f"Matrix score: {result.matrix_score}")
            print(f"Identity: {alignment.identity:.2%} ({alignment.nmatch()} matches)")
            print(f"Gaps: {alignment.gaps}")
            print(f"Length: {len(alignment)}")
            print("=" * 70 + "\n")

        return result


def align(
    seq1: Sequence,
    seq2: Sequence,
    scoring: Optional[ScoringScheme] = None,
    verbose: bool = False
) -> AlignmentResult:
    """
    Global alignment of two sequences

    Parameters:
    -----------
    seq1, seq2 : str or sequence of symbols
        Sequences to align; either may be empty
    scoring : ScoringScheme, optional
        Defaults to match=1, mismatch=-1, gap=0
    verbose : bool
        Show progress (default False)

    Examples:
    ---------
    >>> result = align("GATTACA", "GCATGCU", ScoringScheme(1, -1, -1))
    >>> result.seq1_aligned, result.seq2_aligned
    ('G-ATTACA', 'GCA-TGCU')
    >>> result.score
    0
    """
    return NeedlemanWunschAligner(scoring).align(seq1, seq2, verbose=verbose)


async def align_async(
    seq1: Sequence,
    seq2: Sequence,
    scoring: Optional[ScoringScheme] = None
) -> AlignmentResult:
    """Run :func:`align` in the default thread pool"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, align, seq1, seq2, scoring)
