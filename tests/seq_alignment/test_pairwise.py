import asyncio
import random

import numpy as np
import pytest
from pytest import fixture

from NWAlign.seq_alignment.pairwise import (
    Alignment,
    NeedlemanWunschAligner,
    align,
    align_async,
)
from NWAlign.seq_alignment.scoring import GAP, ScoringScheme, is_gap

GATTACA_MATRIX = [
    [0, -1, -2, -3, -4, -5, -6, -7],
    [-1, 1, 0, -1, -2, -3, -4, -5],
    [-2, 0, 0, 1, 0, -1, -2, -3],
    [-3, -1, -1, 0, 2, 1, 0, -1],
    [-4, -2, -2, -1, 1, 1, 0, -1],
    [-5, -3, -3, -1, 0, 0, 0, -1],
    [-6, -4, -2, -2, -1, -1, 1, 0],
    [-7, -5, -3, -1, -2, -2, 0, 0],
]


@fixture
def textbook_scoring():
    return ScoringScheme(match=1, mismatch=-1, gap=-1)


@fixture
def gattaca_result(textbook_scoring):
    return align("GATTACA", "GCATGCU", textbook_scoring)


def _random_pairs(count=40, seed=7):
    rng = random.Random(seed)
    pairs = []
    for _ in range(count):
        seq1 = "".join(rng.choice("ACGT") for _ in range(rng.randint(0, 12)))
        seq2 = "".join(rng.choice("ACGT") for _ in range(rng.randint(0, 12)))
        scoring = ScoringScheme(rng.randint(-2, 3), rng.randint(-3, 1), rng.randint(-3, 2))
        pairs.append((seq1, seq2, scoring))
    return pairs


class TestMatrix:
    def test_boundary_is_gap_accumulation(self):
        aligner = NeedlemanWunschAligner(ScoringScheme(gap=-3))
        matrix = aligner._initialize_matrix(4, 6)
        assert matrix.shape == (5, 7)
        assert matrix[:, 0].tolist() == [0, -3, -6, -9, -12]
        assert matrix[0, :].tolist() == [0, -3, -6, -9, -12, -15, -18]
        assert not matrix[1:, 1:].any()

    def test_zero_length_matrix(self):
        matrix = NeedlemanWunschAligner()._initialize_matrix(0, 0)
        assert matrix.tolist() == [[0]]

    def test_matrix_uses_64_bit_integers(self, gattaca_result):
        assert gattaca_result.matrix.dtype == np.int64

    def test_gattaca_matrix(self, gattaca_result):
        assert gattaca_result.matrix.tolist() == GATTACA_MATRIX
        assert gattaca_result.matrix_score == 0

    def test_matrix_is_read_only(self, gattaca_result):
        with pytest.raises(ValueError):
            gattaca_result.matrix[1, 1] = 99

    def test_large_scores_do_not_wrap(self):
        gap = -2 ** 62
        result = align("AAA", "", ScoringScheme(gap=gap))
        assert result.matrix.dtype == object
        assert result.matrix[:, 0].tolist() == [0, gap, 2 * gap, 3 * gap]
        assert result.score == 3 * gap
        assert result.matrix_score == result.score

    def test_large_scores_interior_cells(self):
        scoring = ScoringScheme(match=2 ** 62, mismatch=-2 ** 62, gap=-2 ** 62)
        result = align("ACGT", "ACGT", scoring)
        assert result.matrix_score == 4 * 2 ** 62
        assert result.score == result.matrix_score

    @pytest.mark.parametrize("seq1, seq2, scoring", _random_pairs())
    def test_boundary_and_recurrence_hold(self, seq1, seq2, scoring):
        matrix = align(seq1, seq2, scoring).matrix
        for i in range(len(seq1) + 1):
            assert matrix[i, 0] == i * scoring.gap
        for j in range(len(seq2) + 1):
            assert matrix[0, j] == j * scoring.gap
        for i in range(1, len(seq1) + 1):
            for j in range(1, len(seq2) + 1):
                assert matrix[i, j] == max(
                    matrix[i - 1, j - 1] + scoring.substitution(seq1[i - 1], seq2[j - 1]),
                    matrix[i - 1, j] + scoring.gap,
                    matrix[i, j - 1] + scoring.gap,
                )


class TestTraceback:
    def test_gattaca_alignment(self, gattaca_result):
        assert gattaca_result.seq1_aligned == "G-ATTACA"
        assert gattaca_result.seq2_aligned == "GCA-TGCU"
        assert gattaca_result.score == 0

    def test_both_empty(self):
        result = align("", "")
        assert result.seq1_aligned == ""
        assert result.seq2_aligned == ""
        assert result.score == 0
        assert result.matrix.tolist() == [[0]]
        assert len(result.alignment) == 0

    def test_single_match_with_default_scoring(self):
        result = align("A", "A")
        assert (result.seq1_aligned, result.seq2_aligned) == ("A", "A")
        assert result.score == 1

    def test_identical_sequences_have_no_gaps(self):
        scoring = ScoringScheme(match=2, mismatch=-1, gap=-2)
        result = align("ACGTTGCA", "ACGTTGCA", scoring)
        assert result.seq1_aligned == result.seq2_aligned == "ACGTTGCA"
        assert result.alignment.gaps == 0
        assert result.score == 8 * scoring.match

    def test_empty_first_sequence(self):
        scoring = ScoringScheme(gap=-2)
        result = align("", "ACG", scoring)
        assert result.alignment.seq1 == (GAP, GAP, GAP)
        assert result.seq2_aligned == "ACG"
        assert result.score == 3 * scoring.gap

    def test_empty_second_sequence(self):
        result = align("ACGTACGT", "", ScoringScheme(gap=-1))
        assert result.seq1_aligned == "ACGTACGT"
        assert result.seq2_aligned == "--------"
        assert result.score == -8

    def test_match_takes_diagonal_over_larger_neighbour(self):
        result = align("AA", "A")
        # at the corner the (i-1, j) neighbour beats the diagonal one
        assert result.matrix[1, 1] > result.matrix[1, 0]
        assert result.seq1_aligned == "AA"
        assert result.seq2_aligned == "-A"
        assert result.score == 1

    def test_evaluated_score_can_differ_from_matrix(self):
        result = align("A", "A", ScoringScheme(match=1, mismatch=-1, gap=2))
        assert (result.seq1_aligned, result.seq2_aligned) == ("A", "A")
        assert result.score == 1
        assert result.matrix_score == 4

    def test_token_sequences(self):
        seq1 = ["ATG", "GCC", "TAA"]
        seq2 = ["ATG", "TAA"]
        result = align(seq1, seq2, ScoringScheme(match=2, mismatch=-1, gap=-1))
        assert result.alignment.seq1 == ("ATG", "GCC", "TAA")
        assert result.alignment.seq2 == ("ATG", GAP, "TAA")
        assert result.score == 3
        assert result.matrix_score == 3

    def test_dash_in_input_is_not_a_gap(self):
        result = align("A-C", "A-C")
        assert result.alignment.gaps == 0
        assert result.alignment.seq1 == ("A", "-", "C")
        assert not any(is_gap(s) for s in result.alignment.seq1)

    @pytest.mark.parametrize("seq1, seq2, scoring", _random_pairs())
    def test_alignment_shape(self, seq1, seq2, scoring):
        alignment = align(seq1, seq2, scoring).alignment
        assert len(alignment.seq1) == len(alignment.seq2)
        for a, b in zip(alignment.seq1, alignment.seq2):
            assert not (is_gap(a) and is_gap(b))
        original1, original2 = alignment.ungapped()
        assert "".join(original1) == seq1
        assert "".join(original2) == seq2
        assert alignment.path()[-1] == (len(seq1), len(seq2))

    def test_repeated_runs_are_identical(self, textbook_scoring):
        first = align("GATTACA", "GCATGCU", textbook_scoring)
        second = align("GATTACA", "GCATGCU", textbook_scoring)
        assert first.alignment == second.alignment
        assert first.score == second.score
        assert np.array_equal(first.matrix, second.matrix)


class TestAlignment:
    def test_calc_score(self):
        alignment = Alignment(("A", GAP, "C", "T"), ("A", "G", "G", GAP))
        assert alignment.calc_score(ScoringScheme(match=3, mismatch=-2, gap=-1)) == 3 - 1 - 2 - 1

    def test_format_with_custom_gap_char(self, gattaca_result):
        assert gattaca_result.alignment.format(".") == ("G.ATTACA", "GCA.TGCU")

    def test_format_rejects_long_gap_char(self, gattaca_result):
        with pytest.raises(ValueError):
            gattaca_result.alignment.format("--")

    def test_path(self, gattaca_result):
        assert gattaca_result.alignment.path() == [
            (0, 0), (1, 1), (1, 2), (2, 3), (3, 3), (4, 4), (5, 5), (6, 6), (7, 7)
        ]

    def test_statistics(self, gattaca_result):
        alignment = gattaca_result.alignment
        assert alignment.gaps == 2
        assert alignment.nmatch() == 4
        assert alignment.identity == pytest.approx(0.5)
        assert gattaca_result.match_string() == "| | |.|."


class TestAlignmentResult:
    def test_report(self):
        result = align("A", "A")
        assert result.report() == (
            "Results \n"
            "\n"
            "Score: 1\n"
            "Seq1:: A\n"
            "Seq2:: A\n"
            "Matrix:: \n"
            "0 \t0 \t\n"
            "0 \t1 \t\n"
        )

    def test_view_prints_report(self, gattaca_result, capsys):
        gattaca_result.view()
        assert capsys.readouterr().out == gattaca_result.report()

    def test_str_summary(self, gattaca_result):
        text = str(gattaca_result)
        assert "Alignment Score: 0" in text
        assert "Matrix Score: 0" in text
        assert "Gaps: 2" in text
        assert "Scoring: match=1, mismatch=-1, gap=-1" in text

    def test_verbose_progress(self, textbook_scoring, capsys):
        NeedlemanWunschAligner(textbook_scoring).align("GATTACA", "GCATGCU", verbose=True)
        out = capsys.readouterr().out
        assert "✓ Matrix initialized: 8 x 8" in out
        assert "✓ Traceback complete! Alignment length: 8" in out


def test_align_async(textbook_scoring):
    result = asyncio.run(align_async("GATTACA", "GCATGCU", textbook_scoring))
    assert result.seq1_aligned == "G-ATTACA"
    assert result.seq2_aligned == "GCA-TGCU"
