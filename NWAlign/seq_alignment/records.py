"""
Alignment job and result records (JSON), FASTA input
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .pairwise import AlignmentResult
from .scoring import DEFAULT_SCORING, ScoringScheme

SCORING_FIELDS = ("match", "mismatch", "gap")


class AlignmentConfigError(ValueError):
    """Malformed alignment job (missing fields, wrong types, bad JSON)"""


@dataclass(frozen=True)
class AlignmentJob:
    """Two sequences and the scoring scheme to align them with"""
    seq1: str
    seq2: str
    scoring: ScoringScheme = DEFAULT_SCORING

    def to_record(self) -> Dict[str, Any]:
        return {
            "seq1": self.seq1,
            "seq2": self.seq2,
            "scoring_schema": self.scoring.as_dict(),
        }


def _require_int(obj: dict, key: str, where: str) -> int:
    if key not in obj:
        raise AlignmentConfigError(f"missing field '{where}.{key}'")
    value = obj[key]
    # bool is an int subclass; true/false are not scores
    if isinstance(value, bool) or not isinstance(value, int):
        raise AlignmentConfigError(
            f"field '{where}.{key}' must be an integer, got {type(value).__name__}"
        )
    return value


def parse_scoring(obj: Optional[Any]) -> ScoringScheme:
    """
    Build a ScoringScheme from a ``scoring_schema`` object

    Args:
        obj: Mapping with integer ``match``, ``mismatch`` and ``gap``,
            or None for the default scheme

    Returns:
        ScoringScheme
    """
    if obj is None:
        return DEFAULT_SCORING
    if not isinstance(obj, dict):
        raise AlignmentConfigError("field 'scoring_schema' must be an object")
    return ScoringScheme(**{key: _require_int(obj, key, "scoring_schema")
                            for key in SCORING_FIELDS})


def parse_job(obj: Any) -> AlignmentJob:
    """
    Validate a decoded input record

    Example:
        >>> job = parse_job({"seq1": "GATTACA", "seq2": "GCATGCU"})
        >>> job.scoring
        ScoringScheme(match=1, mismatch=-1, gap=0)
    """
    if not isinstance(obj, dict):
        raise AlignmentConfigError("alignment job must be a JSON object")
    for key in ("seq1", "seq2"):
        if key not in obj:
            raise AlignmentConfigError(f"missing field '{key}'")
        if not isinstance(obj[key], str):
            raise AlignmentConfigError(
                f"field '{key}' must be a string, got {type(obj[key]).__name__}"
            )
    return AlignmentJob(obj["seq1"], obj["seq2"], parse_scoring(obj.get("scoring_schema")))


def read_job(filename: str) -> AlignmentJob:
    """
    Read an alignment job from a JSON file

    Args:
        filename: Path to a JSON file with ``seq1``, ``seq2`` and an
            optional ``scoring_schema``

    Returns:
        AlignmentJob

    Example:
        >>> job = read_job('input.json')
    """
    with open(filename, 'r', encoding="utf-8") as f:
        try:
            obj = json.load(f)
        except json.JSONDecodeError as e:
            raise AlignmentConfigError(f"{filename}: invalid JSON ({e})") from e
        except UnicodeDecodeError as e:
            raise AlignmentConfigError(f"{filename}: not UTF-8 text ({e})") from e
    return parse_job(obj)


def read_fasta_records(filename: str) -> List[Tuple[str, str]]:
    """
    Read (name, sequence) records from a FASTA file in file order

    Args:
        filename: Path to FASTA file (UTF-8)

    Returns:
        list: (name, sequence) tuples; repeated names are kept
    """
    records = []
    current_name = None
    current_seq = []

    with open(filename, 'r', encoding="utf-8") as f:
        try:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                if line.startswith('>'):
                    if current_name is not None:
                        records.append((current_name, ''.join(current_seq)))
                    header = line[1:].split()
                    current_name = header[0] if header else f"seq{len(records) + 1}"
                    current_seq = []
                else:
                    current_seq.append(line)
        except UnicodeDecodeError as e:
            raise AlignmentConfigError(f"{filename}: not UTF-8 text ({e})") from e

    if current_name is not None:
        records.append((current_name, ''.join(current_seq)))

    return records


def read_fasta(filename: str) -> dict:
    """
    Read sequences from FASTA format file

    Args:
        filename: Path to FASTA file

    Returns:
        dict: Dictionary mapping sequence names to sequences
    """
    return dict(read_fasta_records(filename))


def read_fasta_pair(filename: str, scoring: Optional[ScoringScheme] = None) -> AlignmentJob:
    """Alignment job made of the first two records of a FASTA file"""
    sequences = [seq for _, seq in read_fasta_records(filename)]
    if len(sequences) < 2:
        raise AlignmentConfigError(
            f"{filename}: need two FASTA records, found {len(sequences)}"
        )
    return AlignmentJob(sequences[0], sequences[1],
                        scoring if scoring is not None else DEFAULT_SCORING)


def result_to_record(result: AlignmentResult, gap_char: str = "-") -> Dict[str, Any]:
    """Output record: aligned rows, evaluated score, row-major matrix"""
    aligned1, aligned2 = result.alignment.format(gap_char)
    return {
        "seq1": aligned1,
        "seq2": aligned2,
        "score": int(result.score),
        "matrix": result.matrix.tolist(),
    }


def write_result(result: AlignmentResult, filename: str, gap_char: str = "-"):
    """
    Write an alignment result to a JSON file

    Example:
        >>> write_result(align("GATTACA", "GCATGCU"), 'output.json')
    """
    record = result_to_record(result, gap_char)
    with open(filename, 'w', encoding="utf-8") as f:
        json.dump(record, f, separators=(",", ":"))
