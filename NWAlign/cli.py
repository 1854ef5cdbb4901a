"""
Command line entry point: align the two sequences of a JSON (or FASTA) job
"""
import argparse
import dataclasses
import json
import os
import sys

from matplotlib.backend_bases import FigureCanvasBase

from NWAlign.seq_alignment.pairwise import align
from NWAlign.seq_alignment.records import (
    AlignmentConfigError,
    read_fasta_pair,
    read_job,
    result_to_record,
    write_result,
)


def _gap_char(value: str) -> str:
    if len(value) != 1:
        raise argparse.ArgumentTypeError(f"gap character must be a single character, got {value!r}")
    return value


def _plot_file(value: str) -> str:
    extension = os.path.splitext(value)[1][1:].lower()
    supported = FigureCanvasBase.get_supported_filetypes()
    if extension and extension not in supported:
        raise argparse.ArgumentTypeError(
            f"unsupported plot format {extension!r}, expected one of: {', '.join(sorted(supported))}"
        )
    return value


root_parser = argparse.ArgumentParser(
    prog="nwalign",
    description="Global alignment of two sequences (Needleman-Wunsch)."
)

root_parser.add_argument(
    "input",
    help="JSON file with seq1, seq2 and an optional scoring_schema (or FASTA with --fasta)."
)

root_parser.add_argument(
    "out",
    help="The output JSON file with the aligned sequences, score and matrix."
)

root_parser.add_argument(
    "--fasta", "-fa",
    action="store_true",
    dest="fasta",
    required=False,
    default=False,
    help="Read the first two records of a FASTA file instead of a JSON job."
)

for field_name in ("match", "mismatch", "gap"):
    root_parser.add_argument(
        f"--{field_name}",
        dest=field_name,
        required=False,
        default=None,
        type=int,
        help=f"Override the {field_name} score of the scoring schema."
    )

root_parser.add_argument(
    "--gap-char",
    dest="gap_char",
    required=False,
    default="-",
    type=_gap_char,
    help="Character used to draw gaps in the output (default '-')."
)

root_parser.add_argument(
    "--plot",
    dest="plot",
    required=False,
    default=None,
    type=_plot_file,
    help="Save a heatmap of the score matrix to this image file."
)

root_parser.add_argument(
    "--verbose", "-v",
    action="store_true",
    dest="verbose",
    required=False,
    default=False,
    help="Show alignment progress."
)


def _load_job(args):
    job = read_fasta_pair(args.input) if args.fasta else read_job(args.input)
    overrides = {name: getattr(args, name) for name in ("match", "mismatch", "gap")
                 if getattr(args, name) is not None}
    if overrides:
        job = dataclasses.replace(job, scoring=dataclasses.replace(job.scoring, **overrides))
    return job


def _save_plot(result, filename):
    # pyplot pulled in only when a plot is requested
    import matplotlib.pyplot as plt
    from NWAlign.seq_alignment.matrix_plot import plot_score_matrix

    fig = plot_score_matrix(result)
    try:
        fig.savefig(filename)
    finally:
        plt.close(fig)


def run(argv=None) -> int:
    args = root_parser.parse_args(argv)
    try:
        print("Reading files...")
        job = _load_job(args)

        print("Input:: ")
        print(json.dumps(job.to_record(), indent=2))
        print()

        result = align(job.seq1, job.seq2, job.scoring, verbose=args.verbose)
        result.view(args.gap_char)
        print()

        print("Output:: ")
        print(json.dumps(result_to_record(result, args.gap_char), indent=2))
        print()

        write_result(result, args.out, args.gap_char)
        if args.plot is not None:
            _save_plot(result, args.plot)
    except AlignmentConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
