"""
Score matrix plotting (heatmap with traceback path)
"""
import matplotlib.pyplot as plt
from typing import Optional, Tuple

from .pairwise import AlignmentResult

# cell annotation is unreadable past this many cells
_ANNOTATE_LIMIT = 400


def plot_score_matrix(
    result: AlignmentResult,
    figsize: Tuple[int, int] = (8, 6),
    annotate: Optional[bool] = None,
    show_path: bool = True,
    cmap: str = "viridis",
    font_size: int = 10,
    title: Optional[str] = None,
) -> plt.Figure:
    """
    Draw the score matrix as a heatmap.
    - Rows labelled with seq1 symbols, columns with seq2 symbols.
    - Optional cell values and traceback path overlay.
    """
    matrix = result.matrix
    rows, cols = matrix.shape
    seq1, seq2 = result.alignment.ungapped()

    fig, ax = plt.subplots(figsize=figsize)
    image = ax.imshow(matrix.astype(float), cmap=cmap, aspect="auto", interpolation="nearest")
    fig.colorbar(image, ax=ax, label="score")

    ax.set_xticks(range(cols))
    ax.set_xticklabels([""] + [str(s) for s in seq2], fontsize=font_size)
    ax.set_yticks(range(rows))
    ax.set_yticklabels([""] + [str(s) for s in seq1], fontsize=font_size)
    ax.xaxis.tick_top()

    if annotate is None:
        annotate = rows * cols <= _ANNOTATE_LIMIT
    if annotate:
        midpoint = (matrix.max() + matrix.min()) / 2
        for i in range(rows):
            for j in range(cols):
                value = matrix[i, j]
                ax.text(j, i, str(value), ha="center", va="center",
                        fontsize=font_size - 2,
                        color="black" if value > midpoint else "white")

    if show_path:
        path = result.alignment.path()
        ax.plot([j for _, j in path], [i for i, _ in path], "r-", lw=2, marker="o", ms=4)

    if title:
        ax.set_title(title, fontsize=font_size + 2, fontweight="bold")

    plt.tight_layout()
    return fig
