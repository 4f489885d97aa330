"""
The line diff pipeline.

    split -> solve (Myers) -> reclassify -> group into blocks -> stats

Each stage takes the previous stage's output and builds a new structure.
Nothing is cached between calls of compute_diff().
"""
import logging
from collections.abc import Sequence

from linediff.config import DiffConfig
from linediff.errors import DiffTooLargeError
from linediff.lines import split_lines
from linediff.models import (
    ADDED,
    MODIFIED,
    REMOVED,
    UNCHANGED,
    DiffBlock,
    DiffResult,
    DiffStats,
    Edit,
    LineDiff,
)
from linediff.myersdiff import solve
from linediff.similarity import similarity


logger = logging.getLogger(__name__)


def reclassify(edits: Sequence[Edit], old_lines: Sequence[str], new_lines: Sequence[str],
               threshold: float = 0.5, max_line_length: int | None = None) -> list[Edit]:
    """
    Merges a 'removed' edit immediately followed by an 'added' edit into one
    'modified' edit when the two lines are similar enough.

    Greedy, left to right, one position of lookahead: a removal is only ever
    paired with the very next edit. If max_line_length is given, pairs with a
    longer line are left alone instead of being scored.
    """
    result: list[Edit] = []
    i = 0
    while i < len(edits):
        edit = edits[i]

        if edit.kind == REMOVED and i + 1 < len(edits) and edits[i + 1].kind == ADDED:
            next_edit = edits[i + 1]
            old_content = old_lines[edit.old_index]
            new_content = new_lines[next_edit.new_index]

            if max_line_length is not None and max(len(old_content), len(new_content)) > max_line_length:
                logger.debug(f"Not scoring old line {edit.old_index + 1} / new line {next_edit.new_index + 1}:"
                             f" longer than {max_line_length} characters")
            else:
                score = similarity(old_content, new_content)
                if score >= threshold:
                    result.append(Edit(MODIFIED, edit.old_index, next_edit.new_index, score))
                    i += 2
                    continue

        result.append(edit)
        i += 1

    return result


def _line_diff(edit: Edit, old_lines: Sequence[str], new_lines: Sequence[str]) -> LineDiff:
    if edit.new_index is not None:
        content = new_lines[edit.new_index]
    else:
        content = old_lines[edit.old_index]

    return LineDiff(
        kind=edit.kind,
        old_line_number=edit.old_index + 1 if edit.old_index is not None else None,
        new_line_number=edit.new_index + 1 if edit.new_index is not None else None,
        content=content,
        old_content=old_lines[edit.old_index] if edit.kind == MODIFIED else None,
        similarity=edit.similarity if edit.kind == MODIFIED else None,
    )


def group_blocks(edits: Sequence[Edit], old_lines: Sequence[str], new_lines: Sequence[str]) -> list[DiffBlock]:
    """
    Groups consecutive edits of the same kind into DiffBlocks.

    A block's start is fixed by its first edit (1-based), or 0 if that edit
    has no index on that side.
    """
    blocks: list[DiffBlock] = []

    kind = None
    old_start = old_count = new_start = new_count = 0
    lines: list[LineDiff] = []

    def flush():
        if kind is not None:
            blocks.append(DiffBlock(kind, old_start, old_count, new_start, new_count, tuple(lines)))

    for edit in edits:
        if edit.kind != kind:
            flush()
            kind = edit.kind
            old_start = edit.old_index + 1 if edit.old_index is not None else 0
            new_start = edit.new_index + 1 if edit.new_index is not None else 0
            old_count = new_count = 0
            lines = []

        if edit.old_index is not None:
            old_count += 1
        if edit.new_index is not None:
            new_count += 1
        lines.append(_line_diff(edit, old_lines, new_lines))

    flush()
    return blocks


def compute_stats(edits: Sequence[Edit], old_lines: Sequence[str], new_lines: Sequence[str]) -> DiffStats:
    counts = {ADDED: 0, REMOVED: 0, MODIFIED: 0, UNCHANGED: 0}
    for edit in edits:
        counts[edit.kind] += 1

    return DiffStats(
        added=counts[ADDED],
        removed=counts[REMOVED],
        modified=counts[MODIFIED],
        unchanged=counts[UNCHANGED],
        total_old=len(old_lines),
        total_new=len(new_lines),
    )


def overall_similarity(stats: DiffStats) -> float:
    """1 - changes / longest document. Two empty documents are identical."""
    max_lines = max(stats.total_old, stats.total_new)
    if max_lines == 0:
        return 1.0
    return max(0.0, 1.0 - stats.changes / max_lines)


def compute_diff(old_text: str, new_text: str, config: DiffConfig | None = None) -> DiffResult:
    """
    Compares two documents line by line.

    Raises DiffTooLargeError (a ValueError) before doing any work when the
    combined line count exceeds config.max_lines, and from the solver once
    the edit distance is known to exceed config.max_edit_distance. Nothing
    is returned partially built in either case.
    """
    if config is None:
        config = DiffConfig()

    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)

    total_lines = len(old_lines) + len(new_lines)
    if config.max_lines is not None and total_lines > config.max_lines:
        raise DiffTooLargeError(
            f"Documents have {total_lines} lines in total, more than the limit of {config.max_lines}.",
            'max_lines', total_lines, config.max_lines,
        )

    if not old_lines and not new_lines:
        return DiffResult(blocks=(), stats=DiffStats(), similarity=1.0)

    edits = solve(old_lines, new_lines, config.max_edit_distance)

    if old_lines and new_lines:
        edits = reclassify(edits, old_lines, new_lines,
                           threshold=config.similarity_threshold,
                           max_line_length=config.max_line_length)

    blocks = group_blocks(edits, old_lines, new_lines)
    stats = compute_stats(edits, old_lines, new_lines)

    if not old_lines or not new_lines:
        score = 0.0
    else:
        score = overall_similarity(stats)

    logger.debug(f"Compared {stats.total_old} -> {stats.total_new} lines: +{stats.added} -{stats.removed}"
                 f" ~{stats.modified} ={stats.unchanged}, similarity {score:.3f}")

    return DiffResult(blocks=tuple(blocks), stats=stats, similarity=score)
