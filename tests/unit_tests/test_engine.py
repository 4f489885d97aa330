import dataclasses
import random

import pytest

from linediff.config import DiffConfig
from linediff.engine import (
    DiffTooLargeError,
    compute_diff,
    compute_stats,
    group_blocks,
    overall_similarity,
    reclassify,
)
from linediff.errors import EditDistanceExceededError
from linediff.models import ADDED, MODIFIED, REMOVED, UNCHANGED, DiffStats, Edit


def random_document(rng, max_lines=8):
    words = ["alpha", "beta", "gamma", "delta", "alpha!", ""]
    return "\n".join(rng.choice(words) for _ in range(rng.randint(0, max_lines)))


# --- compute_diff scenarios ---

def test_identical_documents():
    text = "first\nsecond\nthird"
    result = compute_diff(text, text)

    assert len(result.blocks) == 1
    block = result.blocks[0]
    assert block.kind == UNCHANGED
    assert (block.old_start, block.old_count, block.new_start, block.new_count) == (1, 3, 1, 3)
    assert result.similarity == 1.0
    assert result.stats == DiffStats(unchanged=3, total_old=3, total_new=3)
    assert not result.has_changes


def test_both_empty():
    result = compute_diff("", "")
    assert result.blocks == ()
    assert result.similarity == 1.0
    assert result.stats == DiffStats()


def test_pure_addition():
    result = compute_diff("", "a\nb")

    assert len(result.blocks) == 1
    block = result.blocks[0]
    assert block.kind == ADDED
    assert (block.old_start, block.old_count, block.new_start, block.new_count) == (0, 0, 1, 2)
    assert [line.content for line in block.lines] == ["a", "b"]
    assert [line.old_line_number for line in block.lines] == [None, None]
    assert result.stats.added == 2
    assert result.stats.total_old == 0
    assert result.similarity == 0.0


def test_pure_removal():
    result = compute_diff("a\nb", "")

    assert len(result.blocks) == 1
    block = result.blocks[0]
    assert block.kind == REMOVED
    assert (block.old_start, block.old_count, block.new_start, block.new_count) == (1, 2, 0, 0)
    assert result.stats.removed == 2
    assert result.similarity == 0.0


def test_modified_line_between_unchanged():
    result = compute_diff("line1\nline2\nline3", "line1\nlineTWO\nline3")

    assert [block.kind for block in result.blocks] == [UNCHANGED, MODIFIED, UNCHANGED]
    assert result.stats == DiffStats(added=0, removed=0, modified=1, unchanged=2, total_old=3, total_new=3)

    first, modified, last = result.blocks
    assert first.lines[0].content == "line1"
    assert last.lines[0].content == "line3"

    line = modified.lines[0]
    assert line.content == "lineTWO"
    assert line.old_content == "line2"
    assert (line.old_line_number, line.new_line_number) == (2, 2)
    assert line.similarity == pytest.approx(4 / 7)
    assert (modified.old_start, modified.old_count, modified.new_start, modified.new_count) == (2, 1, 2, 1)

    assert result.similarity == pytest.approx(2 / 3)


def test_similar_pair_becomes_modified():
    result = compute_diff("foo", "fog")
    assert result.stats.modified == 1
    assert result.stats.added == result.stats.removed == 0
    assert result.blocks[0].lines[0].similarity == pytest.approx(2 / 3)


def test_dissimilar_pair_stays_separate():
    result = compute_diff("foo", "xyz")
    assert [block.kind for block in result.blocks] == [REMOVED, ADDED]
    assert result.stats.removed == 1
    assert result.stats.added == 1
    assert result.stats.modified == 0
    # Two changes for one line: the score bottoms out at 0
    assert result.similarity == 0.0


def test_trailing_newline_is_a_line():
    result = compute_diff("a\n", "a")
    assert result.stats.total_old == 2
    assert result.stats.total_new == 1
    assert result.stats.removed == 1
    assert result.blocks[-1].lines[0].content == ""


def test_config_threshold_and_line_length():
    strict = compute_diff("foo", "fog", DiffConfig(similarity_threshold=0.7))
    assert strict.stats.modified == 0
    assert strict.stats.removed == 1

    short = compute_diff("foo", "fog", DiffConfig(max_line_length=2))
    assert short.stats.modified == 0


def test_size_ceiling():
    with pytest.raises(DiffTooLargeError) as excinfo:
        compute_diff("a\nb", "c\nd", DiffConfig(max_lines=3))
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.limit_name == 'max_lines'
    assert excinfo.value.size == 4
    assert excinfo.value.limit == 3

    # Exactly at the ceiling is fine, and None disables it
    assert compute_diff("a\nb", "c", DiffConfig(max_lines=3)).stats.total_old == 2
    assert compute_diff("a\nb", "c\nd", DiffConfig(max_lines=None)).stats.total_new == 2


def test_rewritten_document_exceeds_edit_distance():
    old = "\n".join(f"old line {i}" for i in range(60))
    new = "\n".join(f"new line {i}" for i in range(60))
    with pytest.raises(DiffTooLargeError) as excinfo:
        compute_diff(old, new, DiffConfig(max_edit_distance=50))
    assert isinstance(excinfo.value, EditDistanceExceededError)
    assert excinfo.value.limit_name == 'max_edit_distance'
    assert excinfo.value.limit == 50

    result = compute_diff(old, new, DiffConfig(max_edit_distance=None))
    assert result.stats.unchanged == 0
    assert result.stats.total_old == 60


def test_default_config_rejects_rewritten_document():
    # Far below max_lines, but every line differs
    old = "\n".join(f"before {i}" for i in range(1001))
    new = "\n".join(f"after {i}" for i in range(1001))
    config = DiffConfig()
    assert 2002 < config.max_lines
    with pytest.raises(EditDistanceExceededError) as excinfo:
        compute_diff(old, new, config)
    assert excinfo.value.limit == config.max_edit_distance


def test_default_line_length_cap():
    limit = DiffConfig().max_line_length
    at_limit = compute_diff("a" * limit, "a" * (limit - 1) + "b")
    assert at_limit.stats.modified == 1

    over_limit = compute_diff("a" * (limit + 1), "a" * limit + "b")
    assert over_limit.stats.modified == 0
    assert over_limit.stats.removed == 1
    assert over_limit.stats.added == 1


def test_result_is_immutable():
    result = compute_diff("a", "b")
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.similarity = 0.5
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.blocks[0].lines[0].content = "x"


# --- Invariants over random documents ---

def test_line_numbers_cover_both_documents():
    rng = random.Random(42)
    for _ in range(200):
        old_text = random_document(rng)
        new_text = random_document(rng)
        result = compute_diff(old_text, new_text)

        lines = list(result.iter_lines())
        old_numbers = [line.old_line_number for line in lines if line.old_line_number is not None]
        new_numbers = [line.new_line_number for line in lines if line.new_line_number is not None]
        assert old_numbers == list(range(1, result.stats.total_old + 1))
        assert new_numbers == list(range(1, result.stats.total_new + 1))

        stats = result.stats
        assert stats.added + stats.removed + stats.modified + stats.unchanged == len(lines)
        assert 0.0 <= result.similarity <= 1.0

        for prev, block in zip(result.blocks, result.blocks[1:]):
            assert prev.kind != block.kind
        for block in result.blocks:
            assert all(line.kind == block.kind for line in block.lines)
            assert block.old_count == sum(1 for line in block.lines if line.old_line_number is not None)
            assert block.new_count == sum(1 for line in block.lines if line.new_line_number is not None)


# --- Individual stages ---

def test_reclassify_pairs_with_first_addition():
    old_lines = ["foo"]
    new_lines = ["fog", "foo!"]
    edits = [Edit(REMOVED, old_index=0), Edit(ADDED, new_index=0), Edit(ADDED, new_index=1)]

    result = reclassify(edits, old_lines, new_lines)
    assert result == [Edit(MODIFIED, 0, 0, pytest.approx(2 / 3)), Edit(ADDED, new_index=1)]


def test_reclassify_only_looks_one_ahead():
    old_lines = ["zzz", "foo"]
    new_lines = ["fog"]
    # The first removal is not followed by an addition; the second one is.
    edits = [Edit(REMOVED, old_index=0), Edit(REMOVED, old_index=1), Edit(ADDED, new_index=0)]
    result = reclassify(edits, old_lines, new_lines)
    assert [e.kind for e in result] == [REMOVED, MODIFIED]

    # Added before removed is never paired
    edits = [Edit(ADDED, new_index=0), Edit(REMOVED, old_index=1)]
    assert reclassify(edits, old_lines, new_lines) == edits


def test_reclassify_threshold_is_inclusive():
    edits = [Edit(REMOVED, old_index=0), Edit(ADDED, new_index=0)]
    # "ab" -> "ac": similarity exactly 0.5
    result = reclassify(edits, ["ab"], ["ac"], threshold=0.5)
    assert result == [Edit(MODIFIED, 0, 0, 0.5)]


def test_group_blocks_start_and_counts():
    old_lines = ["a", "b", "c"]
    new_lines = ["a", "x", "y", "c"]
    edits = [
        Edit(UNCHANGED, 0, 0),
        Edit(REMOVED, old_index=1),
        Edit(ADDED, new_index=1),
        Edit(ADDED, new_index=2),
        Edit(UNCHANGED, 2, 3),
    ]
    blocks = group_blocks(edits, old_lines, new_lines)

    assert [(b.kind, b.old_start, b.old_count, b.new_start, b.new_count) for b in blocks] == [
        (UNCHANGED, 1, 1, 1, 1),
        (REMOVED, 2, 1, 0, 0),
        (ADDED, 0, 0, 2, 2),
        (UNCHANGED, 3, 1, 4, 1),
    ]
    assert [line.content for line in blocks[2].lines] == ["x", "y"]
    assert blocks[1].lines[0].content == "b"
    assert blocks[1].lines[0].old_content is None


def test_stats_and_similarity():
    edits = [Edit(UNCHANGED, 0, 0), Edit(MODIFIED, 1, 1, 0.8), Edit(ADDED, new_index=2)]
    stats = compute_stats(edits, ["a", "b"], ["a", "c", "d"])
    assert stats == DiffStats(added=1, removed=0, modified=1, unchanged=1, total_old=2, total_new=3)
    assert stats.changes == 2
    assert overall_similarity(stats) == pytest.approx(1 / 3)
    assert overall_similarity(DiffStats()) == 1.0
