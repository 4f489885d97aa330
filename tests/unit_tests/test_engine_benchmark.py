import time

import pytest

from linediff.engine import compute_diff
from linediff.formatters import generate_unified_diff


def create_large_content(num_lines=2000, modification_rate=100, insertion_rate=200):
    """
    Creates two versions of a document.
    Every `modification_rate`-th line is reworded and a new line is inserted
    every `insertion_rate` lines (offset so it never touches a reworded line).
    """
    lines_a = [f"This is line number {i} with some static content." for i in range(num_lines)]
    lines_b = []
    for i, line in enumerate(lines_a):
        if i % insertion_rate == modification_rate // 2:
            lines_b.append(f"Inserted line at {i}")
        if i % modification_rate == 0:
            lines_b.append(f"This is line number {i} MODIFIED content.")
        else:
            lines_b.append(line)
    return "\n".join(lines_a), "\n".join(lines_b)


@pytest.mark.benchmark
def test_benchmark_and_correctness():
    print("\n\n=== linediff compute_diff Benchmark ===")
    content_a, content_b = create_large_content()

    start_time = time.perf_counter()
    result = compute_diff(content_a, content_b)
    elapsed = time.perf_counter() - start_time
    print(f"compute_diff time: {elapsed:.4f}s")

    stats = result.stats
    assert stats.total_old == 2000
    assert stats.total_new == 2010
    assert stats.modified == 20
    assert stats.added == 10
    assert stats.removed == 0
    assert stats.unchanged == 1980
    assert result.similarity == pytest.approx(1 - 30 / 2010)

    patch = generate_unified_diff(result, "a", "b", context_lines=3)
    assert patch.count("\n@@ ") == 30
