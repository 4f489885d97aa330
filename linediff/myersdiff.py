# This is free and unencumbered software released into the public domain.
#
# Anyone is free to copy, modify, publish, use, compile, sell, or
# distribute this software, either in source code form or as a compiled
# binary, for any purpose, commercial or non-commercial, and by any
# means.
#
# In jurisdictions that recognize copyright laws, the author or authors
# of this software dedicate any and all copyright interest in the
# software to the public domain. We make this dedication for the benefit
# of the public at large and to the detriment of our heirs and
# successors. We intend this dedication to be an overt act of
# relinquishment in perpetuity of all present and future rights to this
# software under copyright law.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
# IN NO EVENT SHALL THE AUTHORS BE LIABLE FOR ANY CLAIM, DAMAGES OR
# OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE,
# ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR
# OTHER DEALINGS IN THE SOFTWARE.
#
# For more information, please refer to <http://unlicense.org/>
#
# This implementation is based on the Myers diff algorithm.
# It keeps the reached-x vector of every depth (trace history) and
# backtracks through it to rebuild the edit script.

import logging
from collections.abc import Sequence

from linediff.errors import EditDistanceExceededError
from linediff.lines import hash_lines
from linediff.models import ADDED, REMOVED, UNCHANGED, Edit


logger = logging.getLogger(__name__)


class MyersSequenceMatcher:
    """
    An implementation of the Myers diff algorithm over lines of text.

    See http://www.xmailserver.org/diff2.pdf

    Lines are compared through their hashes first and then for real, so a
    hash collision never turns two different lines into a match.
    The result is a shortest edit script made of 'unchanged', 'removed'
    and 'added' edits.

    The trace keeps O(d) entries per depth, so memory grows with the square
    of the edit distance. `max_edit_distance` bounds the search: once the
    script is known to need more edits, EditDistanceExceededError is raised.
    """

    def __init__(self, a: Sequence[str], b: Sequence[str], max_edit_distance: int | None = None) -> None:
        self.a = a
        self.b = b
        self.max_edit_distance = max_edit_distance

    def get_edits(self) -> list[Edit]:
        """Returns the shortest edit script turning a into b."""
        a = self.a
        b = self.b
        n = len(a)
        m = len(b)

        # Both shortcuts cost O(n + m) and are never bounded.
        if n == 0 and m == 0:
            return []
        if n == 0:
            return [Edit(ADDED, new_index=j) for j in range(m)]
        if m == 0:
            return [Edit(REMOVED, old_index=i) for i in range(n)]

        max_d = n + m
        limit = self.max_edit_distance
        if limit is not None:
            # Every script needs at least |n - m| edits
            if abs(n - m) > limit:
                raise EditDistanceExceededError(abs(n - m), limit)
            max_d = min(max_d, limit)

        a_hashes = hash_lines(a)
        b_hashes = hash_lines(b)

        def same(x: int, y: int) -> bool:
            return a_hashes[x] == b_hashes[y] and a[x] == b[y]

        # v maps diagonal k (= x - y) to the furthest x reached on it.
        v = {1: 0}
        trace: list[dict[int, int]] = []

        for d in range(max_d + 1):
            # Depth d only reads the diagonals of the other parity,
            # -(d-1)..(d-1), so that is all the trace needs to keep.
            if d == 0:
                trace.append(dict(v))
            else:
                trace.append({k: v[k] for k in range(-d + 1, d, 2)})

            for k in range(-d, d + 1, 2):
                # k-1 comes from delete (horizontal)
                # k+1 comes from insert (vertical)
                if k == -d or (k != d and v[k - 1] < v[k + 1]):
                    x = v[k + 1]
                else:
                    x = v[k - 1] + 1
                y = x - k

                # Snake: follow matching lines along the diagonal
                while x < n and y < m and same(x, y):
                    x += 1
                    y += 1

                v[k] = x

                if x >= n and y >= m:
                    logger.debug(f"Shortest edit script found: d={d}, n={n}, m={m}")
                    return self._backtrack(trace, n, m)

        if limit is not None:
            raise EditDistanceExceededError(max_d + 1, limit)
        # d == n + m always reaches the corner
        raise RuntimeError("Myers search did not reach the end of both sequences")

    @staticmethod
    def _backtrack(trace: list[dict[int, int]], n: int, m: int) -> list[Edit]:
        """
        Walks the trace from the final depth back to 0.
        Each depth contributes the diagonal run it ended on and the single
        removal or insertion that led into it. The segments are collected
        in reverse and flipped at the end.
        """
        edits: list[Edit] = []
        x, y = n, m

        for d in range(len(trace) - 1, -1, -1):
            v = trace[d]
            k = x - y

            if k == -d or (k != d and v[k - 1] < v[k + 1]):
                prev_k = k + 1
            else:
                prev_k = k - 1

            prev_x = v[prev_k]
            prev_y = prev_x - prev_k

            while x > prev_x and y > prev_y:
                x -= 1
                y -= 1
                edits.append(Edit(UNCHANGED, old_index=x, new_index=y))

            if d > 0:
                if prev_k == k - 1:
                    edits.append(Edit(REMOVED, old_index=prev_x))
                else:
                    edits.append(Edit(ADDED, new_index=prev_y))

            x, y = prev_x, prev_y

        edits.reverse()
        return edits


def solve(old_lines: Sequence[str], new_lines: Sequence[str], max_edit_distance: int | None = None) -> list[Edit]:
    """Shortest edit script (unchanged / removed / added) from old_lines to new_lines."""
    return MyersSequenceMatcher(old_lines, new_lines, max_edit_distance).get_edits()
