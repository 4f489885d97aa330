"""
Renderers for DiffResult: unified diff text, JSON, a statistics summary and
an annotated line-by-line listing.
"""
import json
from collections.abc import Iterator

from linediff.models import ADDED, MODIFIED, REMOVED, UNCHANGED, DiffBlock, DiffResult


Opcode = tuple[str, int, int, int, int]

_PREFIX = {ADDED: '+', REMOVED: '-', UNCHANGED: ' '}
_INLINE_MARKER = {ADDED: '+', REMOVED: '-', UNCHANGED: ' ', MODIFIED: '~'}


def _format_range_unified(start: int, stop: int) -> str:
    """Convert range to the "ed" format (same rules as difflib)."""
    beginning = start + 1
    length = stop - start
    if length == 1:
        return f"{beginning}"
    if not length:
        beginning -= 1  # empty ranges begin at line just before the range
    return f"{beginning},{length}"


def _document_lines(result: DiffResult) -> tuple[list[str], list[str]]:
    """Rebuilds the old and new documents from the line diffs."""
    old_lines: list[str] = []
    new_lines: list[str] = []
    for line in result.iter_lines():
        if line.old_line_number is not None:
            old_lines.append(line.old_content if line.kind == MODIFIED else line.content)
        if line.new_line_number is not None:
            new_lines.append(line.content)
    return old_lines, new_lines


def _opcodes(result: DiffResult) -> list[Opcode]:
    """
    difflib-style opcodes for the result. Consecutive blocks that are not
    'unchanged' collapse into one opcode.
    """
    opcodes: list[Opcode] = []
    i = j = 0
    change_i = change_j = 0

    def flush_change():
        if change_i < i and change_j < j:
            opcodes.append(('replace', change_i, i, change_j, j))
        elif change_i < i:
            opcodes.append(('delete', change_i, i, change_j, j))
        elif change_j < j:
            opcodes.append(('insert', change_i, i, change_j, j))

    for block in result.blocks:
        if block.kind == UNCHANGED:
            flush_change()
            opcodes.append(('equal', i, i + block.old_count, j, j + block.new_count))
            i += block.old_count
            j += block.new_count
            change_i, change_j = i, j
        else:
            i += block.old_count
            j += block.new_count
    flush_change()
    return opcodes


def _group_opcodes(opcodes: list[Opcode], context: int) -> Iterator[list[Opcode]]:
    """
    Splits opcodes into hunks with up to `context` lines of context.
    Logic adapted from difflib.SequenceMatcher.get_grouped_opcodes.
    """
    codes = list(opcodes)
    if not codes:
        return

    # Trim the leading and trailing equal blocks to the context size
    tag, i1, i2, j1, j2 = codes[0]
    if tag == 'equal':
        codes[0] = (tag, max(i1, i2 - context), i2, max(j1, j2 - context), j2)
    tag, i1, i2, j1, j2 = codes[-1]
    if tag == 'equal':
        codes[-1] = (tag, i1, min(i2, i1 + context), j1, min(j2, j1 + context))

    group: list[Opcode] = []
    for tag, i1, i2, j1, j2 in codes:
        if tag == 'equal' and i2 - i1 > 2 * context:
            # Large equal block: close the current hunk and start the next one
            group.append((tag, i1, min(i2, i1 + context), j1, min(j2, j1 + context)))
            yield group
            group = []
            i1 = max(i1, i2 - context)
            j1 = max(j1, j2 - context)
        group.append((tag, i1, i2, j1, j2))

    if group and not (len(group) == 1 and group[0][0] == 'equal'):
        yield group


def _block_hunk(block: DiffBlock, old_pos: int, new_pos: int) -> list[str]:
    range_a = _format_range_unified(old_pos, old_pos + block.old_count)
    range_b = _format_range_unified(new_pos, new_pos + block.new_count)
    lines = [f"@@ -{range_a} +{range_b} @@"]

    if block.kind == MODIFIED:
        lines.extend('-' + line.old_content for line in block.lines)
        lines.extend('+' + line.content for line in block.lines)
    else:
        prefix = _PREFIX[block.kind]
        lines.extend(prefix + line.content for line in block.lines)
    return lines


def generate_unified_diff(result: DiffResult, old_label: str = 'old', new_label: str = 'new',
                          context_lines: int | None = None) -> str:
    """
    Renders the result as a unified diff.

    With context_lines=None every changed block becomes its own hunk with no
    context around it. With an integer, hunks are built the conventional way:
    up to `context_lines` unchanged lines around each change, and changes
    closer than twice that distance share a hunk.
    Modified lines are written as a '-' line followed by a '+' line so the
    patch applies cleanly.
    """
    if context_lines is not None and context_lines < 0:
        raise ValueError(f"context_lines must not be negative, got {context_lines}")

    lines = [f"--- {old_label}", f"+++ {new_label}"]

    if context_lines is None:
        old_pos = new_pos = 0
        for block in result.blocks:
            if block.kind != UNCHANGED:
                lines.extend(_block_hunk(block, old_pos, new_pos))
            old_pos += block.old_count
            new_pos += block.new_count
        return '\n'.join(lines)

    old_lines, new_lines = _document_lines(result)
    for group in _group_opcodes(_opcodes(result), context_lines):
        first, last = group[0], group[-1]
        range_a = _format_range_unified(first[1], last[2])
        range_b = _format_range_unified(first[3], last[4])
        lines.append(f"@@ -{range_a} +{range_b} @@")

        for tag, i1, i2, j1, j2 in group:
            if tag == 'equal':
                lines.extend(' ' + line for line in old_lines[i1:i2])
                continue
            if tag in ('replace', 'delete'):
                lines.extend('-' + line for line in old_lines[i1:i2])
            if tag in ('replace', 'insert'):
                lines.extend('+' + line for line in new_lines[j1:j2])

    return '\n'.join(lines)


def export_diff_as_json(result: DiffResult, indent: int | None = 2) -> str:
    return json.dumps(result.to_dict(), indent=indent, ensure_ascii=False)


def diff_result_from_json(text: str) -> DiffResult:
    """Rebuilds a DiffResult from export_diff_as_json() output."""
    return DiffResult.from_dict(json.loads(text))


def format_summary(result: DiffResult) -> str:
    stats = result.stats
    if stats.total_old > 0:
        change_rate = stats.changes / stats.total_old * 100
    else:
        change_rate = 0.0

    return '\n'.join([
        f"Similarity:   {round(result.similarity * 100)}%",
        f"Old lines:    {stats.total_old}",
        f"New lines:    {stats.total_new}",
        f"Added:        {stats.added}",
        f"Removed:      {stats.removed}",
        f"Modified:     {stats.modified}",
        f"Unchanged:    {stats.unchanged}",
        f"Change rate:  {change_rate:.1f}%",
    ])


def format_inline(result: DiffResult) -> str:
    """
    One row per line: old number, new number, marker, content.
    Modified rows also show the old content and how similar the two are.
    """
    rows = []
    for line in result.iter_lines():
        old_no = '' if line.old_line_number is None else str(line.old_line_number)
        new_no = '' if line.new_line_number is None else str(line.new_line_number)
        row = f"{old_no:>5} {new_no:>5} {_INLINE_MARKER[line.kind]} {line.content}"
        if line.kind == MODIFIED:
            row += f"    [was: {line.old_content}] ({round(line.similarity * 100)}% similar)"
        rows.append(row)
    return '\n'.join(rows)
