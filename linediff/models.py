"""
Data structures produced by the diff engine.

Edit is the internal, index-based record flowing between the engine stages.
LineDiff, DiffBlock, DiffStats and DiffResult are the externally visible
projection. All of them are immutable.
"""
from collections.abc import Iterator
from dataclasses import dataclass
from typing import NamedTuple


ADDED = 'added'
REMOVED = 'removed'
UNCHANGED = 'unchanged'
MODIFIED = 'modified'

KINDS = (ADDED, REMOVED, UNCHANGED, MODIFIED)


class Edit(NamedTuple):
    """
    A single line-level edit.

    old_index / new_index are zero-based positions into the old / new document.
    'added' has no old_index, 'removed' has no new_index, 'unchanged' and
    'modified' carry both. similarity is only set for 'modified'.
    """
    kind: str
    old_index: int | None = None
    new_index: int | None = None
    similarity: float | None = None


@dataclass(frozen=True)
class LineDiff:
    kind: str
    old_line_number: int | None
    new_line_number: int | None
    content: str
    old_content: str | None = None
    similarity: float | None = None

    def to_dict(self) -> dict:
        data = {
            'type': self.kind,
            'oldLineNumber': self.old_line_number,
            'newLineNumber': self.new_line_number,
            'content': self.content,
        }
        if self.old_content is not None:
            data['oldContent'] = self.old_content
        if self.similarity is not None:
            data['similarity'] = self.similarity
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'LineDiff':
        return cls(
            kind=data['type'],
            old_line_number=data.get('oldLineNumber'),
            new_line_number=data.get('newLineNumber'),
            content=data['content'],
            old_content=data.get('oldContent'),
            similarity=data.get('similarity'),
        )


@dataclass(frozen=True)
class DiffBlock:
    """
    A maximal run of LineDiffs of one kind.

    old_start / new_start are 1-based; a start of 0 means the block does not
    touch that side at all (pure 'added' or 'removed' blocks).
    """
    kind: str
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: tuple[LineDiff, ...]

    def to_dict(self) -> dict:
        return {
            'type': self.kind,
            'oldStart': self.old_start,
            'oldCount': self.old_count,
            'newStart': self.new_start,
            'newCount': self.new_count,
            'lines': [line.to_dict() for line in self.lines],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DiffBlock':
        return cls(
            kind=data['type'],
            old_start=data['oldStart'],
            old_count=data['oldCount'],
            new_start=data['newStart'],
            new_count=data['newCount'],
            lines=tuple(LineDiff.from_dict(line) for line in data['lines']),
        )


@dataclass(frozen=True)
class DiffStats:
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0
    total_old: int = 0
    total_new: int = 0

    @property
    def changes(self) -> int:
        return self.added + self.removed + self.modified

    def to_dict(self) -> dict:
        return {
            'added': self.added,
            'removed': self.removed,
            'modified': self.modified,
            'unchanged': self.unchanged,
            'totalOld': self.total_old,
            'totalNew': self.total_new,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DiffStats':
        return cls(
            added=data['added'],
            removed=data['removed'],
            modified=data['modified'],
            unchanged=data['unchanged'],
            total_old=data['totalOld'],
            total_new=data['totalNew'],
        )


@dataclass(frozen=True)
class DiffResult:
    blocks: tuple[DiffBlock, ...]
    stats: DiffStats
    similarity: float

    @property
    def has_changes(self) -> bool:
        return self.stats.changes > 0

    def iter_lines(self) -> Iterator[LineDiff]:
        """Yields every LineDiff of every block in document order."""
        for block in self.blocks:
            yield from block.lines

    def to_dict(self) -> dict:
        return {
            'blocks': [block.to_dict() for block in self.blocks],
            'stats': self.stats.to_dict(),
            'similarity': self.similarity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DiffResult':
        return cls(
            blocks=tuple(DiffBlock.from_dict(block) for block in data['blocks']),
            stats=DiffStats.from_dict(data['stats']),
            similarity=data['similarity'],
        )
