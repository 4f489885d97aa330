"""
Configuration for linediff.

A DiffConfig is passed into compute_diff() and the CLI so behavior can be
adjusted without global state. Defaults can be overridden through
LINEDIFF_* environment variables with DiffConfig.from_env().
"""
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields


DEFAULT_SIMILARITY_THRESHOLD = 0.5
DEFAULT_MAX_LINES = 100_000
# A fully rewritten 1000-line document (d = 2000) takes about 0.5s and 180MB.
DEFAULT_MAX_EDIT_DISTANCE = 2_000
# Scoring two 1000-character lines takes about 0.13s.
DEFAULT_MAX_LINE_LENGTH = 1_000
DEFAULT_CONTEXT_LINES = 3

ENV_PREFIX = 'LINEDIFF_'

LIMIT_FIELDS = ('max_lines', 'max_edit_distance', 'max_line_length')


@dataclass(frozen=True)
class DiffConfig:
    """
    similarity_threshold: a removed/added pair at or above this similarity
        becomes one 'modified' line.
    max_lines: ceiling on the combined line count of both documents.
    max_edit_distance: ceiling on the number of removed + added lines the
        solver searches for. It bounds the solver's time and memory, which
        grow with the square of the edit distance.
    max_line_length: longest line scored with Levenshtein. Longer lines are
        never paired into 'modified'.
    context_lines: context lines for unified output on the command line.

    Inputs past max_lines or max_edit_distance are rejected with
    DiffTooLargeError. None disables a limit.
    """
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    max_lines: int | None = DEFAULT_MAX_LINES
    max_edit_distance: int | None = DEFAULT_MAX_EDIT_DISTANCE
    max_line_length: int | None = DEFAULT_MAX_LINE_LENGTH
    context_lines: int = DEFAULT_CONTEXT_LINES

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(f"similarity_threshold must be within [0, 1], got {self.similarity_threshold}")
        for name in LIMIT_FIELDS:
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.context_lines < 0:
            raise ValueError(f"context_lines must not be negative, got {self.context_lines}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> 'DiffConfig':
        """
        Builds a config from LINEDIFF_SIMILARITY_THRESHOLD, LINEDIFF_MAX_LINES,
        LINEDIFF_MAX_EDIT_DISTANCE, LINEDIFF_MAX_LINE_LENGTH and
        LINEDIFF_CONTEXT_LINES. A limit set to 'none' or '0' disables it.
        Keyword overrides win over the environment (None overrides are
        ignored; pass a limit through parse_limit() to disable it).
        """
        if environ is None:
            environ = os.environ

        values = {}
        for field in fields(cls):
            name = ENV_PREFIX + field.name.upper()
            raw = environ.get(name)
            if raw is None or raw.strip() == '':
                continue
            values[field.name] = _parse_value(name, field.name, raw.strip())

        values.update({key: value for key, value in overrides.items() if value is not None})
        for name in LIMIT_FIELDS:
            if values.get(name) == 0:
                values[name] = None
        return cls(**values)


def parse_limit(raw: str) -> int:
    """
    Parses a limit setting. 'none' and '0' both mean "no limit" and come
    back as 0, which DiffConfig.from_env() turns into None.
    """
    raw = raw.strip()
    if raw.lower() == 'none':
        return 0
    value = int(raw)
    if value < 0:
        raise ValueError(f"limit must not be negative, got {value}")
    return value


def _parse_value(env_name: str, field_name: str, raw: str) -> float | int:
    try:
        if field_name == 'similarity_threshold':
            return float(raw)
        if field_name in LIMIT_FIELDS:
            return parse_limit(raw)
        return int(raw)
    except ValueError as e:
        raise ValueError(f"Invalid value for {env_name}: {raw!r}") from e
