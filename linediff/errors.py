"""
Errors raised by linediff.

Everything else in the engine is total over its input; the only failure is
an input that is too big for the configured limits.
"""


class DiffTooLargeError(ValueError):
    """
    Raised when the documents exceed one of the configured limits.

    `limit_name` is the DiffConfig field that was exceeded, `size` the value
    that went past it and `limit` the configured bound.
    """

    def __init__(self, message: str, limit_name: str, size: int, limit: int) -> None:
        super().__init__(message)
        self.limit_name = limit_name
        self.size = size
        self.limit = limit


class EditDistanceExceededError(DiffTooLargeError):
    """Raised by the solver when the edit distance goes past its budget."""

    def __init__(self, distance: int, limit: int) -> None:
        super().__init__(f"Documents differ by more than {limit} line edits (at least {distance}).",
                         'max_edit_distance', distance, limit)
