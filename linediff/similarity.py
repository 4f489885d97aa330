def levenshtein_distance(a: str, b: str) -> int:
    """
    Classic Levenshtein distance (insert, delete, substitute all cost 1).

    Uses the full (len(b)+1) x (len(a)+1) table. Only meant for single lines.
    """
    matrix = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]

    for i in range(len(b) + 1):
        matrix[i][0] = i
    for j in range(len(a) + 1):
        matrix[0][j] = j

    for i in range(1, len(b) + 1):
        row = matrix[i]
        prev_row = matrix[i - 1]
        cb = b[i - 1]
        for j in range(1, len(a) + 1):
            if cb == a[j - 1]:
                row[j] = prev_row[j - 1]
            else:
                row[j] = min(prev_row[j - 1], row[j - 1], prev_row[j]) + 1

    return matrix[len(b)][len(a)]


def similarity(a: str, b: str) -> float:
    """
    Normalized similarity between two strings, 0.0 (different) to 1.0 (identical).
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - levenshtein_distance(a, b) / max(len(a), len(b))
