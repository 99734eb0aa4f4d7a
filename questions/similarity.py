"""
Approximate string matching between question texts.

Uses the optimal string alignment variant of the Damerau-Levenshtein
distance: insertions, deletions, substitutions and transpositions of two
adjacent characters each cost one edit.
"""

from typing import List


def distance(a: str, b: str) -> int:
    """
    Compute the edit distance between two strings.

    Args:
        a: Existing question text
        b: Candidate text

    Returns:
        Number of single-character edits turning ``a`` into ``b``,
        0 only when the strings are identical.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    rows = len(a) + 1
    cols = len(b) + 1
    matrix: List[List[int]] = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1

            matrix[i][j] = min(
                matrix[i - 1][j] + 1,         # deletion
                matrix[i][j - 1] + 1,         # insertion
                matrix[i - 1][j - 1] + cost,  # substitution
            )

            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                matrix[i][j] = min(matrix[i][j], matrix[i - 2][j - 2] + cost)

    return matrix[-1][-1]
