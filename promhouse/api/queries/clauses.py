"""
WHERE clause accumulation.

Collects parameterized predicates and renders them as a single
AND-joined expression plus the positional argument list.
"""

from typing import Any, List, Tuple


class ClauseBuilder:
    """
    Accumulates SQL predicates with their positional arguments.

    Callers must pass exactly one argument per placeholder in the fragment;
    the count is not checked at runtime.
    """

    def __init__(self):
        self._clauses: List[Tuple[str, Tuple[Any, ...]]] = []

    def clause(self, fragment: str, *args: Any) -> None:
        """Append one predicate fragment and its arguments."""
        self._clauses.append((fragment, args))

    def where(self) -> str:
        """All fragments joined with AND, in append order."""
        return " AND ".join(fragment for fragment, _ in self._clauses)

    def args(self) -> List[Any]:
        """Flattened arguments in append order."""
        return [arg for _, args in self._clauses for arg in args]

    def __len__(self) -> int:
        return len(self._clauses)
