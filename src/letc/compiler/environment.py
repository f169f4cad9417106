"""
Binding Environment
===================

Maps let-bound names to stack slots for one compilation.

Slots are handed out from a counter starting at 1 and never reused.
Rebinding a name points it at a fresh slot; the old slot stays
allocated but nothing can reach it any more:

    let x = 1; let y = 2; let x = 3; x
        x -> 1, y -> 2, x -> 3   (the final x reads slot 3)
"""

from typing import Optional

from letc.errors import SourceLocation
from letc.compiler.errors import UnboundIdentifierError


class Environment:
    """
    Name to stack-slot mapping that only grows.

    Attributes:
        next_slot: Slot number the next reserve() will return
    """

    def __init__(self) -> None:
        self.next_slot = 1
        self._bindings: dict[str, int] = {}

    def reserve(self) -> int:
        """Allocate the next slot without binding a name to it."""
        slot = self.next_slot
        self.next_slot += 1
        return slot

    def bind(self, name: str, slot: int) -> None:
        """Point name at slot, replacing any earlier mapping."""
        self._bindings[name] = slot

    def add(self, name: str) -> int:
        """Allocate a new slot for name and return it."""
        slot = self.reserve()
        self.bind(name, slot)
        return slot

    def lookup(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Return the slot currently bound to name.

        Raises:
            UnboundIdentifierError: If name has no binding
        """
        if name in self._bindings:
            return self._bindings[name]

        raise UnboundIdentifierError(
            name,
            location=location,
            source_line=source_line,
            similar_names=self._find_similar_names(name),
        )

    @property
    def bindings(self) -> dict[str, int]:
        """Copy of the current name -> slot mapping."""
        return dict(self._bindings)

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        """Number of slots allocated so far, bound or not."""
        return self.next_slot - 1

    def __repr__(self) -> str:
        return f"Environment(next_slot={self.next_slot}, bindings={self._bindings!r})"

    def _find_similar_names(self, name: str) -> list[str]:
        """Bound names within a small edit distance, for error hints."""
        name_lower = name.lower()
        similar = []

        for bound in sorted(self._bindings):
            bound_lower = bound.lower()
            if (
                bound_lower == name_lower or
                abs(len(bound) - len(name)) <= 1 and
                _edit_distance(name_lower, bound_lower) <= 2
            ):
                similar.append(bound)

        return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    if not s2:
        return len(s1)

    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous[j + 1] + 1
            deletions = current[j] + 1
            substitutions = previous[j] + (c1 != c2)
            current.append(min(insertions, deletions, substitutions))
        previous = current

    return previous[-1]
