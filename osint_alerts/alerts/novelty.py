"""Per-source novelty tracking.

A ``NoveltyTracker`` remembers which identities a source has already
produced so that only genuinely new items reach the triggers. The first
snapshot a tracker sees only seeds it: there is no "before" to compare
against, so nothing in it counts as new.
"""

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class NoveltyDiff(Generic[T]):
    """Result of diffing one snapshot against the seen-set.

    Attributes:
        items: Seeded items on cold start, otherwise the new items.
        cold_start: True if this snapshot only seeded the tracker.
    """

    items: list[T] = field(default_factory=list)
    cold_start: bool = False

    @property
    def new_items(self) -> list[T]:
        """Items that should be analysed (never the seeding batch)."""
        return [] if self.cold_start else self.items

    def __bool__(self) -> bool:
        return bool(self.new_items)


class NoveltyTracker(Generic[T]):
    """Diff full snapshots of one source against previously seen identities.

    Args:
        source: Source name, for logging and inspection.
        identity: Extracts the stable identity of an item.
    """

    def __init__(self, source: str, identity: Callable[[T], Hashable]) -> None:
        self.source = source
        self._identity = identity
        self._seen: set[Hashable] = set()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def seen_count(self) -> int:
        return len(self._seen)

    def has_seen(self, key: Hashable) -> bool:
        return key in self._seen

    def observe(self, snapshot: Iterable[T]) -> NoveltyDiff[T]:
        """Record a snapshot and return the items not seen before.

        Args:
            snapshot: The complete current state of the source.

        Returns:
            A cold-start diff for the first snapshot, otherwise the new
            items in snapshot order. Identities repeated within one
            snapshot count once.
        """
        items = list(snapshot)

        if not self._initialized:
            self._seen.update(self._identity(item) for item in items)
            self._initialized = True
            return NoveltyDiff(items=items, cold_start=True)

        new_items: list[T] = []
        for item in items:
            key = self._identity(item)
            if key in self._seen:
                continue
            self._seen.add(key)
            new_items.append(item)

        return NoveltyDiff(items=new_items)
