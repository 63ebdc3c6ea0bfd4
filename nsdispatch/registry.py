"""Registry for handler management.

This module provides Registry for storing handlers under wildcard
(namespace, event) pattern pairs, resolving priority collisions, and
building the merged run list for a triggered (namespace, event) pair.
"""

import threading
from collections.abc import Container
from dataclasses import dataclass, field

from nsdispatch.patterns import WildcardPattern, compile_pattern
from nsdispatch.utils import callable_name


@dataclass(frozen=True)
class Registration[H]:
    """Handler entry with metadata.

    Attributes:
        namespace: Compiled namespace pattern.
        event: Compiled event pattern.
        priority: Final, collision-free priority inside its bucket
            (lower = executed first).
        handler: Handler callable.
        name: Debug label for logging (defaults to handler.__qualname__).
    """

    namespace: WildcardPattern
    event: WildcardPattern
    priority: int
    handler: H
    name: str = field(default="")

    def __post_init__(self) -> None:
        """Set default name if not provided."""
        if not self.name:
            object.__setattr__(self, "name", callable_name(self.handler))


def claim_slot(taken: Container[int], priority: int) -> int:
    """Return the first free priority at or above *priority*.

    Args:
        taken: Priorities already occupied.
        priority: Requested priority.

    Returns:
        *priority*, incremented until it is not in *taken*.
    """
    while priority in taken:
        priority += 1
    return priority


class Registry[H]:
    """Registry table for (namespace, event) handlers.

    Layout is namespace pattern -> event pattern -> bucket, where a bucket
    is a list of registrations sorted ascending by priority with no two
    entries sharing a priority.  Buckets are created on first use and
    never removed.  Dict insertion order is the scan order used by
    :meth:`match`.

    All access goes through a re-entrant lock, so handlers that register
    or trigger from inside a trigger never deadlock, and snapshots taken
    by :meth:`match` are consistent across threads.
    """

    def __init__(self) -> None:
        """Initialize empty registry.

        Post:
            _buckets is empty, _sources is empty.
        """
        self._lock = threading.RLock()
        self._buckets: dict[
            WildcardPattern, dict[WildcardPattern, list[Registration[H]]]
        ] = {}
        self._sources: set[tuple[str, str]] = set()

    def add(
        self, namespace: str, event: str, handler: H, priority: int
    ) -> Registration[H]:
        """Register *handler* under the (namespace, event) pattern pair.

        Args:
            namespace: Namespace wildcard string.
            event: Event wildcard string.
            handler: Handler callable (validated by the caller).
            priority: Requested priority.

        Returns:
            The stored registration, carrying the final priority.

        Post:
            Bucket contains the registration and is sorted by priority.
            (namespace, event) recorded for :meth:`contains`.
        """
        ns_pattern = compile_pattern(namespace)
        ev_pattern = compile_pattern(event)
        with self._lock:
            bucket = self._buckets.setdefault(ns_pattern, {}).setdefault(
                ev_pattern, []
            )
            final = claim_slot({entry.priority for entry in bucket}, priority)
            registration = Registration(
                namespace=ns_pattern,
                event=ev_pattern,
                priority=final,
                handler=handler,
            )
            bucket.append(registration)
            bucket.sort(key=lambda entry: entry.priority)
            self._sources.add((namespace, event))
        return registration

    def match(self, namespace: str, event: str) -> list[tuple[int, Registration[H]]]:
        """Build the merged run list for a triggered (namespace, event) pair.

        Every bucket whose namespace pattern matches *namespace* and whose
        event pattern matches *event* is folded into one priority map.
        Clashing priorities are bumped to the next free slot, in scan
        order: namespace buckets, then event buckets, then each bucket
        ascending.

        Args:
            namespace: Concrete namespace being triggered.
            event: Concrete event being triggered.

        Returns:
            (merged priority, registration) pairs sorted ascending.  The
            list is a snapshot and does not follow later registrations.
        """
        merged: dict[int, Registration[H]] = {}
        with self._lock:
            for ns_pattern, events in self._buckets.items():
                if not ns_pattern.matches(namespace):
                    continue
                for ev_pattern, bucket in events.items():
                    if not ev_pattern.matches(event):
                        continue
                    for entry in bucket:
                        merged[claim_slot(merged.keys(), entry.priority)] = entry
        return sorted(merged.items(), key=lambda item: item[0])

    def contains(self, namespace: str, event: str) -> bool:
        """Return True if exactly this (namespace, event) pair was registered.

        Compares the verbatim strings given to :meth:`add`; wildcards in
        either argument are not expanded.
        """
        with self._lock:
            return (namespace, event) in self._sources

    def __len__(self) -> int:
        """Total number of registrations across all buckets."""
        with self._lock:
            return sum(
                len(bucket)
                for events in self._buckets.values()
                for bucket in events.values()
            )
