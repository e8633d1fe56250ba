"""
equidist.core.traits
====================

`LedgerOps`: a mixin that gives any `LedgerBase` a vocabulary in terms of
comparisons and seeds instead of raw entities and snapshots.

Writers fill in the timestamp and stringify identifiers; readers translate
`comparison_id` to the `entity` filter of the underlying reader.

Examples
--------
>>> from equidist.backends.polars.ledger import PolarsLedger
>>> from equidist.core.names import Namespace
>>> L = PolarsLedger()
>>> L.write_event(time_index="0", namespace=Namespace.TALLIES, kind="observed",
...               comparison_id="cmp#1", seed_index="0",
...               payload_type="SeedTally", payload={"seed": 0, "x": [3, 2], "y": [2, 3]})
>>> L.latest(namespace=Namespace.TALLIES).payload["x"]
[3, 2]
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Union

from equidist.core.ledger import LedgerBase, NamespaceLike, Row
from equidist.core.names import ComparisonId, Namespace, SeedIndex

Identifier = Union[ComparisonId, SeedIndex, str]


def _ns(namespace: NamespaceLike) -> str:
    return namespace.value if isinstance(namespace, Namespace) else str(namespace)


def _query(
    namespace: Optional[NamespaceLike],
    comparison_id: Optional[Identifier],
    **rest: Any,
) -> Dict[str, Any]:
    return {
        "namespace": None if namespace is None else _ns(namespace),
        "entity": str(comparison_id) if comparison_id else None,
        **rest,
    }


class LedgerOps(LedgerBase):
    """Comparison-oriented writers and readers on top of `LedgerBase`."""

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def write_event(
        self,
        *,
        time_index: str,
        namespace: NamespaceLike,
        kind: str,
        comparison_id: Identifier,
        seed_index: Identifier,
        payload_type: str,
        payload: Dict[str, Any],
        tag: Optional[str] = None,
        ts: Optional[datetime] = None,
    ) -> None:
        """Record one fact about `comparison_id` at `seed_index`."""
        self.append(
            time_index=str(time_index),
            ts=ts if ts is not None else self._now(),
            namespace=_ns(namespace),
            kind=kind,
            entity=str(comparison_id),
            snapshot_id=str(seed_index),
            payload_type=payload_type,
            payload=payload,
            tag=tag,
        )

    def emit(
        self,
        *,
        time_index: str,
        comparison_id: Identifier,
        seed_index: Identifier,
        topic: str,
        body: Dict[str, Any],
        tag: str = "signal",
        namespace: NamespaceLike = Namespace.SIGNALS,
        ts: Optional[datetime] = None,
    ) -> None:
        """Record a signal (verdict, decision) about `comparison_id`."""
        self.emit_signal(
            time_index=str(time_index),
            ts=ts if ts is not None else self._now(),
            entity=str(comparison_id),
            snapshot_id=str(seed_index),
            topic=topic,
            body=body,
            tag=tag,
            namespace=_ns(namespace),
        )

    def latest(
        self,
        *,
        namespace: Optional[NamespaceLike] = None,
        kind: Optional[str] = None,
        comparison_id: Optional[Identifier] = None,
        tag: Optional[str] = None,
    ) -> Optional[Row]:
        """Most recent matching row, or None."""
        return self.reader().latest(**_query(namespace, comparison_id, kind=kind, tag=tag))

    def iter_ns(
        self,
        *,
        namespace: NamespaceLike,
        comparison_id: Optional[Identifier] = None,
        tag: Optional[str] = None,
    ) -> Iterable[Row]:
        """Rows of one namespace in append order, optionally for one comparison."""
        return self.reader().iter_rows(**_query(namespace, comparison_id, tag=tag))
