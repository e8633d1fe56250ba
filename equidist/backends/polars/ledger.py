"""
equidist.backends.polars.ledger
===============================

In-memory ledger held in a Polars DataFrame.

Appends are buffered as plain records and folded into the frame the next
time it is read, so recording a long comparison costs one concatenation
per query instead of one per row. Payloads are stored as compact JSON text.
Persistence lives in `equidist.backends.polars.io`.

Examples
--------
>>> from equidist.backends.polars.ledger import PolarsLedger
>>> from equidist.core.names import Namespace
>>> L = PolarsLedger()
>>> L.write_event(time_index="0", namespace=Namespace.STATS, kind="updated",
...               comparison_id="cmp#1", seed_index="0",
...               payload_type="DMPosterior", payload={"posterior": 0.25}, tag="stat:dm-posterior")
>>> L.reader().count(namespace=Namespace.STATS.value)
1
"""

from __future__ import annotations
import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, cast

import polars as pl

from equidist.__version__ import __version__
from equidist.core.ledger import LedgerReader, NamespaceLike, PayloadRegistry, Row
from equidist.core.names import Namespace
from equidist.core.traits import LedgerOps

LEDGER_SCHEMA: Dict[str, Any] = {
    "uuid": pl.Utf8,
    "time_index": pl.Utf8,
    "ts": pl.Datetime(time_unit="us", time_zone="UTC"),
    "namespace": pl.Utf8,
    "kind": pl.Utf8,
    "entity": pl.Utf8,  # comparison id
    "snapshot_id": pl.Utf8,  # seed index
    "tag": pl.Utf8,
    "payload_type": pl.Utf8,
    "payload": pl.Utf8,  # JSON text
    "equidist_version": pl.Utf8,
}


def _as_utc(ts: datetime) -> datetime:
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts.astimezone(timezone.utc)


def _to_row(rec: Dict[str, Any]) -> Row:
    payload = json.loads(rec["payload"]) if rec["payload"] else {}
    return Row(
        uuid=rec["uuid"],
        time_index=rec["time_index"],
        ts=rec["ts"],
        namespace=rec["namespace"],
        kind=rec["kind"],
        entity=rec["entity"],
        snapshot_id=rec["snapshot_id"],
        tag=rec["tag"],
        payload_type=rec["payload_type"],
        payload=PayloadRegistry.decode(rec["payload_type"], payload),
    )


class _FrameReader(LedgerReader):
    """Query view over a snapshot of the ledger frame."""

    def __init__(self, df: pl.DataFrame) -> None:
        self.df = df

    def _select(self, **filters: Any) -> pl.DataFrame:
        conditions = []
        for column, value in (
            ("namespace", filters.get("namespace")),
            ("kind", filters.get("kind")),
            ("entity", filters.get("entity")),
            ("tag", filters.get("tag")),
        ):
            if value is None:
                continue
            if isinstance(value, Namespace):
                value = value.value
            conditions.append(pl.col(column) == str(value))
        return self.df.filter(*conditions) if conditions else self.df

    def iter_rows(self, **filters: Any) -> Iterator[Row]:
        return (_to_row(rec) for rec in self._select(**filters).iter_rows(named=True))

    def latest(self, **filters: Any) -> Optional[Row]:
        tail = self._select(**filters).tail(1)
        return _to_row(tail.row(0, named=True)) if tail.height else None

    def count(self, **filters: Any) -> int:
        return self._select(**filters).height


class PolarsLedger(LedgerOps):
    """Append-only ledger on a Polars DataFrame, with the `LedgerOps` DSL."""

    _SCHEMA = LEDGER_SCHEMA

    def __init__(self, df: Optional[pl.DataFrame] = None) -> None:
        self._df = pl.DataFrame(schema=cast(Any, LEDGER_SCHEMA))
        self._pending: List[Dict[str, Any]] = []
        if df is not None:
            self.replace_with_frame(df)

    def append(
        self,
        *,
        time_index: str,
        ts: datetime,
        namespace: NamespaceLike,
        kind: str,
        entity: str,
        snapshot_id: str,
        payload_type: str,
        payload: Dict[str, Any],
        tag: Optional[str] = None,
    ) -> "PolarsLedger":
        self._pending.append(
            {
                "uuid": str(uuid.uuid4()),
                "time_index": time_index,
                "ts": _as_utc(ts),
                "namespace": namespace.value if isinstance(namespace, Namespace) else str(namespace),
                "kind": kind,
                "entity": entity,
                "snapshot_id": snapshot_id,
                "tag": tag,
                "payload_type": payload_type,
                "payload": json.dumps(payload, separators=(",", ":")),
                "equidist_version": __version__,
            }
        )
        return self

    def emit_signal(
        self,
        *,
        time_index: str,
        ts: datetime,
        entity: str,
        snapshot_id: str,
        topic: str,
        body: Dict[str, Any],
        tag: str = "signal",
        namespace: NamespaceLike = Namespace.SIGNALS,
        kind: str = "emitted",
    ) -> "PolarsLedger":
        signal = {"topic": topic, "body": body}
        return self.append(
            time_index=time_index,
            ts=ts,
            namespace=namespace,
            kind=kind,
            entity=entity,
            snapshot_id=snapshot_id,
            payload_type="Signal",
            payload=signal,
            tag=tag,
        )

    def _flush(self) -> pl.DataFrame:
        if self._pending:
            batch = pl.DataFrame(self._pending, schema=cast(Any, LEDGER_SCHEMA))
            self._df = pl.concat([self._df, batch], how="vertical_relaxed")
            self._pending = []
        return self._df

    def reader(self) -> LedgerReader:
        return _FrameReader(self._flush())

    def frame(self) -> pl.DataFrame:
        """A copy of every row appended so far."""
        return self._flush().clone()

    def replace_with_frame(self, df: pl.DataFrame) -> None:
        """Adopt `df` as the ledger contents; absent columns are filled with nulls."""
        missing = [
            pl.lit(None, dtype=dtype).alias(name)
            for name, dtype in LEDGER_SCHEMA.items()
            if name not in df.columns
        ]
        if missing:
            df = df.with_columns(missing)
        self._pending = []
        self._df = df.select(list(LEDGER_SCHEMA))

    def __len__(self) -> int:
        return self._df.height + len(self._pending)
