"""
equidist.backends.ibis.ledger
=============================

Ledger stored in a table of any ibis backend.

- Backend-agnostic via ibis-framework; `connect()` opens DuckDB
- JSON-UTF8 payload column, decoded through `PayloadRegistry`
- Several named ledgers can share one table (`ledger_name`)
- Automatic equidist_version tracking

Examples
--------
>>> from equidist.backends.ibis.ledger import IbisLedger, connect
>>> from equidist.core.names import Namespace
>>> L = IbisLedger(connect(), ledger_name="demo")
>>> L.write_event(time_index="0", namespace=Namespace.STATS, kind="updated",
...               comparison_id="cmp#1", seed_index="0",
...               payload_type="DMPosterior", payload={"posterior": 0.25})
>>> L.latest(namespace=Namespace.STATS).payload["posterior"]
0.25
"""

from __future__ import annotations
import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

import ibis
import pandas as pd
from ibis import BaseBackend
from ibis.expr.types import Table

from equidist.__version__ import __version__
from equidist.core.ledger import LedgerReader, NamespaceLike, PayloadRegistry, Row
from equidist.core.names import Namespace
from equidist.core.traits import LedgerOps


def get_ledger_schema() -> ibis.Schema:
    """Column layout of the ledger table; `ts` is stored as naive UTC."""
    return ibis.schema(
        {
            "seq": "int64",
            "uuid": "string",
            "ledger_name": "string",
            "time_index": "string",
            "ts": "timestamp",
            "namespace": "string",
            "kind": "string",
            "entity": "string",
            "snapshot_id": "string",
            "tag": "string",
            "payload_type": "string",
            "payload": "string",
            "equidist_version": "string",
        }
    )


def connect(path: str = ":memory:") -> BaseBackend:
    """Open a DuckDB connection (in memory unless `path` names a file)."""
    return ibis.duckdb.connect(path)


def _ns(namespace: NamespaceLike) -> str:
    return namespace.value if isinstance(namespace, Namespace) else str(namespace)


class IbisLedger(LedgerOps):
    """
    Append-only ledger on an ibis table.

    Parameters
    ----------
    connection : BaseBackend, optional
        Ibis backend connection; an in-memory DuckDB when omitted
    ledger_name : str
        Name of this ledger inside the shared table
    table_name : str
        Name of the table in the backend
    """

    def __init__(
        self,
        connection: Optional[BaseBackend] = None,
        ledger_name: str = "default",
        table_name: str = "ledger",
    ) -> None:
        self.connection = connection if connection is not None else connect()
        self.ledger_name = ledger_name
        self.table_name = table_name
        if table_name not in self.connection.list_tables():
            self.connection.create_table(table_name, schema=get_ledger_schema())

    @property
    def raw_table(self) -> Table:
        """The whole table, across every ledger name."""
        return self.connection.table(self.table_name)

    def _next_seq(self) -> int:
        # read from the table so every handle on it shares one sequence
        last = self.raw_table.seq.max().execute()
        return 0 if pd.isna(last) else int(last) + 1

    @property
    def table(self) -> Table:
        """Rows of this ledger, as an ibis expression for ad-hoc queries."""
        t = self.raw_table
        return t.filter(t.ledger_name == self.ledger_name)

    # ---- Ledger interface ----

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
    ) -> "IbisLedger":
        if ts.tzinfo is not None:
            ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
        record = {
            "seq": self._next_seq(),
            "uuid": str(uuid.uuid4()),
            "ledger_name": self.ledger_name,
            "time_index": time_index,
            "ts": ts,
            "namespace": _ns(namespace),
            "kind": kind,
            "entity": entity,
            "snapshot_id": snapshot_id,
            "tag": tag or "",
            "payload_type": payload_type,
            "payload": json.dumps(payload, separators=(",", ":")),
            "equidist_version": __version__,
        }
        self.connection.insert(self.table_name, pd.DataFrame([record]))
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
    ) -> "IbisLedger":
        return self.append(
            time_index=time_index,
            ts=ts,
            namespace=namespace,
            kind=kind,
            entity=entity,
            snapshot_id=snapshot_id,
            payload_type="Signal",
            payload={"topic": topic, "body": body},
            tag=tag,
        )

    class _Reader(LedgerReader):
        def __init__(self, table: Table) -> None:
            self.table = table

        def _filter(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> Table:
            t = self.table
            preds: List[Any] = []
            if namespace is not None:
                preds.append(t.namespace == _ns(namespace))
            if kind is not None:
                preds.append(t.kind == kind)
            if entity is not None:
                preds.append(t.entity == entity)
            if tag is not None:
                preds.append(t.tag == tag)
            return t.filter(*preds) if preds else t

        @staticmethod
        def _rows(df: pd.DataFrame) -> Iterator[Row]:
            for rec in df.to_dict("records"):
                payload = json.loads(rec["payload"]) if rec["payload"] else {}
                yield Row(
                    uuid=rec["uuid"],
                    time_index=rec["time_index"],
                    ts=pd.Timestamp(rec["ts"]).tz_localize("UTC").to_pydatetime(),
                    namespace=rec["namespace"],
                    kind=rec["kind"],
                    entity=rec["entity"],
                    snapshot_id=rec["snapshot_id"],
                    tag=rec["tag"] or None,
                    payload_type=rec["payload_type"],
                    payload=PayloadRegistry.decode(rec["payload_type"], payload),
                )

        def iter_rows(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> Iterator[Row]:
            q = self._filter(namespace=namespace, kind=kind, entity=entity, tag=tag)
            return self._rows(q.order_by("seq").execute())

        def latest(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> Optional[Row]:
            q = self._filter(namespace=namespace, kind=kind, entity=entity, tag=tag)
            df = q.order_by(ibis.desc("seq")).limit(1).execute()
            return next(self._rows(df), None)

        def count(self, **filters: Any) -> int:
            return int(self._filter(**filters).count().execute())

    def reader(self) -> LedgerReader:
        return IbisLedger._Reader(self.table)

    def __len__(self) -> int:
        return int(self.table.count().execute())
