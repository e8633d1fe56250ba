"""
equidist.core.ledger
====================

Backend-agnostic ledger contracts.

Every fact an equivalence check produces (tallies, posteriors, per-seed
verdicts, the final decision) can be appended to an append-only ledger.
This module defines what a ledger must provide; concrete storage lives in
`equidist.backends`.

- `Row`: one decoded ledger record
- `LedgerReader`: read-only query interface
- `LedgerBase`: the minimal write/read contract
- `PayloadRegistry`: optional decoders turning JSON payloads into objects

Examples
--------
>>> from equidist.core.ledger import PayloadRegistry
>>> PayloadRegistry.decode("Unregistered", {"a": 1})
{'a': 1}
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, Optional, Union

from equidist.core.names import Namespace

# Type aliases
NamespaceLike = Union[Namespace, str]


@dataclass(frozen=True)
class Row:
    """A single decoded ledger record."""

    uuid: str
    time_index: str
    ts: datetime
    namespace: str
    kind: str
    entity: str
    snapshot_id: str
    tag: Optional[str]
    payload_type: str
    payload: Any


class LedgerReader(ABC):
    """Read-only, filterable view over ledger rows."""

    @abstractmethod
    def iter_rows(
        self,
        *,
        namespace: Optional[Any] = None,
        kind: Optional[str] = None,
        entity: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Iterator[Row]:
        """Iterate matching rows in append order."""

    @abstractmethod
    def latest(
        self,
        *,
        namespace: Optional[Any] = None,
        kind: Optional[str] = None,
        entity: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Optional[Row]:
        """Return the most recently appended matching row (or None)."""

    @abstractmethod
    def count(self, **filters: Any) -> int:
        """Count matching rows."""


class LedgerBase(ABC):
    """Minimal contract of an append-only ledger."""

    @abstractmethod
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
    ) -> "LedgerBase":
        """Append one record."""

    @abstractmethod
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
    ) -> "LedgerBase":
        """Append one signal record."""

    @abstractmethod
    def reader(self) -> LedgerReader:
        """Return a read-only view."""


class PayloadRegistry:
    """Registry of decoders from JSON payloads to typed objects."""

    _decoders: Dict[str, Callable[[Dict[str, Any]], Any]] = {}

    @classmethod
    def register(cls, payload_type: str, decoder: Callable[[Dict[str, Any]], Any]) -> None:
        """Register a decoder for `payload_type`."""
        cls._decoders[payload_type] = decoder

    @classmethod
    def unregister(cls, payload_type: str) -> None:
        cls._decoders.pop(payload_type, None)

    @classmethod
    def decode(cls, payload_type: str, payload: Dict[str, Any]) -> Any:
        """Decode `payload`, or return it unchanged when no decoder is registered."""
        decoder = cls._decoders.get(payload_type)
        return decoder(payload) if decoder is not None else payload
