"""
equidist.backends.polars.io
===========================

Sinks and sources that move ledger frames to and from files.

A sink takes a DataFrame and stores it; a source gives one back. Neither
knows anything about ledger semantics, so `PolarsLedger.frame()` and
`PolarsLedger(df)` are the only glue needed:

>>> from equidist.backends.polars.io import ParquetFileSink, ParquetFileSource
>>> from equidist.backends.polars.ledger import PolarsLedger
>>> ParquetFileSink("runs/ledger.parquet").write(PolarsLedger().frame())  # doctest: +SKIP
>>> PolarsLedger(ParquetFileSource("runs/ledger.parquet").read())  # doctest: +SKIP
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union, cast

import polars as pl

PathLike = Union[str, Path]


class LedgerSink(Protocol):
    def write(self, df: pl.DataFrame) -> None: ...


class LedgerSource(Protocol):
    def read(self) -> pl.DataFrame: ...


def _prepare(path: PathLike) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    return target


@dataclass(frozen=True)
class ParquetFileSink:
    """Write the frame to one Parquet file, creating parent directories."""

    path: PathLike
    compression: str = "zstd"

    def write(self, df: pl.DataFrame) -> None:
        df.write_parquet(_prepare(self.path), compression=cast(Any, self.compression))


@dataclass(frozen=True)
class ParquetDirSink:
    """Write the frame as `filename` inside `dirpath`."""

    dirpath: PathLike
    filename: str = "ledger.parquet"

    def write(self, df: pl.DataFrame) -> None:
        ParquetFileSink(Path(self.dirpath) / self.filename).write(df)


@dataclass(frozen=True)
class CsvFileSink:
    """Write the frame as CSV; timestamps become ISO-8601 text."""

    path: PathLike

    def write(self, df: pl.DataFrame) -> None:
        df.write_csv(_prepare(self.path))


@dataclass(frozen=True)
class ParquetFileSource:
    path: PathLike

    def read(self) -> pl.DataFrame:
        return pl.read_parquet(self.path)


@dataclass(frozen=True)
class CsvFileSource:
    """Read a CSV ledger dump; text columns only unless `schema` is given."""

    path: PathLike
    schema: Optional[Dict[str, Any]] = None

    def read(self) -> pl.DataFrame:
        if self.schema is None:
            return pl.read_csv(self.path)
        return pl.read_csv(self.path, schema=cast(Any, self.schema))
