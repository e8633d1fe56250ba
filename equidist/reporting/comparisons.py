"""
equidist.reporting.comparisons
==============================

Tabular views over the audit trail left by `EquivalenceDecider`.

Examples
--------
>>> from equidist.backends.polars.ledger import PolarsLedger
>>> from equidist.reporting.comparisons import ComparisonReporter
>>> rep = ComparisonReporter(PolarsLedger())
>>> rep.per_seed().height
0
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import polars as pl

from equidist.core.names import Namespace
from equidist.core.traits import LedgerOps

_PER_SEED_SCHEMA = {
    "comparison_id": pl.Utf8,
    "run": pl.Utf8,
    "seed": pl.Int64,
    "tally_x": pl.List(pl.Int64),
    "tally_y": pl.List(pl.Int64),
    "same_log_marginal": pl.Float64,
    "different_log_marginal": pl.Float64,
    "posterior": pl.Float64,
    "equal": pl.Boolean,
}

_DECISION_SCHEMA = {
    "comparison_id": pl.Utf8,
    "run": pl.Utf8,
    "equivalent": pl.Boolean,
    "path": pl.Utf8,
    "seeds_evaluated": pl.Int64,
    "seeds_total": pl.Int64,
}


@dataclass
class ComparisonReporter:
    """
    Summaries of equivalence checks recorded in a ledger.
    """

    ledger: LedgerOps

    def comparison_ids(self) -> List[str]:
        """List every comparison that reached a decision, in order."""
        seen: List[str] = []
        for row in self.ledger.iter_ns(namespace=Namespace.SIGNALS, tag="equiv:decision"):
            if row.entity not in seen:
                seen.append(row.entity)
        return seen

    def per_seed(self, comparison_id: Optional[str] = None) -> pl.DataFrame:
        """One row per evaluated seed and run: tallies, marginals, posterior and verdict."""

        def key(entity: str, payload: Dict[str, Any]) -> Tuple[str, Optional[str], int]:
            return entity, payload.get("run"), payload["seed"]

        tallies = {
            key(row.entity, row.payload): row.payload
            for row in self.ledger.iter_ns(namespace=Namespace.TALLIES, comparison_id=comparison_id)
        }
        verdicts = {
            key(row.entity, row.payload["body"]): row.payload["body"]["equal"]
            for row in self.ledger.iter_ns(
                namespace=Namespace.SIGNALS, comparison_id=comparison_id, tag="equiv:seed"
            )
        }

        records = []
        for row in self.ledger.iter_ns(namespace=Namespace.STATS, comparison_id=comparison_id):
            p = row.payload
            k = key(row.entity, p)
            t = tallies.get(k, {})
            records.append(
                {
                    "comparison_id": row.entity,
                    "run": p.get("run"),
                    "seed": p["seed"],
                    "tally_x": t.get("x"),
                    "tally_y": t.get("y"),
                    "same_log_marginal": p["same_log_marginal"],
                    "different_log_marginal": p["different_log_marginal"],
                    "posterior": p["posterior"],
                    "equal": verdicts.get(k),
                }
            )
        return pl.DataFrame(records, schema=_PER_SEED_SCHEMA)

    def decisions(self) -> pl.DataFrame:
        """One row per finished check, in the order they were decided."""
        records = [
            {"comparison_id": row.entity, "run": None, **row.payload["body"]}
            for row in self.ledger.iter_ns(namespace=Namespace.SIGNALS, tag="equiv:decision")
        ]
        return pl.DataFrame(records, schema=_DECISION_SCHEMA)

    def summary(self, comparison_id: str, run: Optional[str] = None) -> Dict[str, Any]:
        """Decision plus posterior statistics for one run of a comparison.

        The most recent run is summarised unless `run` is given.
        """
        decisions = self.decisions().filter(pl.col("comparison_id") == comparison_id)
        if run is not None:
            decisions = decisions.filter(pl.col("run") == run)
        body = decisions.tail(1).row(0, named=True) if decisions.height else {}
        if run is None:
            run = body.get("run")

        per_seed = self.per_seed(comparison_id)
        if run is not None:
            per_seed = per_seed.filter(pl.col("run") == run)
        return {
            "comparison_id": comparison_id,
            "run": run,
            "equivalent": body.get("equivalent"),
            "path": body.get("path"),
            "seeds_evaluated": body.get("seeds_evaluated", per_seed.height),
            "max_posterior": per_seed["posterior"].max() if per_seed.height else None,
            "unequal_seeds": per_seed.filter(pl.col("equal").not_())["seed"].to_list(),
        }
