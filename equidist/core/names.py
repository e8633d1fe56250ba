"""
equidist.core.names
===================

Typed names shared across the package.

- `Namespace`: an Enum for well-known ledger namespaces.
- `ComparisonId`, `SeedIndex`: NewType wrappers for clarity.
- Common `Literal` tags for the discrete equivalence scheme.

Examples
--------
>>> from equidist.core.names import Namespace, ComparisonId
>>> Namespace.TALLIES.value
'tallies'
>>> cid = ComparisonId("cmp#1"); isinstance(cid, str)
True
"""

from __future__ import annotations
from enum import Enum
from typing import Literal, NewType


class Namespace(str, Enum):
    """Well-known ledger namespaces.

    - TALLIES: outcome counts drawn for one seed
    - STATS: marginal likelihoods and posteriors (derived)
    - SIGNALS: per-seed verdicts and final decisions
    """

    TALLIES = "tallies"
    STATS = "stats"
    SIGNALS = "signals"


# Typed aliases for logical identifiers (thin wrappers over str).
ComparisonId = NewType("ComparisonId", str)
SeedIndex = NewType("SeedIndex", str)

# Common tags (extend as needed).
TallyTag = Literal["tally:discrete"]
PosteriorTag = Literal["stat:dm-posterior"]
SeedVerdictTag = Literal["equiv:seed"]
DecisionTag = Literal["equiv:decision"]
