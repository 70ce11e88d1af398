"""Pick the single best performance in each partition."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import pandas as pd

# Final tie-breakers so equal performances always resolve the same way
DEFAULT_TIE_BREAKERS: Tuple[Tuple[str, bool], ...] = (("match_id", True), ("innings_order", True))


@dataclass(frozen=True)
class BestPerformanceSelector:
    """Rank rows per partition and keep rank 1.

    ``ranking`` is a sequence of ``(column, ascending)`` pairs applied in order.
    """

    ranking: Sequence[Tuple[str, bool]]
    tie_breakers: Sequence[Tuple[str, bool]] = DEFAULT_TIE_BREAKERS

    def select(self, frame: pd.DataFrame, partition: Sequence[str]) -> pd.DataFrame:
        order = list(self.ranking) + [
            (column, ascending) for column, ascending in self.tie_breakers if column in frame.columns
        ]
        ranked = frame.sort_values(
            by=[column for column, _ in order],
            ascending=[ascending for _, ascending in order],
            kind="mergesort",
            na_position="last",
        )
        if not partition:
            return ranked.head(1)
        ranked = ranked.assign(_rank=ranked.groupby(list(partition), dropna=False).cumcount() + 1)
        return ranked[ranked["_rank"] == 1].drop(columns="_rank")


FIELDING_BEST = BestPerformanceSelector(ranking=(("dismissals", False), ("caught_keeper", False)))
BOWLING_BEST = BestPerformanceSelector(ranking=(("wickets", False), ("runs", True)))
PARTNERSHIP_BEST = BestPerformanceSelector(ranking=(("_synthetic", False),))
