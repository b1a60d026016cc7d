"""
Time-bucketed case series for the dashboard chart, plus the filter options
(states and municipalities) the chart controls offer.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
import pandas as pd
from srag_dashboard.models import SragCase
from srag_dashboard.repositories import CaseRepository

log = logging.getLogger(__name__)

UNKNOWN = "Unknown"

class PeriodType(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"

class GroupByType(str, Enum):
    STATE = "state"
    MUNICIPALITY = "municipality"

# fixed width, zero padded: lexicographic order is chronological order
PERIOD_FORMATS = {
    PeriodType.DAILY: "%Y-%m-%d",
    PeriodType.MONTHLY: "%Y-%m",
    PeriodType.YEARLY: "%Y",
}

CHART_FIELDS = ["notification_date", "state", "municipality_name"]

@dataclass
class ChartFilters:
    period: PeriodType = PeriodType.MONTHLY
    group_by: GroupByType = GroupByType.STATE
    state: str | None = None
    municipality: str | None = None

    def __post_init__(self):
        self.period = PeriodType(self.period)
        self.group_by = GroupByType(self.group_by)

    def where(self) -> dict:
        where = {}
        if self.state:
            where["state"] = self.state
        if self.municipality:
            where["municipality"] = self.municipality
        return where

def _regions(df: pd.DataFrame, group_by: GroupByType) -> pd.Series:
    if group_by is GroupByType.STATE:
        return df["state"]
    if "municipality_name" not in df.columns:
        return pd.Series(UNKNOWN, index=df.index)
    return df["municipality_name"].fillna(UNKNOWN).replace("", UNKNOWN)

def group_and_aggregate(cases: list[dict], period: PeriodType, group_by: GroupByType) -> list[dict]:
    """
    Count cases per (date bucket, region).
    Output is sorted by date bucket, then region.
    """
    if not cases:
        return []

    fmt = PERIOD_FORMATS[PeriodType(period)]
    df = pd.DataFrame(cases)
    df["date"] = df["notification_date"].map(lambda d: d.strftime(fmt))
    df["region"] = _regions(df, GroupByType(group_by))

    counts = (
        df.groupby(["date", "region"], sort=False)
        .size()
        .reset_index(name="cases")
        .sort_values(["date", "region"], kind="stable")
    )
    return [
        {"date": d, "cases": int(c), "region": r}
        for d, r, c in counts[["date", "region", "cases"]].itertuples(index=False, name=None)
    ]

class ChartsService:
    def __init__(self, repository: CaseRepository):
        self.repository = repository

    def get_cases_chart_data(self, filters: ChartFilters | None = None) -> list[dict]:
        filters = filters or ChartFilters()
        log.info("Fetching chart data with filters: %s", filters)
        cases = self.repository.find_many(
            where=filters.where(),
            select_fields=CHART_FIELDS,
            order_by=["notification_date"],
        )
        return group_and_aggregate(cases, filters.period, filters.group_by)

    def get_available_states(self) -> list[str]:
        log.info("Fetching all available states")
        return [row["state"] for row in self.repository.distinct("state")]

    def get_available_municipalities(self) -> list[dict]:
        """One {code, name} per notifying municipality code, sorted by name."""
        log.info("Fetching all available municipalities")
        rows = self.repository.distinct(
            "municipality", "municipality_name",
            criteria=[SragCase.municipality.is_not(None)],
        )
        names: dict[str, str | None] = {}
        for row in rows:
            code = row["municipality"]
            # a code seen with and without a name keeps the name
            if names.get(code) is None:
                names[code] = row["municipality_name"]
        municipalities = [{"code": code, "name": name or code} for code, name in names.items()]
        return sorted(municipalities, key=lambda m: (m["name"], m["code"]))
