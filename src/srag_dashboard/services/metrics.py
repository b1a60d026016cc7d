"""
Dashboard KPIs computed over every stored case.
"""

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Callable
from srag_dashboard.models import SragCase
from srag_dashboard.repositories import CaseRepository

log = logging.getLogger(__name__)

DEATH = "2"

GROWTH_CONTEXT = "vs mês anterior"
MORTALITY_CONTEXT = "casos com óbito"
ICU_CONTEXT = "pacientes hospitalizados em UTI"
VACCINATION_CONTEXT = "dos casos com ao menos 1 dose"

@dataclass(frozen=True)
class Metric:
    value: str
    context: str

@dataclass(frozen=True)
class DashboardMetrics:
    case_growth_rate: Metric
    mortality_rate: Metric
    icu_occupancy_rate: Metric
    vaccination_rate: Metric

# helpers
def format_rate(rate: float, signed: bool = False) -> str:
    sign = "+" if signed and rate >= 0 else ""
    return f"{sign}{rate:.1f}%"

def percentage(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0

def growth_rate(current: int, previous: int) -> float:
    """Month over month change; an empty previous month counts as no growth."""
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100

def month_starts(today: date) -> tuple[date, date]:
    """First day of the previous month and of the current month."""
    current = today.replace(day=1)
    if current.month == 1:
        previous = current.replace(year=current.year - 1, month=12)
    else:
        previous = current.replace(month=current.month - 1)
    return previous, current

class MetricsService:
    def __init__(self, repository: CaseRepository, today: Callable[[], date] = date.today):
        self.repository = repository
        self.today = today

    def case_growth_rate(self) -> Metric:
        previous_start, current_start = month_starts(self.today())
        current = self.repository.count(SragCase.notification_date >= current_start)
        previous = self.repository.count(
            SragCase.notification_date >= previous_start,
            SragCase.notification_date < current_start,
        )
        rate = growth_rate(current, previous)
        return Metric(format_rate(rate, signed=True), GROWTH_CONTEXT)

    def mortality_rate(self) -> Metric:
        total = self.repository.count()
        deaths = self.repository.count(SragCase.evolution == DEATH)
        return Metric(format_rate(percentage(deaths, total)), MORTALITY_CONTEXT)

    def icu_occupancy_rate(self) -> Metric:
        # ICU cases are not a subset of hospitalized ones in the source, so this can pass 100%
        hospitalized = self.repository.count(SragCase.hospitalized.is_(True))
        icu = self.repository.count(SragCase.icu.is_(True))
        return Metric(format_rate(percentage(icu, hospitalized)), ICU_CONTEXT)

    def vaccination_rate(self) -> Metric:
        total = self.repository.count()
        vaccinated = self.repository.count(SragCase.vaccinated.is_(True))
        return Metric(format_rate(percentage(vaccinated, total)), VACCINATION_CONTEXT)

    def get_dashboard_metrics(self) -> DashboardMetrics:
        log.info("Calculating dashboard metrics...")
        with ThreadPoolExecutor(max_workers=4) as pool:
            growth = pool.submit(self.case_growth_rate)
            mortality = pool.submit(self.mortality_rate)
            icu = pool.submit(self.icu_occupancy_rate)
            vaccination = pool.submit(self.vaccination_rate)
            return DashboardMetrics(
                case_growth_rate=growth.result(),
                mortality_rate=mortality.result(),
                icu_occupancy_rate=icu.result(),
                vaccination_rate=vaccination.result(),
            )
