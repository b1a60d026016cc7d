"""
Tests for the chart series aggregation and filter options
"""
from datetime import date

import pytest

from srag_dashboard.services.charts import (
    UNKNOWN,
    ChartFilters,
    ChartsService,
    GroupByType,
    PeriodType,
    group_and_aggregate,
)
from tests.conftest import make_case

CASES = [
    {"notification_date": date(2024, 1, 15), "state": "SP", "municipality_name": "SAO PAULO"},
    {"notification_date": date(2024, 1, 20), "state": "SP", "municipality_name": "SAO PAULO"},
    {"notification_date": date(2024, 1, 25), "state": "RJ", "municipality_name": "RIO DE JANEIRO"},
    {"notification_date": date(2024, 2, 10), "state": "SP", "municipality_name": "SAO PAULO"},
]


def test_monthly_by_state():
    points = group_and_aggregate(CASES, PeriodType.MONTHLY, GroupByType.STATE)

    assert points == [
        {"date": "2024-01", "cases": 1, "region": "RJ"},
        {"date": "2024-01", "cases": 2, "region": "SP"},
        {"date": "2024-02", "cases": 1, "region": "SP"},
    ]


def test_daily_and_yearly_buckets():
    daily = group_and_aggregate(CASES, PeriodType.DAILY, GroupByType.STATE)
    assert [p["date"] for p in daily] == ["2024-01-15", "2024-01-20", "2024-01-25", "2024-02-10"]

    yearly = group_and_aggregate(CASES, "yearly", "state")
    assert yearly == [
        {"date": "2024", "cases": 1, "region": "RJ"},
        {"date": "2024", "cases": 3, "region": "SP"},
    ]


def test_group_by_municipality_with_unknown():
    cases = CASES + [
        {"notification_date": date(2024, 2, 11), "state": "MG", "municipality_name": None},
        {"notification_date": date(2024, 2, 12), "state": "MG", "municipality_name": ""},
    ]
    points = group_and_aggregate(cases, PeriodType.MONTHLY, GroupByType.MUNICIPALITY)

    assert {"date": "2024-02", "cases": 2, "region": UNKNOWN} in points
    assert {"date": "2024-01", "cases": 2, "region": "SAO PAULO"} in points
    assert {"date": "2024-01", "cases": 1, "region": "RIO DE JANEIRO"} in points


def test_output_sorted_by_date_across_years():
    cases = [
        {"notification_date": date(2024, 1, 1), "state": "SP", "municipality_name": None},
        {"notification_date": date(2023, 12, 31), "state": "SP", "municipality_name": None},
        {"notification_date": date(2023, 2, 1), "state": "AC", "municipality_name": None},
    ]
    points = group_and_aggregate(cases, PeriodType.MONTHLY, GroupByType.STATE)
    assert [p["date"] for p in points] == ["2023-02", "2023-12", "2024-01"]


def test_empty_input():
    assert group_and_aggregate([], PeriodType.MONTHLY, GroupByType.STATE) == []


def test_filters_reject_unknown_values():
    with pytest.raises(ValueError):
        ChartFilters(period="weekly")
    with pytest.raises(ValueError):
        ChartFilters(group_by="country")
    assert ChartFilters().where() == {}
    assert ChartFilters(state="SP", municipality="355030").where() == {"state": "SP", "municipality": "355030"}


@pytest.fixture
def charts(repo):
    repo.create_many([
        make_case("1", date(2024, 1, 15), state="SP", municipality="355030", municipality_name="SAO PAULO"),
        make_case("2", date(2024, 1, 20), state="SP", municipality="350950", municipality_name="CAMPINAS"),
        make_case("3", date(2024, 1, 25), state="RJ", municipality="330455", municipality_name="RIO DE JANEIRO"),
        make_case("4", date(2024, 2, 10), state="SP", municipality="355030", municipality_name="SAO PAULO"),
        make_case("5", date(2024, 2, 11), state="AM", municipality=None, municipality_name=None),
        make_case("6", date(2024, 2, 12), state="AM", municipality="130260", municipality_name=None),
    ])
    return ChartsService(repo)


def test_chart_data_defaults_to_monthly_by_state(charts):
    points = charts.get_cases_chart_data()

    assert points == [
        {"date": "2024-01", "cases": 1, "region": "RJ"},
        {"date": "2024-01", "cases": 2, "region": "SP"},
        {"date": "2024-02", "cases": 2, "region": "AM"},
        {"date": "2024-02", "cases": 1, "region": "SP"},
    ]


def test_chart_data_filtered_by_state(charts):
    points = charts.get_cases_chart_data(ChartFilters(state="SP"))
    assert all(p["region"] == "SP" for p in points)
    assert sum(p["cases"] for p in points) == 3


def test_chart_data_filtered_by_municipality(charts):
    points = charts.get_cases_chart_data(
        ChartFilters(period="daily", group_by="municipality", municipality="355030")
    )
    assert points == [
        {"date": "2024-01-15", "cases": 1, "region": "SAO PAULO"},
        {"date": "2024-02-10", "cases": 1, "region": "SAO PAULO"},
    ]


def test_available_states(charts):
    assert charts.get_available_states() == ["AM", "RJ", "SP"]


def test_available_municipalities(charts):
    assert charts.get_available_municipalities() == [
        {"code": "130260", "name": "130260"},
        {"code": "350950", "name": "CAMPINAS"},
        {"code": "330455", "name": "RIO DE JANEIRO"},
        {"code": "355030", "name": "SAO PAULO"},
    ]


def test_available_municipalities_one_entry_per_code(repo):
    repo.create_many([
        make_case("1", date(2024, 1, 15), municipality="355030", municipality_name=None),
        make_case("2", date(2024, 1, 16), municipality="355030", municipality_name="SAO PAULO"),
        make_case("3", date(2024, 1, 17), municipality="355030", municipality_name=None),
    ])

    assert ChartsService(repo).get_available_municipalities() == [{"code": "355030", "name": "SAO PAULO"}]
