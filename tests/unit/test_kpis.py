from __future__ import annotations

import math

import pytest

from waste_reports.common.errors import UnsupportedReportType
from waste_reports.common.models import Report, ReportType
from waste_reports.pipeline.kpis import derive_kpis


def test_weight_kpi_has_one_decimal():
    kpis = derive_kpis("waste-generation", {"total_weight": 123.456789})
    assert kpis[0].value == "123.5"
    assert kpis[0].label == "Total Weight (kg)"


def test_currency_kpi_has_two_decimals_and_dollar_sign():
    assert derive_kpis("cost-analysis", {"total_revenue": 1234.567})[0].value == "$1234.57"


def test_percentage_kpi_has_one_decimal_and_percent_sign():
    assert derive_kpis("collection-efficiency", {"efficiency_rate": 85.6789})[0].value == "85.7%"


def test_counts_stay_raw_integers():
    kpis = derive_kpis(ReportType.COLLECTION_EFFICIENCY, {"scheduled_pickups": 12, "completed_pickups": 9})
    assert kpis[1].value == 12
    assert kpis[2].value == 9


@pytest.mark.parametrize(
    ("report_type", "expected"),
    [
        ("waste-generation", ["0.0", 0, "0.0"]),
        ("collection-efficiency", ["0.0%", 0, 0]),
        ("cost-analysis", ["$0.00", "$0.00", "$0.00"]),
    ],
)
def test_empty_totals_resolve_to_zero_defaults(report_type, expected):
    kpis = derive_kpis(report_type, {})
    assert [kpi.value for kpi in kpis] == expected
    for kpi in kpis:
        assert "nan" not in str(kpi.value).lower()
        assert "inf" not in str(kpi.value).lower()


def test_none_report_and_non_finite_values_are_zeroed():
    assert derive_kpis("waste-generation", None)[0].value == "0.0"
    assert derive_kpis("waste-generation", {"total_weight": math.inf})[0].value == "0.0"


def test_kpis_keep_fixed_order_icons_and_colors():
    kpis = derive_kpis("cost-analysis", Report(ReportType.COST_ANALYSIS, totals={}, groupings={}))
    assert [kpi.label for kpi in kpis] == ["Total Revenue", "Average Cost", "Paid Revenue"]
    assert [kpi.icon for kpi in kpis] == ["DollarSign", "TrendingUp", "DollarSign"]
    assert [kpi.color for kpi in kpis] == ["#10B981", "#3B82F6", "#F59E0B"]
    assert all(kpi.trend == "up" for kpi in kpis)


def test_unknown_report_type_raises():
    with pytest.raises(UnsupportedReportType):
        derive_kpis("recycling-stats", {})


@pytest.mark.parametrize(
    ("report_type", "totals", "expected"),
    [
        ("waste-generation", {"totalWeight": 123.456789}, "123.5"),
        ("cost-analysis", {"totalRevenue": 1234.567}, "$1234.57"),
        ("collection-efficiency", {"efficiencyRate": 85.6789}, "85.7%"),
    ],
)
def test_camel_case_totals_are_read(report_type, totals, expected):
    assert derive_kpis(report_type, totals)[0].value == expected


def test_camel_case_counts_and_secondary_totals():
    waste = derive_kpis("waste-generation", {"totalCollections": 4, "averageWeight": 2.5})
    assert [kpi.value for kpi in waste[1:]] == [4, "2.5"]
    efficiency = derive_kpis("collection-efficiency", {"scheduledPickups": 3, "completedPickups": 2})
    assert [kpi.value for kpi in efficiency[1:]] == [3, 2]
    cost = derive_kpis("cost-analysis", {"averageCost": 150.5, "paidRevenue": 250.75})
    assert [kpi.value for kpi in cost[1:]] == ["$150.50", "$250.75"]


def test_snake_case_key_wins_over_camel_case():
    assert derive_kpis("waste-generation", {"total_weight": 1.0, "totalWeight": 9.0})[0].value == "1.0"
