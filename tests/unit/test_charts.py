from waste_reports.common.constants import FALLBACK_COLOR
from waste_reports.common.models import Report, ReportType
from waste_reports.pipeline.charts import BAR_CHART, PIE_CHART, derive_chart_series, series_to_dict


def test_waste_generation_has_pie_by_type_and_bar_by_area():
    report = Report(
        ReportType.WASTE_GENERATION,
        totals={},
        groupings={
            "by_area": {"North": {"count": 2, "weight": 12.5}},
            "by_waste_type": {"Organic": {"count": 1, "weight": 5.0}, "Glass": {"count": 1, "weight": 7.5}},
        },
    )
    series = derive_chart_series("waste-generation", report)

    assert [(p.name, p.value, p.color) for p in series[PIE_CHART]] == [
        ("Organic", 5.0, "#10B981"),
        ("Glass", 7.5, FALLBACK_COLOR),
    ]
    assert [(p.name, p.value) for p in series[BAR_CHART]] == [("North", 12.5)]


def test_efficiency_and_cost_use_their_palettes():
    efficiency = derive_chart_series(
        "collection-efficiency",
        {"status_breakdown": {"Completed": 2, "Cancelled": 1, "Lost": 3}},
    )
    assert [p.color for p in efficiency[PIE_CHART]] == ["#10B981", "#EF4444", FALLBACK_COLOR]
    assert BAR_CHART not in efficiency

    cost = derive_chart_series("cost-analysis", {"payment_status": {"Paid": 1, "Pending Verification": 0}})
    assert series_to_dict(cost) == {
        PIE_CHART: [
            {"name": "Paid", "value": 1, "color": "#10B981"},
            {"name": "Pending Verification", "value": 0, "color": "#F59E0B"},
        ]
    }


def test_missing_groupings_give_empty_series():
    assert derive_chart_series("waste-generation", None) == {PIE_CHART: [], BAR_CHART: []}


def test_camel_case_grouping_names_are_read():
    waste = derive_chart_series(
        "waste-generation",
        {"byWasteType": {"Organic": {"count": 1, "weight": 5.0}}, "byArea": {"North": {"count": 1, "weight": 5.0}}},
    )
    assert [(p.name, p.value) for p in waste[PIE_CHART]] == [("Organic", 5.0)]
    assert [p.name for p in waste[BAR_CHART]] == ["North"]

    efficiency = derive_chart_series("collection-efficiency", {"statusBreakdown": {"Scheduled": 3}})
    assert [(p.name, p.value) for p in efficiency[PIE_CHART]] == [("Scheduled", 3)]
    cost = derive_chart_series("cost-analysis", {"paymentStatus": {"Unpaid": 2}})
    assert [(p.name, p.value) for p in cost[PIE_CHART]] == [("Unpaid", 2)]
