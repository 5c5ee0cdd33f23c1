from __future__ import annotations

import math

import pytest

from conftest import demo, device, make_campaign
from core.aggregation import (
    aggregate,
    aggregate_age_groups,
    aggregate_age_groups_by_gender,
    aggregate_devices,
    aggregate_genders,
    aggregate_regions,
    aggregates_to_frame,
    average_of,
    demographic_frame,
    device_frame,
    regional_frame,
    sort_by_revenue,
)
from core.models import campaign_from_dict


def test_male_age_group_merges_across_campaigns(two_campaigns) -> None:
    by_gender = aggregate_age_groups_by_gender(demographic_frame(two_campaigns))

    bucket = by_gender["male"]["25-34"]
    assert bucket.impressions == 1500
    assert bucket.clicks == 75
    assert bucket.conversions == 6
    assert bucket.spend == pytest.approx(100.0)
    assert bucket.revenue == pytest.approx(150.0)
    assert bucket.ctr == pytest.approx(5.0)
    assert bucket.conversion_rate == pytest.approx(8.0)
    assert by_gender["female"] == {}


def test_gender_totals_cover_known_genders(two_campaigns) -> None:
    genders = aggregate_genders(demographic_frame(two_campaigns))
    assert list(genders) == ["male", "female"]
    assert genders["male"].clicks == 75
    assert genders["female"].clicks == 0
    assert genders["female"].ctr == 0


def test_zero_share_contributes_no_spend_or_revenue() -> None:
    campaigns = [
        campaign_from_dict(make_campaign("Z", 1000, 5000, demographic=[demo("female", "45-54", 0, 100, 10, 1)])),
    ]
    bucket = aggregate_age_groups(demographic_frame(campaigns))["45-54"]
    assert bucket.spend == 0
    assert bucket.revenue == 0
    assert bucket.clicks == 10


def test_zero_denominators_give_zero_rates() -> None:
    campaigns = [
        campaign_from_dict(make_campaign("Z", 0, 100, device=[device("Tablet", 50, 0, 0, 0)])),
    ]
    bucket = aggregate_devices(device_frame(campaigns))["Tablet"]
    for value in (bucket.ctr, bucket.conversion_rate, bucket.roas):
        assert value == 0
        assert math.isfinite(value)


def test_device_buckets_keep_first_seen_order_and_sum_traffic_share(two_campaigns) -> None:
    buckets = aggregate_devices(device_frame(two_campaigns))
    assert list(buckets) == ["Mobile", "Desktop"]
    mobile = buckets["Mobile"]
    assert mobile.traffic_share == pytest.approx(160.0)
    assert mobile.spend == pytest.approx(100 * 0.6 + 50 * 1.0)
    assert mobile.revenue == pytest.approx(200 * 0.6 + 50 * 1.0)
    assert mobile.roas == pytest.approx(170 / 110)


def test_device_labels_are_not_case_folded() -> None:
    campaigns = [
        campaign_from_dict(make_campaign("A", 10, 10, device=[device("Mobile", 50, 1, 1, 0), device("mobile", 50, 1, 1, 0)])),
    ]
    assert list(aggregate_devices(device_frame(campaigns))) == ["Mobile", "mobile"]


def test_regions_use_absolute_spend_without_allocation(two_campaigns) -> None:
    buckets = aggregate_regions(regional_frame(two_campaigns))
    dubai = buckets["Dubai"]
    assert dubai.spend == pytest.approx(110.0)
    assert dubai.revenue == pytest.approx(200.0)
    assert dubai.country == "UAE"
    assert dubai.roas == pytest.approx(200 / 110)


def test_composite_keys_are_tuples(two_campaigns) -> None:
    buckets = aggregate(demographic_frame(two_campaigns), ["gender", "age_group"])
    assert list(buckets) == [("male", "25-34")]
    bucket = buckets[("male", "25-34")]
    assert bucket.to_record()["gender"] == "male"
    assert bucket.to_record()["age_group"] == "25-34"
    assert bucket.label == "male / 25-34"


def test_filter_predicate_excluding_everything_returns_empty(two_campaigns) -> None:
    assert aggregate(demographic_frame(two_campaigns), "age_group", lambda df: df["gender"] == "other") == {}


def test_empty_input_returns_empty() -> None:
    assert aggregate_devices(device_frame([])) == {}
    assert aggregate_regions(regional_frame([])) == {}


def test_aggregation_is_idempotent(two_campaigns) -> None:
    frame = device_frame(two_campaigns)
    assert aggregate_devices(frame) == aggregate_devices(frame)
    assert aggregate_regions(regional_frame(two_campaigns)) == aggregate_regions(regional_frame(two_campaigns))


def test_sort_by_revenue_and_averages(two_campaigns) -> None:
    regions = sort_by_revenue(aggregate_regions(regional_frame(two_campaigns)))
    assert [r.key for r in regions] == ["Dubai", "Atlantis"]
    assert average_of(regions, "roas") == pytest.approx((200 / 110 + 50 / 40) / 2)
    assert average_of([], "roas") == 0.0

    table = aggregates_to_frame(regions)
    assert table["region"].tolist() == ["Dubai", "Atlantis"]
    assert {"ctr", "conversion_rate", "roas", "country"}.issubset(table.columns)
