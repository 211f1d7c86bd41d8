"""
Tests for the plan table: building, validation, JSON override and catalog.
"""
import json

import pytest

from barberbook.core.errors import ConfigError
from barberbook.features.plans.service import (
    DEFAULT_PLAN_CATALOG,
    build_limits_table,
    default_limits_table,
    format_limit,
    get_plan_info,
    load_limits_table,
    restrictive_limits_table,
    validate_limits_table,
)
from barberbook.models.limits import LOCKED_LIMITS, UNBOUNDED
from barberbook.models.tier import Tier


def test_default_table_is_total_and_valid():
    table = default_limits_table()
    assert set(table) == set(Tier)
    validate_limits_table(table)


def test_default_table_values():
    table = default_limits_table()
    free, pro, business = table[Tier.FREE], table[Tier.PRO], table[Tier.BUSINESS]

    assert (free.max_services, free.max_photos) == (5, 10)
    assert not free.has_financial_dashboard and not free.has_ai_reports and not free.has_custom_domain

    assert pro.max_services == UNBOUNDED and pro.max_photos == UNBOUNDED
    assert pro.has_financial_dashboard and pro.has_ai_reports and pro.has_custom_domain
    assert not pro.has_team_management

    assert business.has_team_management


def test_commission_rate_is_zero_and_in_range_for_every_tier():
    for limits in default_limits_table().values():
        assert 0 <= limits.commission_rate <= 100
        assert limits.commission_rate == 0


def test_table_is_read_only():
    table = default_limits_table()
    with pytest.raises(TypeError):
        table[Tier.FREE] = table[Tier.PRO]


def test_monotonic_across_default_table():
    table = default_limits_table()
    ordered = Tier.ordered()
    flags = ("has_financial_dashboard", "has_custom_domain", "has_team_management", "has_ai_reports")
    for i, lower in enumerate(ordered):
        for higher in ordered[i + 1:]:
            lo, hi = table[lower], table[higher]
            assert hi.max_services >= lo.max_services
            assert hi.max_photos >= lo.max_photos
            for flag in flags:
                if getattr(lo, flag):
                    assert getattr(hi, flag)


def test_build_rejects_commission_out_of_range(raw_limits):
    raw_limits["PRO"]["commission_rate"] = 150
    with pytest.raises(ConfigError) as exc_info:
        build_limits_table(raw_limits)
    assert exc_info.value.code == "config_error"
    assert exc_info.value.tier == "PRO"


def test_build_rejects_unknown_tier(raw_limits):
    raw_limits["GOLD"] = dict(raw_limits["BUSINESS"])
    with pytest.raises(ConfigError):
        build_limits_table(raw_limits)


def test_build_accepts_camel_case_table():
    table = build_limits_table({
        "FREE": {"maxServices": 5, "maxPhotos": 10, "commissionRate": 0},
        "PRO": {"maxServices": 9999, "maxPhotos": 9999, "hasFinancialDashboard": True, "hasAIReports": True},
        "BUSINESS": {
            "maxServices": 9999,
            "maxPhotos": 9999,
            "hasFinancialDashboard": True,
            "hasAIReports": True,
            "hasTeamManagement": True,
        },
    })
    validate_limits_table(table)
    assert table[Tier.BUSINESS].has_team_management


def test_validate_rejects_missing_tier(raw_limits):
    del raw_limits["BUSINESS"]
    with pytest.raises(ConfigError) as exc_info:
        validate_limits_table(build_limits_table(raw_limits))
    assert exc_info.value.tier == "BUSINESS"


def test_validate_rejects_decreasing_quota(raw_limits):
    raw_limits["PRO"]["max_services"] = 3
    with pytest.raises(ConfigError):
        validate_limits_table(build_limits_table(raw_limits))


def test_validate_rejects_lost_flag(raw_limits):
    raw_limits["BUSINESS"]["has_ai_reports"] = False
    with pytest.raises(ConfigError) as exc_info:
        validate_limits_table(build_limits_table(raw_limits))
    assert "has_ai_reports" in exc_info.value.message


def test_validate_respects_custom_tier_order(raw_limits):
    table = build_limits_table(raw_limits)
    validate_limits_table(table, tiers=(Tier.FREE, Tier.PRO))
    with pytest.raises(ConfigError):
        validate_limits_table(table, tiers=(Tier.BUSINESS, Tier.FREE))


def test_load_limits_table_from_json(tmp_path, raw_limits):
    path = tmp_path / "limits.json"
    path.write_text(json.dumps(raw_limits), encoding="utf-8")
    table = load_limits_table(path)
    assert table == default_limits_table()


def test_load_limits_table_bad_json(tmp_path):
    path = tmp_path / "limits.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_limits_table(path)


def test_load_limits_table_requires_object(tmp_path):
    path = tmp_path / "limits.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_limits_table(path)


def test_load_limits_table_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_limits_table(tmp_path / "nope.json")


def test_restrictive_table_uses_lowest_tier(raw_limits):
    del raw_limits["PRO"]
    table = restrictive_limits_table(build_limits_table(raw_limits))
    free = table[Tier.FREE]
    assert all(limits == free for limits in table.values())
    assert set(table) == set(Tier)
    validate_limits_table(table)


def test_restrictive_table_locks_when_floor_missing():
    table = restrictive_limits_table({})
    assert all(limits == LOCKED_LIMITS for limits in table.values())
    assert LOCKED_LIMITS.max_services == 0
    assert not LOCKED_LIMITS.has_financial_dashboard


def test_format_limit():
    assert format_limit(5) == "5"
    assert format_limit(100) == "100"
    assert format_limit(UNBOUNDED) == "∞"


def test_plan_catalog_covers_every_tier():
    assert set(DEFAULT_PLAN_CATALOG) == set(Tier)
    assert get_plan_info("free").name == "Starter"
    assert get_plan_info(Tier.PRO).price_label == "R$ 49/mês"
    assert get_plan_info("BUSINESS").price_label == "R$ 129/mês"
    assert "Relatórios IA" in get_plan_info(Tier.PRO).features


def test_plan_catalog_missing_entry_raises():
    with pytest.raises(ConfigError):
        get_plan_info(Tier.PRO, catalog={})
