"""Unit tests for donor eligibility: disqualifying flags, weight, donation interval, reason order."""
from datetime import date, datetime, timedelta, timezone

from raktsarthi.services.eligibility import (
    LOW_WEIGHT_REASON,
    RECENT_DONATION_REASON,
    days_since,
    evaluate_eligibility,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def healthy_form(**overrides):
    data = {
        "weight": 65,
        "medical_conditions": {},
        "recent_activities": {},
        "current_health": {},
        "donation_history": {},
    }
    data.update(overrides)
    return data


def test_healthy_donor_is_eligible():
    verdict = evaluate_eligibility(healthy_form(), now=NOW)
    assert verdict.is_eligible is True
    assert verdict.reasons == []


def test_reasons_keep_rule_order():
    data = healthy_form(
        weight=45,
        medical_conditions={"bleeding_disorder": True, "hiv_aids": True, "cancer": True},
        recent_activities={"travel_to_malaria_area": True, "tattoo_or_piercing": True},
        current_health={"recent_alcohol_consumption": True, "recent_fever_or_illness": True},
        donation_history={"last_donation_date": "2026-02-20"},
    )
    verdict = evaluate_eligibility(data, now=NOW)
    assert verdict.is_eligible is False
    assert verdict.reasons == [
        "HIV/AIDS",
        "Cancer history",
        "Bleeding disorder",
        "Recent tattoo/piercing (wait 6 months)",
        "Travel to malaria-endemic area (wait 3 months)",
        "Recent fever or illness",
        "Recent alcohol consumption (wait 24 hours)",
        LOW_WEIGHT_REASON,
        RECENT_DONATION_REASON,
    ]


def test_hepatitis_and_heart_disease():
    data = healthy_form(medical_conditions={"hepatitis_bc": True, "heart_disease": True})
    assert evaluate_eligibility(data, now=NOW).reasons == ["Hepatitis B/C", "Heart disease"]


def test_unevaluated_conditions_do_not_disqualify():
    data = healthy_form(
        medical_conditions={"diabetes": True, "asthma": True, "malaria": True, "tuberculosis": True},
        recent_activities={"dental_work": True, "vaccination": True},
    )
    data["lifestyle"] = {"smoker": True, "regular_alcohol_use": True}
    assert evaluate_eligibility(data, now=NOW).is_eligible is True


def test_weight_boundary():
    assert evaluate_eligibility(healthy_form(weight=50), now=NOW).is_eligible is True
    assert evaluate_eligibility(healthy_form(weight=49.9), now=NOW).reasons == [LOW_WEIGHT_REASON]


def test_missing_weight_counts_as_underweight():
    data = healthy_form()
    del data["weight"]
    assert evaluate_eligibility(data, now=NOW).reasons == [LOW_WEIGHT_REASON]


def test_donation_interval_boundary():
    exactly_56 = NOW - timedelta(days=56)
    just_under = NOW - timedelta(days=55, hours=23)
    assert evaluate_eligibility(
        healthy_form(donation_history={"last_donation_date": exactly_56.isoformat()}), now=NOW
    ).is_eligible is True
    assert evaluate_eligibility(
        healthy_form(donation_history={"last_donation_date": just_under.isoformat()}), now=NOW
    ).reasons == [RECENT_DONATION_REASON]


def test_donation_date_accepts_date_objects_and_z_suffix():
    recent = healthy_form(donation_history={"last_donation_date": date(2026, 2, 1)})
    assert evaluate_eligibility(recent, now=NOW).reasons == [RECENT_DONATION_REASON]
    old = healthy_form(donation_history={"last_donation_date": "2025-06-01T00:00:00Z"})
    assert evaluate_eligibility(old, now=NOW).is_eligible is True


def test_unreadable_donation_date_is_not_eligible():
    data = healthy_form(donation_history={"last_donation_date": "last spring"})
    assert evaluate_eligibility(data, now=NOW).reasons == [RECENT_DONATION_REASON]


def test_days_since_floors_partial_days():
    assert days_since(NOW - timedelta(days=3, hours=23), now=NOW) == 3
    assert days_since(None, now=NOW) is None


def test_empty_input():
    verdict = evaluate_eligibility({}, now=NOW)
    assert verdict.is_eligible is False
    assert verdict.reasons == [LOW_WEIGHT_REASON]
