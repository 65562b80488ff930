"""
Donor eligibility engine: derive an eligibility verdict from a health form.
Returns (is_eligible, reasons); reasons keep the order the rules are listed in.

Only the rules below are evaluated. Other answers on the form (diabetes, blood
pressure, asthma, lifestyle, ...) are collected for the reviewing blood bank
but do not change the automatic verdict.
"""
import logging
import math
from datetime import date, datetime, timezone
from typing import Any, List, NamedTuple, Optional

logger = logging.getLogger(__name__)

MIN_WEIGHT_KG = 50
MIN_DAYS_BETWEEN_DONATIONS = 56
SECONDS_PER_DAY = 86400

# (section, answer, reason) in evaluation order
FLAG_RULES = [
    ("medical_conditions", "hiv_aids", "HIV/AIDS"),
    ("medical_conditions", "hepatitis_bc", "Hepatitis B/C"),
    ("medical_conditions", "cancer", "Cancer history"),
    ("medical_conditions", "heart_disease", "Heart disease"),
    ("medical_conditions", "bleeding_disorder", "Bleeding disorder"),
    ("recent_activities", "tattoo_or_piercing", "Recent tattoo/piercing (wait 6 months)"),
    ("recent_activities", "travel_to_malaria_area", "Travel to malaria-endemic area (wait 3 months)"),
    ("current_health", "recent_fever_or_illness", "Recent fever or illness"),
    ("current_health", "recent_alcohol_consumption", "Recent alcohol consumption (wait 24 hours)"),
]
LOW_WEIGHT_REASON = f"Weight below {MIN_WEIGHT_KG}kg"
RECENT_DONATION_REASON = f"Less than {MIN_DAYS_BETWEEN_DONATIONS} days since last donation"


class EligibilityVerdict(NamedTuple):
    is_eligible: bool
    reasons: List[str]


def _as_utc_datetime(value: Any) -> Optional[datetime]:
    """Normalise a stored donation date (date, datetime or ISO string) to an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise TypeError(f"unsupported date value {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_since(value: Any, now: Optional[datetime] = None) -> Optional[int]:
    """Whole days elapsed since `value`, floored; None when no date is set."""
    then = _as_utc_datetime(value)
    if then is None:
        return None
    current = _as_utc_datetime(now) if now is not None else datetime.now(timezone.utc)
    return math.floor((current - then).total_seconds() / SECONDS_PER_DAY)


def _below_min_weight(weight: Any) -> bool:
    # A missing or unreadable weight disqualifies
    if weight is None or isinstance(weight, bool):
        return True
    try:
        return float(weight) < MIN_WEIGHT_KG
    except (TypeError, ValueError):
        return True


def evaluate_eligibility(health_data: dict, now: Optional[datetime] = None) -> EligibilityVerdict:
    """
    Evaluate a donor health form.

    `health_data` holds `weight` plus the `medical_conditions`,
    `recent_activities`, `current_health` and `donation_history` sections.
    Missing answers count as "no"; a missing weight counts as underweight.
    """
    reasons: List[str] = []
    data = health_data or {}

    for section, answer, reason in FLAG_RULES:
        if bool((data.get(section) or {}).get(answer)):
            reasons.append(reason)

    if _below_min_weight(data.get("weight")):
        reasons.append(LOW_WEIGHT_REASON)

    history = data.get("donation_history") or {}
    last_donation = history.get("last_donation_date")
    if last_donation:
        try:
            elapsed = days_since(last_donation, now=now)
        except (TypeError, ValueError) as e:
            # Cannot prove the interval has passed
            logger.warning(f"Unreadable last donation date {last_donation!r}: {e}")
            reasons.append(RECENT_DONATION_REASON)
        else:
            if elapsed is not None and elapsed < MIN_DAYS_BETWEEN_DONATIONS:
                reasons.append(RECENT_DONATION_REASON)

    return EligibilityVerdict(is_eligible=not reasons, reasons=reasons)
