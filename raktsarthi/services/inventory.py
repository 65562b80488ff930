"""
Blood-bank inventory reconciliation.

A bank's stock lives in two places: the embedded `BloodBank.inventory` list
(written at registration) and the standalone `Inventory` row. Readers prefer
the standalone row whenever it has items, fall back to the embedded list, and
synthesise zero stock for every blood group when both are empty. Every write
goes to the standalone row and is copied onto the embedded list.

Items are plain dicts: {"blood_group": "A+", "units": 0, "last_updated": iso-string}.
"""
import copy
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from raktsarthi.core.exceptions import InventoryGroupNotFound
from raktsarthi.database.database import utcnow
from raktsarthi.models.blood_bank import BloodBank
from raktsarthi.models.enums import BLOOD_GROUPS
from raktsarthi.models.inventory import Inventory

logger = logging.getLogger(__name__)

SOURCE_COLLECTION = "collection"
SOURCE_EMBEDDED = "embedded"
SOURCE_DEFAULT = "default"


def apply_delta(current: int, delta: int) -> int:
    """Add `delta` to a unit count; stock never goes below zero."""
    return max(0, int(current or 0) + int(delta))


def set_absolute(new_units: int) -> int:
    """Replace a unit count outright, clamped at zero."""
    return max(0, int(new_units or 0))


def _timestamp(now: Optional[datetime] = None) -> str:
    return (now or utcnow()).isoformat()


def make_item(blood_group: str, units: int = 0, now: Optional[datetime] = None) -> dict:
    return {"blood_group": blood_group, "units": set_absolute(units), "last_updated": _timestamp(now)}


def default_inventory(now: Optional[datetime] = None) -> List[dict]:
    """Zero units for every blood group."""
    return [make_item(group, 0, now) for group in BLOOD_GROUPS]


def reconcile_inventory(primary: List[dict], secondary: List[dict], now: Optional[datetime] = None) -> List[dict]:
    """
    Pick the inventory to serve. `primary` is the embedded list, `secondary`
    the standalone row's items. Returns a new list (inputs are not mutated).
    """
    if secondary:
        return copy.deepcopy(list(secondary))
    if primary:
        return copy.deepcopy(list(primary))
    return default_inventory(now)


def fill_missing_groups(items: List[dict], now: Optional[datetime] = None) -> List[dict]:
    """Add zero-unit entries for absent blood groups and stamp entries missing `last_updated`."""
    result = copy.deepcopy(list(items or []))
    for item in result:
        item["units"] = set_absolute(item.get("units"))
        if not item.get("last_updated"):
            item["last_updated"] = _timestamp(now)
    present = {item.get("blood_group") for item in result}
    for group in BLOOD_GROUPS:
        if group not in present:
            result.append(make_item(group, 0, now))
    return result


def update_group_units(
    items: List[dict],
    blood_group: str,
    *,
    delta: Optional[int] = None,
    units: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[dict]:
    """
    Return a copy of `items` with one bucket changed, either by `delta`
    (apply_delta) or to `units` (set_absolute). Unknown groups are never inserted.
    """
    if (delta is None) == (units is None):
        raise ValueError("pass exactly one of delta or units")
    result = copy.deepcopy(list(items or []))
    for item in result:
        if item.get("blood_group") == blood_group:
            if delta is not None:
                item["units"] = apply_delta(item.get("units", 0), delta)
            else:
                item["units"] = set_absolute(units)
            item["last_updated"] = _timestamp(now)
            return result
    raise InventoryGroupNotFound(blood_group)


def units_available(items: List[dict], blood_group: str) -> int:
    for item in items or []:
        if item.get("blood_group") == blood_group:
            return int(item.get("units") or 0)
    return 0


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

def _standalone_inventory(db: Session, blood_bank: BloodBank, for_update: bool = False) -> Optional[Inventory]:
    query = db.query(Inventory).filter(Inventory.blood_bank_id == blood_bank.id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def _write_inventory(db: Session, blood_bank: BloodBank, standalone: Optional[Inventory], items: List[dict]) -> Inventory:
    if standalone is None:
        standalone = Inventory(
            blood_bank_id=blood_bank.id,
            blood_bank_name=blood_bank.name,
            items=copy.deepcopy(items),
        )
        db.add(standalone)
    else:
        standalone.items = copy.deepcopy(items)
        standalone.blood_bank_name = blood_bank.name
    standalone.last_modified = utcnow()
    # Keep the embedded snapshot in step for readers that still use it
    blood_bank.inventory = copy.deepcopy(items)
    return standalone


def load_inventory(db: Session, blood_bank: BloodBank) -> Tuple[List[dict], str]:
    """
    Read a bank's inventory and report which store served it. When the
    standalone row is empty the served items are written back to it so later
    reads converge; a failed write-back is logged and the read still succeeds.
    """
    standalone = _standalone_inventory(db, blood_bank)
    secondary = standalone.items if standalone is not None else []
    primary = blood_bank.inventory or []
    items = reconcile_inventory(primary, secondary)
    if secondary:
        return items, SOURCE_COLLECTION

    source = SOURCE_EMBEDDED if primary else SOURCE_DEFAULT
    try:
        _write_inventory(db, blood_bank, standalone, items)
        db.commit()
        logger.info(f"Inventory for blood bank {blood_bank.id} written back from {source} store")
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Inventory write-back failed for blood bank {blood_bank.id}: {e}")
    return items, source


def _mutate_inventory(db: Session, blood_bank: BloodBank, change, commit: bool) -> List[dict]:
    standalone = _standalone_inventory(db, blood_bank, for_update=True)
    current = reconcile_inventory(
        blood_bank.inventory or [],
        standalone.items if standalone is not None else [],
    )
    items = change(current)
    _write_inventory(db, blood_bank, standalone, items)
    if commit:
        db.commit()
    return items


def adjust_units(db: Session, blood_bank: BloodBank, blood_group: str, delta: int, commit: bool = True) -> List[dict]:
    """Increment or decrement one bucket (clamped at zero)."""
    items = _mutate_inventory(
        db, blood_bank,
        lambda current: update_group_units(current, blood_group, delta=delta),
        commit,
    )
    logger.info(f"Blood bank {blood_bank.id}: {blood_group} adjusted by {delta}")
    return items


def set_units(db: Session, blood_bank: BloodBank, blood_group: str, units: int, commit: bool = True) -> List[dict]:
    """Set one bucket to an absolute count (clamped at zero)."""
    items = _mutate_inventory(
        db, blood_bank,
        lambda current: update_group_units(current, blood_group, units=units),
        commit,
    )
    logger.info(f"Blood bank {blood_bank.id}: {blood_group} set to {set_absolute(units)}")
    return items


def save_inventory(db: Session, blood_bank: BloodBank, entries: Iterable[Tuple[str, int]], commit: bool = True) -> List[dict]:
    """
    Full inventory save. Every supplied group is set absolutely; groups not
    supplied keep their current units and absent groups are added at zero.
    """
    entries = list(entries)

    def change(current):
        items = fill_missing_groups(current)
        for blood_group, units in entries:
            items = update_group_units(items, blood_group, units=units)
        return items

    items = _mutate_inventory(db, blood_bank, change, commit)
    logger.info(f"Blood bank {blood_bank.id}: inventory saved ({len(entries)} group(s) set)")
    return items


def deduct_for_request(db: Session, blood_bank: BloodBank, blood_group: str, units: int, commit: bool = False) -> List[dict]:
    """
    Take an approved request's units out of stock. Approval is not gated on
    sufficiency; the bucket clamps at zero.
    """
    def change(current):
        available = units_available(current, blood_group)
        items = update_group_units(current, blood_group, delta=-int(units))
        if available < units:
            logger.warning(
                f"Blood bank {blood_bank.id}: approving {units} unit(s) of {blood_group} "
                f"with only {available} in stock, clamped to 0"
            )
        return items

    items = _mutate_inventory(db, blood_bank, change, commit)
    logger.info(f"Blood bank {blood_bank.id}: {units} unit(s) of {blood_group} deducted for request")
    return items


def fill_embedded_inventory(blood_bank: BloodBank) -> int:
    """Complete a bank's embedded list in place. Returns how many groups were added."""
    current = blood_bank.inventory or []
    items = fill_missing_groups(current)
    blood_bank.inventory = items
    return len(items) - len(current)


def sync_standalone_inventory(db: Session, blood_bank: BloodBank) -> str:
    """
    Ensure the standalone row exists and carries every blood group, seeding it
    from the embedded list (or zeros) when it is empty. Returns the source used.
    The caller commits.
    """
    standalone = _standalone_inventory(db, blood_bank, for_update=True)
    secondary = standalone.items if standalone is not None else []
    primary = blood_bank.inventory or []
    if secondary:
        source = SOURCE_COLLECTION
    else:
        source = SOURCE_EMBEDDED if primary else SOURCE_DEFAULT
    items = fill_missing_groups(reconcile_inventory(primary, secondary))
    _write_inventory(db, blood_bank, standalone, items)
    return source
