"""Unit tests for inventory reconciliation: clamping, store precedence, write-back, bucket updates."""
from datetime import datetime, timezone

import pytest

from raktsarthi.core.exceptions import InventoryGroupNotFound
from raktsarthi.models import Inventory
from raktsarthi.models.enums import BLOOD_GROUPS
from raktsarthi.services import inventory as inventory_service
from raktsarthi.services.inventory import (
    SOURCE_COLLECTION,
    SOURCE_DEFAULT,
    SOURCE_EMBEDDED,
    apply_delta,
    default_inventory,
    fill_missing_groups,
    reconcile_inventory,
    set_absolute,
    update_group_units,
)
from tests.conftest import make_blood_bank

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def units_by_group(items):
    return {item["blood_group"]: item["units"] for item in items}


def test_apply_delta_clamps_at_zero():
    assert apply_delta(5, 3) == 8
    assert apply_delta(5, -3) == 2
    assert apply_delta(2, -5) == 0
    assert apply_delta(None, 4) == 4


def test_set_absolute_clamps_at_zero():
    assert set_absolute(12) == 12
    assert set_absolute(-3) == 0


def test_default_inventory_has_every_group_at_zero():
    items = default_inventory(NOW)
    assert [item["blood_group"] for item in items] == BLOOD_GROUPS
    assert all(item["units"] == 0 for item in items)
    assert all(item["last_updated"] == NOW.isoformat() for item in items)


def test_reconcile_prefers_standalone_items():
    primary = [{"blood_group": "A+", "units": 1}]
    secondary = [{"blood_group": "A+", "units": 9}]
    assert reconcile_inventory(primary, secondary) == secondary


def test_reconcile_falls_back_to_embedded_then_default():
    primary = [{"blood_group": "A+", "units": 1}]
    assert reconcile_inventory(primary, []) == primary
    assert units_by_group(reconcile_inventory([], [], NOW)) == {group: 0 for group in BLOOD_GROUPS}


def test_reconcile_returns_copies():
    secondary = [{"blood_group": "A+", "units": 9}]
    result = reconcile_inventory([], secondary)
    result[0]["units"] = 0
    assert secondary[0]["units"] == 9


def test_update_group_units_delta_and_absolute():
    items = default_inventory(NOW)
    items = update_group_units(items, "B-", delta=4)
    items = update_group_units(items, "B-", delta=-10)
    assert units_by_group(items)["B-"] == 0
    items = update_group_units(items, "O+", units=7)
    assert units_by_group(items)["O+"] == 7


def test_update_group_units_stamps_last_updated():
    items = default_inventory(NOW)
    updated = update_group_units(items, "AB+", units=3)
    stamped = [item for item in updated if item["blood_group"] == "AB+"][0]
    assert stamped["last_updated"] != NOW.isoformat()


def test_update_group_units_rejects_unknown_group():
    items = [{"blood_group": "A+", "units": 1}]
    with pytest.raises(InventoryGroupNotFound) as exc_info:
        update_group_units(items, "B+", delta=1)
    assert exc_info.value.status_code == 404
    assert "B+" in exc_info.value.detail
    assert len(items) == 1


def test_update_group_units_needs_exactly_one_change():
    with pytest.raises(ValueError):
        update_group_units(default_inventory(NOW), "A+")
    with pytest.raises(ValueError):
        update_group_units(default_inventory(NOW), "A+", delta=1, units=2)


def test_fill_missing_groups():
    items = fill_missing_groups([{"blood_group": "A+", "units": 4}], NOW)
    assert units_by_group(items) == {**{group: 0 for group in BLOOD_GROUPS}, "A+": 4}
    assert all(item["last_updated"] for item in items)


def test_load_writes_back_embedded_inventory(db):
    embedded = [{"blood_group": group, "units": 2, "last_updated": NOW.isoformat()} for group in BLOOD_GROUPS]
    blood_bank = make_blood_bank(db, inventory=embedded)

    items, source = inventory_service.load_inventory(db, blood_bank)
    assert source == SOURCE_EMBEDDED
    assert units_by_group(items)["A+"] == 2

    standalone = db.query(Inventory).filter(Inventory.blood_bank_id == blood_bank.id).one()
    assert units_by_group(standalone.items)["A+"] == 2
    assert standalone.blood_bank_name == blood_bank.name

    _, source = inventory_service.load_inventory(db, blood_bank)
    assert source == SOURCE_COLLECTION


def test_load_synthesises_default_inventory(db):
    blood_bank = make_blood_bank(db, inventory=[])
    items, source = inventory_service.load_inventory(db, blood_bank)
    assert source == SOURCE_DEFAULT
    assert units_by_group(items) == {group: 0 for group in BLOOD_GROUPS}
    assert db.query(Inventory).filter(Inventory.blood_bank_id == blood_bank.id).count() == 1


def test_adjust_units_updates_both_stores(db):
    blood_bank = make_blood_bank(db)
    inventory_service.set_units(db, blood_bank, "A+", 10)
    inventory_service.adjust_units(db, blood_bank, "A+", -3)

    db.refresh(blood_bank)
    standalone = db.query(Inventory).filter(Inventory.blood_bank_id == blood_bank.id).one()
    assert units_by_group(standalone.items)["A+"] == 7
    assert units_by_group(blood_bank.inventory)["A+"] == 7


def test_deduct_for_request_clamps(db):
    blood_bank = make_blood_bank(db)
    inventory_service.set_units(db, blood_bank, "O-", 2)
    items = inventory_service.deduct_for_request(db, blood_bank, "O-", 5, commit=True)
    assert units_by_group(items)["O-"] == 0


def test_save_inventory_keeps_unlisted_groups(db):
    blood_bank = make_blood_bank(db)
    inventory_service.set_units(db, blood_bank, "B+", 6)
    items = inventory_service.save_inventory(db, blood_bank, [("A+", 3), ("AB-", -2)])
    units = units_by_group(items)
    assert units["A+"] == 3
    assert units["AB-"] == 0
    assert units["B+"] == 6
    assert set(units) == set(BLOOD_GROUPS)


def test_sync_standalone_inventory_fills_groups(db):
    blood_bank = make_blood_bank(db, inventory=[{"blood_group": "A+", "units": 5}])
    source = inventory_service.sync_standalone_inventory(db, blood_bank)
    db.commit()
    assert source == SOURCE_EMBEDDED
    standalone = db.query(Inventory).filter(Inventory.blood_bank_id == blood_bank.id).one()
    assert units_by_group(standalone.items)["A+"] == 5
    assert len(standalone.items) == len(BLOOD_GROUPS)


def test_fill_embedded_inventory(db):
    blood_bank = make_blood_bank(db, inventory=[{"blood_group": "O+", "units": 1}])
    added = inventory_service.fill_embedded_inventory(blood_bank)
    db.commit()
    db.refresh(blood_bank)
    assert added == len(BLOOD_GROUPS) - 1
    assert units_by_group(blood_bank.inventory)["O+"] == 1
