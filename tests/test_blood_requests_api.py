"""API tests for blood requests: creation, cancellation and the blood-bank approval queue."""
from raktsarthi.core.security import create_user_token
from raktsarthi.models import BloodRequest
from tests.conftest import auth_headers, make_user

URL = "/api/v1/requests/"
QUEUE = "/api/v1/bloodbank/requests"


def request_payload(**overrides):
    payload = {
        "patient_name": "Meera Joshi",
        "blood_group": "A+",
        "units": 3,
        "contact_number": "9000000001",
        "hospital": {"name": "Ruby Hall Clinic", "address": "Pune"},
    }
    payload.update(overrides)
    return payload


def units_of(client, headers, blood_group):
    response = client.get("/api/v1/bloodbank/settings/inventory", headers=headers)
    return {item["blood_group"]: item["units"] for item in response.json()["inventory"]}[blood_group]


def set_units(client, headers, blood_group, units):
    client.patch(
        f"/api/v1/bloodbank/settings/inventory/{blood_group.replace('+', '%2B')}",
        json={"units": units},
        headers=headers,
    )


def test_create_request_defaults(client, user_headers):
    response = client.post(URL, json=request_payload(), headers=user_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["urgency"] == "normal"
    assert body["required_by"]
    assert body["hospital"]["name"] == "Ruby Hall Clinic"
    assert body["blood_bank_response"] is None


def test_units_must_be_positive(client, user_headers):
    response = client.post(URL, json=request_payload(units=0), headers=user_headers)
    assert response.status_code == 422


def test_public_list_and_my_requests(client, user_headers):
    client.post(URL, json=request_payload(), headers=user_headers)
    client.post(URL, json=request_payload(blood_group="B-"), headers=user_headers)

    assert len(client.get(URL).json()) == 2
    assert len(client.get(URL, params={"blood_group": "B-"}).json()) == 1
    assert len(client.get(URL + "my-requests", headers=user_headers).json()) == 2


def test_requester_can_cancel_pending_request(client, user_headers):
    request_id = client.post(URL, json=request_payload(), headers=user_headers).json()["id"]
    response = client.patch(f"{URL}{request_id}/status", json={"status": "cancelled"}, headers=user_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"

    response = client.patch(f"{URL}{request_id}/status", json={"status": "cancelled"}, headers=user_headers)
    assert response.status_code == 400


def test_requester_cannot_fulfil_request(client, user_headers):
    request_id = client.post(URL, json=request_payload(), headers=user_headers).json()["id"]
    response = client.patch(f"{URL}{request_id}/status", json={"status": "fulfilled"}, headers=user_headers)
    assert response.status_code == 422


def test_only_requester_can_cancel(client, db, user_headers):
    request_id = client.post(URL, json=request_payload(), headers=user_headers).json()["id"]
    other = make_user(db, email="other@example.com")
    response = client.patch(
        f"{URL}{request_id}/status",
        json={"status": "cancelled"},
        headers=auth_headers(create_user_token(other.id)),
    )
    assert response.status_code == 403


def test_approve_decrements_inventory(client, user_headers, bank_headers, blood_bank):
    set_units(client, bank_headers, "A+", 10)
    request_id = client.post(URL, json=request_payload(units=3), headers=user_headers).json()["id"]

    response = client.post(f"{QUEUE}/{request_id}/approve", json={"note": "Ready for pickup"}, headers=bank_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "fulfilled"
    assert body["blood_bank_response"]["status"] == "approved"
    assert body["blood_bank_response"]["blood_bank_id"] == blood_bank.id
    assert body["blood_bank_response"]["note"] == "Ready for pickup"
    assert units_of(client, bank_headers, "A+") == 7


def test_approve_clamps_inventory_at_zero(client, user_headers, bank_headers):
    set_units(client, bank_headers, "A+", 2)
    request_id = client.post(URL, json=request_payload(units=5), headers=user_headers).json()["id"]
    response = client.post(f"{QUEUE}/{request_id}/approve", headers=bank_headers)
    assert response.status_code == 200
    assert units_of(client, bank_headers, "A+") == 0


def test_approve_twice_rejected(client, user_headers, bank_headers):
    set_units(client, bank_headers, "A+", 10)
    request_id = client.post(URL, json=request_payload(units=3), headers=user_headers).json()["id"]
    client.post(f"{QUEUE}/{request_id}/approve", headers=bank_headers)
    response = client.post(f"{QUEUE}/{request_id}/approve", headers=bank_headers)
    assert response.status_code == 400
    assert units_of(client, bank_headers, "A+") == 7


def test_approve_with_missing_group_rolls_back(client, db, user_headers, bank_headers, blood_bank):
    blood_bank.inventory = [{"blood_group": "O+", "units": 4}]
    db.commit()
    request_id = client.post(URL, json=request_payload(), headers=user_headers).json()["id"]

    response = client.post(f"{QUEUE}/{request_id}/approve", headers=bank_headers)
    assert response.status_code == 404
    assert "A+" in response.json()["detail"]
    db.expire_all()
    assert db.query(BloodRequest).filter(BloodRequest.id == request_id).one().status == "pending"


def test_reject_leaves_inventory(client, user_headers, bank_headers):
    set_units(client, bank_headers, "A+", 10)
    request_id = client.post(URL, json=request_payload(), headers=user_headers).json()["id"]
    response = client.post(f"{QUEUE}/{request_id}/reject", json={"note": "Out of stock"}, headers=bank_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"
    assert response.json()["blood_bank_response"]["status"] == "rejected"
    assert units_of(client, bank_headers, "A+") == 10


def test_queue_orders_by_urgency(client, user_headers, bank_headers):
    for urgency in ("normal", "critical", "urgent"):
        client.post(URL, json=request_payload(urgency=urgency), headers=user_headers)
    cancelled = client.post(URL, json=request_payload(urgency="critical"), headers=user_headers).json()["id"]
    client.patch(f"{URL}{cancelled}/status", json={"status": "cancelled"}, headers=user_headers)

    response = client.get(QUEUE, headers=bank_headers)
    assert response.status_code == 200
    assert [r["urgency"] for r in response.json()] == ["critical", "urgent", "normal"]

    response = client.get(QUEUE, params={"urgency": "urgent"}, headers=bank_headers)
    assert len(response.json()) == 1


def test_stats_and_approved_list(client, user_headers, bank_headers):
    first = client.post(URL, json=request_payload(), headers=user_headers).json()["id"]
    second = client.post(URL, json=request_payload(blood_group="O-"), headers=user_headers).json()["id"]
    client.post(URL, json=request_payload(urgency="critical"), headers=user_headers)
    client.post(f"{QUEUE}/{first}/approve", headers=bank_headers)
    client.post(f"{QUEUE}/{second}/reject", headers=bank_headers)

    stats = client.get(f"{QUEUE}/stats/summary", headers=bank_headers).json()
    assert stats["pending"] == 1
    assert stats["approved"] == 1
    assert stats["rejected"] == 1
    assert stats["by_urgency"]["critical"] == 1

    approved = client.get(f"{QUEUE}/approved", headers=bank_headers).json()
    assert [r["id"] for r in approved] == [first]
