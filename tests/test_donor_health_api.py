"""API tests for donor health forms: submission, consent, duplicates, eligibility, review and updates."""
from tests.conftest import auth_headers, make_user
from raktsarthi.core.security import create_user_token

URL = "/api/v1/donor-health/"


def form_payload(**overrides):
    payload = {
        "full_name": "Asha Verma",
        "date_of_birth": "1994-05-10",
        "gender": "female",
        "blood_group": "O+",
        "weight": 62,
        "phone": "9876543210",
        "email": "donor@example.com",
        "city": "Pune",
        "consent": {
            "information_accurate": True,
            "consent_to_donate": True,
            "understands_process": True,
        },
    }
    payload.update(overrides)
    return payload


def test_submit_eligible_form(client, user_headers):
    response = client.post(URL, json=form_payload(), headers=user_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["is_eligible"] is True
    assert body["ineligibility_reasons"] == []
    assert body["status"] == "pending"
    assert body["medical_conditions"]["hiv_aids"] is False


def test_submit_ineligible_form(client, user_headers):
    payload = form_payload(
        weight=48,
        medical_conditions={"hiv_aids": True, "diabetes": True},
        current_health={"recent_fever_or_illness": True},
    )
    response = client.post(URL, json=payload, headers=user_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["is_eligible"] is False
    assert body["ineligibility_reasons"] == ["HIV/AIDS", "Recent fever or illness", "Weight below 50kg"]


def test_incomplete_consent_rejected(client, user_headers):
    payload = form_payload(consent={"information_accurate": True, "consent_to_donate": False, "understands_process": True})
    response = client.post(URL, json=payload, headers=user_headers)
    assert response.status_code == 400


def test_second_pending_form_rejected(client, user_headers):
    assert client.post(URL, json=form_payload(), headers=user_headers).status_code == 201
    response = client.post(URL, json=form_payload(), headers=user_headers)
    assert response.status_code == 400
    assert "pending" in response.json()["detail"]


def test_eligibility_without_form(client, user_headers):
    response = client.get(URL + "eligibility", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["has_form"] is False
    assert response.json()["message"]
    assert client.get(URL + "latest", headers=user_headers).status_code == 404


def test_eligibility_reflects_latest_form(client, user_headers):
    form_id = client.post(URL, json=form_payload(weight=45), headers=user_headers).json()["id"]
    response = client.get(URL + "eligibility", headers=user_headers)
    body = response.json()
    assert body["has_form"] is True
    assert body["form_id"] == form_id
    assert body["is_eligible"] is False
    assert client.get(URL + "my-forms", headers=user_headers).json()[0]["id"] == form_id


def test_update_recomputes_eligibility_and_resets_status(client, user_headers, bank_headers):
    form_id = client.post(URL, json=form_payload(weight=45), headers=user_headers).json()["id"]
    response = client.put(
        f"{URL}{form_id}/review",
        json={"status": "requires_review", "review_notes": "Confirm weight"},
        headers=bank_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "requires_review"

    response = client.put(f"{URL}{form_id}", json={"weight": 58}, headers=user_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["is_eligible"] is True
    assert body["ineligibility_reasons"] == []
    assert body["status"] == "pending"


def test_reviewed_form_cannot_be_edited(client, user_headers, bank_headers, blood_bank):
    form_id = client.post(URL, json=form_payload(), headers=user_headers).json()["id"]
    response = client.put(f"{URL}{form_id}/review", json={"status": "approved"}, headers=bank_headers)
    assert response.json()["reviewed_by"] == blood_bank.id
    assert response.json()["reviewed_at"] is not None

    response = client.put(f"{URL}{form_id}", json={"weight": 70}, headers=user_headers)
    assert response.status_code == 400


def test_only_owner_can_edit(client, db, user_headers):
    form_id = client.post(URL, json=form_payload(), headers=user_headers).json()["id"]
    other = make_user(db, email="other@example.com")
    response = client.put(f"{URL}{form_id}", json={"weight": 70}, headers=auth_headers(create_user_token(other.id)))
    assert response.status_code == 403


def test_bank_lists_forms_with_filters(client, user_headers, bank_headers):
    client.post(URL, json=form_payload(weight=40), headers=user_headers)
    response = client.get(URL, params={"is_eligible": "false"}, headers=bank_headers)
    assert response.status_code == 200
    assert len(response.json()) == 1
    response = client.get(URL, params={"status": "approved"}, headers=bank_headers)
    assert response.json() == []
    assert client.get(URL, headers=user_headers).status_code == 403


def test_review_cannot_reset_to_pending(client, user_headers, bank_headers):
    form_id = client.post(URL, json=form_payload(), headers=user_headers).json()["id"]
    response = client.put(f"{URL}{form_id}/review", json={"status": "pending"}, headers=bank_headers)
    assert response.status_code == 422
