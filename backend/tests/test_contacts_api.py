"""HTTP tests for /api/v1/contacts (auth disabled – dev user is ADMIN)."""

import pytest
from fastapi.testclient import TestClient

from rolodex.constants import CONTACTS_PREFIX
from rolodex.constants import get_full_path
from rolodex.services.errors import BackendError

BASE = get_full_path(CONTACTS_PREFIX)

BOB = {
    "user_id": "alice",
    "displayname": "Bob Smith",
    "email": "bob@example.com",
    "cloud_id": "bob@remote.cloud",
}


def _create(client: TestClient, **overrides) -> dict:
    payload = {**BOB, **overrides}
    resp = client.post(BASE, json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_contact(client: TestClient, sample_users):
    data = _create(client, organization="ACME")

    assert len(data["uid"]) == 36
    assert data["user_id"] == "alice"
    assert data["displayname"] == "Bob Smith"
    assert data["email"] == "bob@example.com"
    assert data["cloud_id"] == "bob@remote.cloud"
    assert data["organization"] == "ACME"
    assert "address_book_id" not in data


def test_create_without_organization_returns_null(client: TestClient, sample_users):
    data = _create(client)
    assert data["organization"] is None


@pytest.mark.parametrize(
    "payload",
    [
        {"displayname": "Bob", "email": "b@x", "cloud_id": "b@c"},
        {**BOB, "displayname": ""},
        {**BOB, "cloud_id": None},
        {},
    ],
)
def test_create_missing_fields_is_400(client: TestClient, sample_users, payload):
    resp = client.post(BASE, json=payload)

    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Missing required fields:")


def test_create_unknown_user_is_404(client: TestClient, sample_users):
    resp = client.post(BASE, json={**BOB, "user_id": "mallory"})

    assert resp.status_code == 404
    assert "mallory" in resp.json()["detail"]


def test_get_update_delete_flow(client: TestClient, sample_users):
    uid = _create(client)["uid"]

    resp = client.get(f"{BASE}/alice/{uid}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["displayname"] == "Bob Smith"
    assert data["cloud_id"] == "bob@remote.cloud"
    assert isinstance(data["address_book_id"], int)

    resp = client.put(
        f"{BASE}/alice/{uid}",
        json={"displayname": "Robert Smith", "email": "rob@example.com", "cloud_id": "rob@cloud", "organization": "X"},
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "uid": uid,
        "user_id": "alice",
        "displayname": "Robert Smith",
        "email": "rob@example.com",
        "cloud_id": "rob@cloud",
        "organization": "X",
    }

    assert client.get(f"{BASE}/alice/{uid}").json()["displayname"] == "Robert Smith"

    resp = client.delete(f"{BASE}/alice/{uid}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Contact deleted successfully"}

    assert client.get(f"{BASE}/alice/{uid}").status_code == 404
    resp = client.delete(f"{BASE}/alice/{uid}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Contact not found"


def test_get_missing_contact_is_404(client: TestClient, sample_users):
    resp = client.get(f"{BASE}/alice/nonexistent-uid")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Contact not found"

    # Unknown users have no address books – still a plain 404
    assert client.get(f"{BASE}/nobody/nonexistent-uid").status_code == 404


def test_update_missing_contact_is_404(client: TestClient, sample_users):
    resp = client.put(f"{BASE}/alice/missing", json={"displayname": "A", "email": "a@x", "cloud_id": "a@c"})
    assert resp.status_code == 404


def test_update_missing_fields_is_400(client: TestClient, sample_users):
    uid = _create(client)["uid"]

    resp = client.put(f"{BASE}/alice/{uid}", json={"displayname": "A"})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing required fields: email, cloud_id"


def test_list_user_contacts(client: TestClient, sample_users):
    _create(client, displayname="One")
    _create(client, displayname="Two")
    _create(client, user_id="bob", displayname="Other")

    resp = client.get(f"{BASE}/alice")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert [c["displayname"] for c in data["vcards"]] == ["One", "Two"]
    assert all(c["user_id"] == "alice" for c in data["vcards"])

    assert client.get(f"{BASE}/nobody").json() == {"vcards": [], "total": 0}


def test_list_all_with_pagination(client: TestClient, sample_users):
    for i in range(10):
        user_id = ("alice", "bob", "carol")[i % 3]
        _create(client, user_id=user_id, displayname=f"Contact {i}")

    resp = client.get(BASE, params={"limit": 4, "offset": 8})
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 10
    assert len(data["vcards"]) == 2

    data = client.get(BASE, params={"limit": 4, "offset": 20}).json()
    assert data == {"vcards": [], "total": 10}

    data = client.get(BASE, params={"user_id": "carol"}).json()
    assert data["total"] == 3
    assert {c["user_id"] for c in data["vcards"]} == {"carol"}



def test_list_with_empty_user_filter_is_empty(client: TestClient, sample_users):
    _create(client)
    _create(client, user_id="bob")

    resp = client.get(f"{BASE}?user_id=")

    assert resp.status_code == 200
    assert resp.json() == {"vcards": [], "total": 0}


@pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 100000}, {"offset": -1}, {"limit": "many"}])
def test_list_rejects_bad_paging(client: TestClient, params):
    assert client.get(BASE, params=params).status_code == 422


def test_undecodable_card_is_500_on_get_and_skipped_on_list(client: TestClient, db_session, sample_users):
    from rolodex.crud import crud

    uid = _create(client)["uid"]
    [book] = crud.get_address_books(db_session, "principals/users/alice")
    crud.create_card(db_session, address_book_id=book.id, uri="broken.vcf", carddata="not a card")

    resp = client.get(f"{BASE}/alice/broken")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to get contact"

    data = client.get(f"{BASE}/alice").json()
    assert data["total"] == 1
    assert data["vcards"][0]["uid"] == uid


def test_backend_failure_is_500(client: TestClient, sample_users, monkeypatch):
    from rolodex.core import implementations

    def _fail(self, *args, **kwargs):
        raise BackendError("create_card", "disk full")

    monkeypatch.setattr(implementations.SQLAlchemyAddressBookBackend, "create_card", _fail)

    resp = client.post(BASE, json=BOB)

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to create contact"


def test_root(client: TestClient):
    assert client.get("/").json() == {"message": "Rolodex Contacts API is running"}
