"""
Tests for person registry endpoints.
"""


def test_get_persons_defaults(client, auth_headers):
    response = client.get("/api/persons", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["person1"]["name"] == "Person 1"
    assert data["person1"]["currency_preference"] == "USD"
    assert data["person2"]["person_key"] == "person2"
    assert data["person2"]["name"] == "Person 2"


def test_update_person_name_only(client, auth_headers):
    response = client.patch("/api/persons/person2", json={"name": "  Jordan "}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Jordan"
    assert response.json()["currency_preference"] == "USD"

    persons = client.get("/api/persons", headers=auth_headers).json()
    assert persons["person2"]["name"] == "Jordan"
    assert persons["person1"]["name"] == "Person 1"


def test_update_person_currency_preference(client, auth_headers):
    response = client.patch(
        "/api/persons/person1",
        json={"currency_preference": "gbp"},
        headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["currency_preference"] == "GBP"
    assert response.json()["name"] == "Person 1"


def test_update_unknown_person_key_is_rejected(client, auth_headers):
    response = client.patch("/api/persons/person3", json={"name": "Extra"}, headers=auth_headers)
    assert response.status_code == 400
    assert "person3" in response.json()["error"]


def test_update_person_invalid_currency(client, auth_headers):
    response = client.patch(
        "/api/persons/person1",
        json={"currency_preference": "DOLLARS"},
        headers=auth_headers
    )
    assert response.status_code == 400


def test_update_person_blank_name(client, auth_headers):
    response = client.patch("/api/persons/person1", json={"name": "   "}, headers=auth_headers)
    assert response.status_code == 400


def test_persons_are_scoped_to_account(client, auth_headers):
    from together.tests.conftest import signup_and_login

    other_headers = signup_and_login(client, username="partner")
    client.patch("/api/persons/person1", json={"name": "Mine"}, headers=auth_headers)

    other = client.get("/api/persons", headers=other_headers).json()
    assert other["person1"]["name"] == "Person 1"
