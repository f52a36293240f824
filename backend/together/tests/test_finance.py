"""
Tests for finance transaction and summary endpoints.
"""
from decimal import Decimal
from together.models.transaction import FinanceTransaction
from together.tests.conftest import signup_and_login


def make_transaction(client, headers, **overrides):
    payload = {
        "person": "person1",
        "title": "Groceries",
        "amount": "42.50",
        "type": "expense",
        "category": "food",
        "date": "2024-05-10T18:30:00"
    }
    payload.update(overrides)
    return client.post("/api/finance/transactions", json=payload, headers=headers)


def test_create_transaction(client, auth_headers):
    response = make_transaction(client, auth_headers, currency="EUR")
    assert response.status_code == 201
    data = response.json()
    assert data["id"] > 0
    assert data["person"] == "person1"
    assert data["type"] == "expense"
    assert data["currency"] == "EUR"
    assert Decimal(data["amount"]) == Decimal("42.50")
    assert data["created_at"] is not None


def test_create_transaction_rounds_to_two_places(client, auth_headers):
    response = make_transaction(client, auth_headers, amount="10.005")
    assert response.status_code == 201
    assert Decimal(response.json()["amount"]) == Decimal("10.01")


def test_create_transaction_non_positive_amount_is_rejected(client, auth_headers, db_session):
    for amount in ("0", "-5", "0.001"):
        response = make_transaction(client, auth_headers, amount=amount)
        assert response.status_code == 400
    assert db_session.query(FinanceTransaction).count() == 0


def test_create_transaction_invalid_fields(client, auth_headers, db_session):
    assert make_transaction(client, auth_headers, type="investment").status_code == 400
    assert make_transaction(client, auth_headers, person="person3").status_code == 400
    assert make_transaction(client, auth_headers, currency="EURO").status_code == 400
    assert make_transaction(client, auth_headers, title="  ").status_code == 400
    assert make_transaction(client, auth_headers, amount="lots").status_code == 400
    assert make_transaction(client, auth_headers, date="not-a-date").status_code == 400
    assert db_session.query(FinanceTransaction).count() == 0


def test_currency_defaults_to_person_preference(client, auth_headers):
    response = client.patch(
        "/api/persons/person1",
        json={"currency_preference": "GBP"},
        headers=auth_headers
    )
    assert response.status_code == 200

    response = make_transaction(client, auth_headers)
    assert response.status_code == 201
    assert response.json()["currency"] == "GBP"

    # person2 still uses its own preference
    response = make_transaction(client, auth_headers, person="person2")
    assert response.json()["currency"] == "USD"


def test_delete_transaction(client, auth_headers):
    created = make_transaction(client, auth_headers).json()

    response = client.delete(f"/api/finance/transactions/{created['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = client.delete(f"/api/finance/transactions/{created['id']}", headers=auth_headers)
    assert response.status_code == 404


def test_delete_missing_transaction_leaves_table_unchanged(client, auth_headers, db_session):
    make_transaction(client, auth_headers)
    response = client.delete("/api/finance/transactions/9999", headers=auth_headers)
    assert response.status_code == 404
    assert db_session.query(FinanceTransaction).count() == 1


def test_cannot_delete_other_accounts_transaction(client, auth_headers):
    created = make_transaction(client, auth_headers).json()
    other_headers = signup_and_login(client, username="stranger")

    response = client.delete(f"/api/finance/transactions/{created['id']}", headers=other_headers)
    assert response.status_code == 404
    assert len(client.get("/api/finance/transactions", headers=auth_headers).json()) == 1


def test_list_transactions_newest_first(client, auth_headers):
    dates = [
        "2024-01-15T12:00:00",
        "2024-03-01T08:00:00",
        "2023-12-31T23:59:00",
        "2024-02-10T10:00:00",
    ]
    created_ids = {
        make_transaction(client, auth_headers, date=value, title=f"t{index}").json()["id"]
        for index, value in enumerate(dates)
    }
    make_transaction(client, auth_headers, person="person2")

    response = client.get("/api/finance/transactions?person=person1", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert {item["id"] for item in data} == created_ids
    assert [item["date"] for item in data] == sorted(
        [value for value in dates], reverse=True
    )


def test_list_transactions_both_persons_and_filters(client, auth_headers):
    make_transaction(client, auth_headers, date="2024-01-01T00:00:00")
    make_transaction(client, auth_headers, person="person2", type="income", category="salary",
                     date="2024-02-01T00:00:00")
    make_transaction(client, auth_headers, person="person2", date="2024-03-01T00:00:00")

    assert len(client.get("/api/finance/transactions", headers=auth_headers).json()) == 3
    assert len(client.get("/api/finance/transactions?person=both", headers=auth_headers).json()) == 3

    data = client.get(
        "/api/finance/transactions?start_date=2024-01-15T00:00:00&end_date=2024-02-15T00:00:00",
        headers=auth_headers
    ).json()
    assert [item["category"] for item in data] == ["salary"]

    data = client.get("/api/finance/transactions?type=expense", headers=auth_headers).json()
    assert len(data) == 2

    response = client.get("/api/finance/transactions?person=person9", headers=auth_headers)
    assert response.status_code == 400


def test_list_transactions_pagination(client, auth_headers):
    for day in range(1, 6):
        make_transaction(client, auth_headers, date=f"2024-05-0{day}T12:00:00", title=f"day {day}")

    response = client.get("/api/finance/transactions?page=2&limit=2", headers=auth_headers)
    assert response.status_code == 200
    assert [item["title"] for item in response.json()] == ["day 3", "day 2"]

    response = client.get("/api/finance/transactions?page=0&limit=2", headers=auth_headers)
    assert response.status_code == 400


def test_list_transactions_with_display_currency(client, auth_headers):
    client.put(
        "/api/currency-rates",
        json={"base_currency": "EUR", "target_currency": "USD", "rate": "1.10"},
        headers=auth_headers
    )
    make_transaction(client, auth_headers, amount="100", currency="EUR")

    data = client.get("/api/finance/transactions?currency=USD", headers=auth_headers).json()
    assert data[0]["currency"] == "EUR"
    assert Decimal(data[0]["amount"]) == Decimal("100.00")
    assert Decimal(data[0]["converted_amount"]) == Decimal("110.00")
    assert data[0]["display_currency"] == "USD"

    data = client.get("/api/finance/transactions", headers=auth_headers).json()
    assert data[0]["converted_amount"] is None


def test_summary_two_person_scenario(client, auth_headers):
    client.put(
        "/api/currency-rates",
        json={"base_currency": "EUR", "target_currency": "USD", "rate": "1.10"},
        headers=auth_headers
    )
    make_transaction(client, auth_headers, title="Salary", amount="1000", currency="USD",
                     type="income", category="salary")
    make_transaction(client, auth_headers, title="Rent share", amount="200", currency="USD")
    make_transaction(client, auth_headers, person="person2", title="Dinner", amount="100",
                     currency="EUR")

    response = client.get("/api/finance/summary?person=both&currency=USD", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["person"] == "both"
    assert data["currency"] == "USD"
    assert Decimal(data["income"]["total"]) == Decimal("1000.00")
    assert data["income"]["count"] == 1
    assert Decimal(data["expense"]["total"]) == Decimal("310.00")
    assert data["expense"]["count"] == 2
    assert data["expense"]["currency"] == "USD"
    assert Decimal(data["savings"]["total"]) == Decimal("0")
    assert Decimal(data["balance"]) == Decimal("690.00")
    assert data["missing_rates"] == []

    person2 = client.get("/api/finance/summary?person=person2&currency=USD", headers=auth_headers).json()
    assert Decimal(person2["expense"]["total"]) == Decimal("110.00")
    assert Decimal(person2["balance"]) == Decimal("-110.00")


def test_summary_reports_missing_rates(client, auth_headers):
    make_transaction(client, auth_headers, amount="50", currency="JPY")

    data = client.get("/api/finance/summary?currency=USD", headers=auth_headers).json()
    assert Decimal(data["expense"]["total"]) == Decimal("50.00")
    assert data["missing_rates"] == ["JPY->USD"]


def test_summary_invalid_currency(client, auth_headers):
    response = client.get("/api/finance/summary?currency=US", headers=auth_headers)
    assert response.status_code == 400
