from decimal import Decimal

import pytest

API = "/api/v1"


@pytest.fixture
def txn(create_transaction):
    # amount_total = 119.00
    return create_transaction()


@pytest.fixture
def pay(client, headers_a, refs):
    def _pay(transaction_id, amount, payment_date="2025-03-20", headers=None):
        return client.post(
            f"{API}/transaction/{transaction_id}/payments",
            json={"payment_type_id": refs["payment_type"], "amount": amount, "payment_date": payment_date},
            headers=headers or headers_a,
        )
    return _pay


def test_payments_up_to_the_total_then_rejected(client, headers_a, txn, pay):
    first = pay(txn["id"], "70")
    second = pay(txn["id"], "49")

    assert first.status_code == 201
    assert second.status_code == 201
    assert isinstance(second.json()["data"]["id"], int)

    third = pay(txn["id"], "1")

    assert third.status_code == 400
    body = third.json()
    assert body["success"] is False
    assert body["message"] == "Total payments cannot exceed 119.00. Already paid: 119.00. Remaining: 0.00"


def test_partial_payment_reports_remaining(txn, pay):
    pay(txn["id"], "100")

    resp = pay(txn["id"], "20")

    assert resp.status_code == 400
    assert "Remaining: 19.00" in resp.json()["message"]


def test_settlement_fields_follow_payments(client, headers_a, txn, pay):
    pay(txn["id"], "70")
    data = client.get(f"{API}/transactions/{txn['id']}", headers=headers_a).json()["data"]

    assert data["paymentsCount"] == 1
    assert Decimal(data["total_paid"]) == Decimal("70.00")
    assert Decimal(data["pendingAmount"]) == Decimal("49.00")
    assert data["settlement_status"] == "partial"

    pay(txn["id"], "49")
    listed = client.get(f"{API}/transactions/", headers=headers_a).json()["data"]["data"][0]

    assert listed["paymentsCount"] == 2
    assert Decimal(listed["pendingAmount"]) == 0
    assert listed["settlement_status"] == "paid"


def test_update_counts_old_amount_out(client, headers_a, txn, pay):
    pay(txn["id"], "70")
    payment_id = pay(txn["id"], "49").json()["data"]["id"]

    # 70 + 40 fits; 70 + 50 does not
    ok = client.put(f"{API}/payments/{payment_id}", json={"amount": "40"}, headers=headers_a)
    too_much = client.put(f"{API}/payments/{payment_id}", json={"amount": "50"}, headers=headers_a)

    assert ok.status_code == 200
    assert Decimal(ok.json()["data"]["amount"]) == Decimal("40.00")
    assert too_much.status_code == 400
    assert "Already paid: 70.00" in too_much.json()["message"]
    assert "Remaining: 49.00" in too_much.json()["message"]


def test_update_without_amount_skips_sum_check(client, headers_a, txn, pay):
    payment_id = pay(txn["id"], "119").json()["data"]["id"]

    resp = client.put(f"{API}/payments/{payment_id}", json={"reference_number": "TRX-9981"}, headers=headers_a)

    assert resp.status_code == 200
    assert resp.json()["data"]["reference_number"] == "TRX-9981"


def test_non_positive_amount_is_bad_request(txn, pay):
    assert pay(txn["id"], "0").status_code == 400
    assert pay(txn["id"], "-5").status_code == 400


def test_unknown_payment_type(client, headers_a, txn):
    resp = client.post(
        f"{API}/transaction/{txn['id']}/payments",
        json={"payment_type_id": 9999, "amount": "10", "payment_date": "2025-03-20"},
        headers=headers_a,
    )

    assert resp.status_code == 404


def test_payment_on_foreign_transaction_is_not_found(txn, pay, headers_b):
    assert pay(txn["id"], "10", headers=headers_b).status_code == 404


def test_list_and_summary(client, headers_a, txn, pay):
    pay(txn["id"], "30", payment_date="2025-03-18")
    pay(txn["id"], "20", payment_date="2025-03-25")

    listed = client.get(f"{API}/transaction/{txn['id']}/payments", headers=headers_a).json()["data"]
    summary = client.get(f"{API}/transaction/{txn['id']}/payments/summary", headers=headers_a).json()["data"]

    assert [p["payment_date"] for p in listed] == ["2025-03-25", "2025-03-18"]
    assert listed[0]["payment_type_name"] == "Transferencia"
    assert Decimal(summary["transaction_total"]) == Decimal("119.00")
    assert Decimal(summary["total_paid"]) == Decimal("50.00")
    assert Decimal(summary["remaining_amount"]) == Decimal("69.00")
    assert summary["payment_count"] == 2
    assert summary["settlement_status"] == "partial"


def test_foreign_payment_access_is_forbidden(client, headers_b, txn, pay):
    payment_id = pay(txn["id"], "10").json()["data"]["id"]

    assert client.get(f"{API}/payments/{payment_id}", headers=headers_b).status_code == 403
    assert client.put(f"{API}/payments/{payment_id}", json={"notes": "x"}, headers=headers_b).status_code == 403
    assert client.delete(f"{API}/payments/{payment_id}", headers=headers_b).status_code == 403
    assert client.get(f"{API}/transaction/{txn['id']}/payments", headers=headers_b).status_code == 404


def test_delete_payment_frees_the_amount(client, headers_a, txn, pay):
    payment_id = pay(txn["id"], "119").json()["data"]["id"]

    assert client.delete(f"{API}/payments/{payment_id}", headers=headers_a).status_code == 200
    assert client.get(f"{API}/payments/{payment_id}", headers=headers_a).status_code == 404
    assert pay(txn["id"], "119").status_code == 201
