from datetime import timedelta
from decimal import Decimal

from models.companies import Company, CompanyUser

API = "/api/v1"


class TestCreateTransaction:
    def test_create_returns_display_and_settlement_fields(self, client, headers_a, transaction_payload):
        resp = client.post(f"{API}/transactions/", json=transaction_payload(), headers=headers_a)

        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        data = body["data"]
        assert len(data["id"]) == 36
        assert data["user_id"] == "user-a"
        assert data["category_name"] == "Insumos"
        assert data["vendor_name"] == "Proveedor Uno"
        assert data["status_name"] == "Pendiente"
        assert data["document_type_code"] == "33"
        assert data["tax_rate_name"] == "IVA"
        assert data["paymentsCount"] == 0
        assert Decimal(data["pendingAmount"]) == Decimal("119.00")
        assert data["settlement_status"] == "unpaid"
        assert data["status_color"] == "warning"

    def test_numeric_document_number_is_stored_as_text(self, client, headers_a, transaction_payload):
        resp = client.post(f"{API}/transactions/", json=transaction_payload(document_number=4455), headers=headers_a)

        assert resp.status_code == 201
        assert resp.json()["data"]["document_number"] == "4455"

    def test_duplicate_document_number_is_conflict(self, client, headers_a, transaction_payload, create_transaction):
        create_transaction(document_number="A-1")

        resp = client.post(f"{API}/transactions/", json=transaction_payload(document_number="A-1"), headers=headers_a)

        assert resp.status_code == 409
        assert resp.json()["success"] is False
        assert resp.json()["data"]["document_number"] == "A-1"

    def test_duplicate_wins_over_missing_category(self, client, headers_a, transaction_payload, create_transaction):
        create_transaction(document_number="A-2")

        resp = client.post(
            f"{API}/transactions/",
            json=transaction_payload(document_number="A-2", category_id=9999),
            headers=headers_a,
        )

        assert resp.status_code == 409

    def test_missing_category(self, client, headers_a, transaction_payload):
        resp = client.post(f"{API}/transactions/", json=transaction_payload(category_id=9999), headers=headers_a)

        assert resp.status_code == 404
        assert resp.json()["message"] == "Category not found"

    def test_missing_category_reported_before_missing_document_type(self, client, headers_a, transaction_payload):
        resp = client.post(
            f"{API}/transactions/",
            json=transaction_payload(category_id=9999, document_type_id=9999),
            headers=headers_a,
        )

        assert resp.json()["message"] == "Category not found"

    def test_missing_document_type(self, client, headers_a, transaction_payload):
        resp = client.post(f"{API}/transactions/", json=transaction_payload(document_type_id=9999), headers=headers_a)

        assert resp.status_code == 404
        assert resp.json()["message"] == "Document type not found"

    def test_missing_tax_rate(self, client, headers_a, transaction_payload):
        resp = client.post(f"{API}/transactions/", json=transaction_payload(tax_rate_id=9999), headers=headers_a)

        assert resp.status_code == 404
        assert resp.json()["message"] == "Tax rate not found"

    def test_missing_company(self, client, headers_a, transaction_payload):
        resp = client.post(f"{API}/transactions/", json=transaction_payload(company_id=9999), headers=headers_a)

        assert resp.status_code == 404
        assert resp.json()["message"] == "Company not found"

    def test_company_without_membership_is_forbidden(self, client, headers_a, transaction_payload, db_session):
        company = Company(name="Ajena SpA", tax_id="76.000.000-0")
        company.members.append(CompanyUser(user_id="user-b", is_admin=True))
        db_session.add(company)
        db_session.commit()

        resp = client.post(
            f"{API}/transactions/",
            json=transaction_payload(company_id=company.id),
            headers=headers_a,
        )

        assert resp.status_code == 403

    def test_company_check_precedes_type_mismatch(self, client, headers_a, transaction_payload, refs, db_session):
        company = Company(name="Ajena SpA", tax_id="76.000.000-0")
        company.members.append(CompanyUser(user_id="user-b", is_admin=True))
        db_session.add(company)
        db_session.commit()

        resp = client.post(
            f"{API}/transactions/",
            json=transaction_payload(company_id=company.id, category_id=refs["income_category"]),
            headers=headers_a,
        )

        assert resp.status_code == 403

    def test_category_type_mismatch(self, client, headers_a, transaction_payload, refs):
        resp = client.post(
            f"{API}/transactions/",
            json=transaction_payload(category_id=refs["income_category"], type="expense"),
            headers=headers_a,
        )

        assert resp.status_code == 400
        assert "expense" in resp.json()["message"]

    def test_vendor_of_another_user_is_not_found(self, client, headers_a, transaction_payload, make_vendor):
        other_vendor = make_vendor(user_id="user-b", tax_id="22.222.222-2", name="Proveedor B")

        resp = client.post(f"{API}/transactions/", json=transaction_payload(vendor_id=other_vendor["id"]), headers=headers_a)

        assert resp.status_code == 404
        assert resp.json()["message"] == "Vendor not found"

    def test_missing_status(self, client, headers_a, transaction_payload):
        resp = client.post(f"{API}/transactions/", json=transaction_payload(status_id=9999), headers=headers_a)

        assert resp.status_code == 404
        assert resp.json()["message"] == "Status not found"

    def test_missing_required_field_is_bad_request(self, client, headers_a, transaction_payload):
        payload = transaction_payload()
        del payload["amount_total"]

        resp = client.post(f"{API}/transactions/", json=payload, headers=headers_a)

        assert resp.status_code == 400
        assert resp.json()["success"] is False
        assert "amount_total" in resp.json()["message"]

    def test_invalid_type_is_bad_request(self, client, headers_a, transaction_payload):
        resp = client.post(f"{API}/transactions/", json=transaction_payload(type="transfer"), headers=headers_a)

        assert resp.status_code == 400

    def test_requires_token(self, client, transaction_payload):
        resp = client.post(f"{API}/transactions/", json=transaction_payload())

        assert resp.status_code == 401
        assert resp.json()["success"] is False

    def test_expired_token(self, client, transaction_payload, token_factory):
        token = token_factory("user-a", expires_in=timedelta(seconds=-10))
        resp = client.post(
            f"{API}/transactions/",
            json=transaction_payload(),
            headers={"Authorization": f"Bearer {token}"},
        )

        assert resp.status_code == 401
        assert resp.json()["message"] == "Token has expired"


class TestReadTransactions:
    def test_get_by_id_is_owner_scoped(self, client, headers_a, headers_b, create_transaction):
        txn = create_transaction()

        assert client.get(f"{API}/transactions/{txn['id']}", headers=headers_a).status_code == 200
        resp = client.get(f"{API}/transactions/{txn['id']}", headers=headers_b)
        assert resp.status_code == 404

    def test_list_is_owner_scoped(self, client, headers_b, create_transaction):
        create_transaction()

        resp = client.get(f"{API}/transactions/", headers=headers_b)

        assert resp.status_code == 200
        assert resp.json()["data"]["data"] == []
        assert resp.json()["data"]["pagination"]["total"] == 0

    def test_pages_cover_every_row_once_newest_first(self, client, headers_a, create_transaction):
        dates = ["2025-01-10", "2025-03-01", "2025-03-01", "2025-02-14", "2025-03-01", "2025-01-02", "2025-04-30"]
        created = {create_transaction(document_number=f"P-{i}", transaction_date=d)["id"] for i, d in enumerate(dates)}

        seen = []
        page = 1
        while True:
            resp = client.get(f"{API}/transactions/", params={"page": page, "limit": 3}, headers=headers_a)
            body = resp.json()["data"]
            seen.extend(body["data"])
            if not body["pagination"]["hasNext"]:
                break
            page += 1

        pagination = resp.json()["data"]["pagination"]
        assert pagination["total"] == 7
        assert pagination["totalPages"] == 3
        assert pagination["hasPrev"] is True
        assert len(seen) == 7
        assert {row["id"] for row in seen} == created
        row_dates = [row["transaction_date"] for row in seen]
        assert row_dates == sorted(row_dates, reverse=True)

    def test_limit_is_clamped(self, client, headers_a, create_transaction):
        create_transaction()

        big = client.get(f"{API}/transactions/", params={"limit": 500}, headers=headers_a).json()["data"]
        small = client.get(f"{API}/transactions/", params={"limit": 0, "page": 0}, headers=headers_a).json()["data"]
        default = client.get(f"{API}/transactions/", headers=headers_a).json()["data"]

        assert big["pagination"]["limit"] == 100
        assert small["pagination"]["limit"] == 1
        assert small["pagination"]["page"] == 1
        assert default["pagination"]["limit"] == 50

    def test_filters(self, client, headers_a, refs, create_transaction):
        create_transaction(document_number="F-100", transaction_date="2025-01-05")
        create_transaction(
            document_number="F-200",
            transaction_date="2025-02-05",
            type="income",
            category_id=refs["income_category"],
        )
        create_transaction(document_number="X-300", transaction_date="2025-03-05", status_id=refs["paid_status"])

        def ids(**params):
            resp = client.get(f"{API}/transactions/", params=params, headers=headers_a)
            return sorted(row["document_number"] for row in resp.json()["data"]["data"])

        assert ids(type="income") == ["F-200"]
        assert ids(documentNumber="f-") == ["F-100", "F-200"]
        assert ids(startDate="2025-02-01", endDate="2025-02-28") == ["F-200"]
        assert ids(statusId=refs["paid_status"]) == ["X-300"]
        assert ids(categoryId=refs["expense_category"]) == ["F-100", "X-300"]

    def test_summary(self, client, headers_a, refs, create_transaction):
        create_transaction(document_number="S-1", amount_net="100.00", tax_amount="19.00", amount_total="119.00")
        create_transaction(
            document_number="S-2",
            type="income",
            category_id=refs["income_category"],
            amount_net="500.00",
            tax_amount="0",
            amount_total="500.00",
        )
        create_transaction(
            document_number="S-3",
            transaction_date="2024-12-31",
            amount_net="10.00",
            tax_amount="0",
            amount_total="10.00",
        )

        resp = client.get(f"{API}/transactions/summary", params={"startDate": "2025-01-01"}, headers=headers_a)

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert Decimal(data["totalIncome"]) == Decimal("500.00")
        assert Decimal(data["totalExpense"]) == Decimal("119.00")
        assert Decimal(data["netBalance"]) == Decimal("381.00")

    def test_summary_without_transactions_is_zero(self, client, headers_b):
        data = client.get(f"{API}/transactions/summary", headers=headers_b).json()["data"]

        assert Decimal(data["totalIncome"]) == 0
        assert Decimal(data["netBalance"]) == 0


class TestUpdateTransaction:
    def test_partial_update(self, client, headers_a, refs, create_transaction):
        txn = create_transaction()

        resp = client.put(
            f"{API}/transactions/{txn['id']}",
            json={"description": "Insumos de marzo", "status_id": refs["paid_status"]},
            headers=headers_a,
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["description"] == "Insumos de marzo"
        assert data["status_name"] == "Pagado"
        assert data["status_color"] == "success"

    def test_type_change_checked_against_stored_category(self, client, headers_a, create_transaction):
        txn = create_transaction()

        resp = client.put(f"{API}/transactions/{txn['id']}", json={"type": "income"}, headers=headers_a)

        assert resp.status_code == 400
        assert "income" in resp.json()["message"]

    def test_category_and_type_change_together(self, client, headers_a, refs, create_transaction):
        txn = create_transaction()

        resp = client.put(
            f"{API}/transactions/{txn['id']}",
            json={"type": "income", "category_id": refs["income_category"]},
            headers=headers_a,
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["type"] == "income"

    def test_document_number_conflict(self, client, headers_a, create_transaction):
        create_transaction(document_number="U-1")
        txn = create_transaction(document_number="U-2")

        resp = client.put(f"{API}/transactions/{txn['id']}", json={"document_number": "U-1"}, headers=headers_a)

        assert resp.status_code == 409

    def test_keeping_own_document_number_is_allowed(self, client, headers_a, create_transaction):
        txn = create_transaction(document_number="U-3")

        resp = client.put(f"{API}/transactions/{txn['id']}", json={"document_number": "U-3"}, headers=headers_a)

        assert resp.status_code == 200

    def test_empty_update_is_rejected(self, client, headers_a, create_transaction):
        txn = create_transaction()

        resp = client.put(f"{API}/transactions/{txn['id']}", json={}, headers=headers_a)

        assert resp.status_code == 400

    def test_null_on_required_column_is_rejected(self, client, headers_a, create_transaction):
        txn = create_transaction()

        resp = client.put(f"{API}/transactions/{txn['id']}", json={"amount_total": None}, headers=headers_a)

        assert resp.status_code == 400

    def test_total_cannot_drop_below_amount_paid(self, client, headers_a, refs, create_transaction):
        txn = create_transaction()
        client.post(
            f"{API}/transaction/{txn['id']}/payments",
            json={"payment_type_id": refs["payment_type"], "amount": "100", "payment_date": "2025-03-20"},
            headers=headers_a,
        )

        resp = client.put(f"{API}/transactions/{txn['id']}", json={"amount_total": "50"}, headers=headers_a)

        assert resp.status_code == 400
        assert resp.json()["message"] == (
            "Total cannot be lower than the amount already paid. Total: 50.00. Already paid: 100.00"
        )
        summary = client.get(f"{API}/transaction/{txn['id']}/payments/summary", headers=headers_a).json()["data"]
        assert Decimal(summary["transaction_total"]) == Decimal("119.00")

    def test_total_can_drop_to_amount_paid(self, client, headers_a, refs, create_transaction):
        txn = create_transaction()
        client.post(
            f"{API}/transaction/{txn['id']}/payments",
            json={"payment_type_id": refs["payment_type"], "amount": "100", "payment_date": "2025-03-20"},
            headers=headers_a,
        )

        resp = client.put(
            f"{API}/transactions/{txn['id']}",
            json={"amount_net": "84.03", "tax_amount": "15.97", "amount_total": "100"},
            headers=headers_a,
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["settlement_status"] == "paid"
        assert Decimal(resp.json()["data"]["pendingAmount"]) == 0

    def test_other_users_transaction_is_not_found(self, client, headers_b, create_transaction):
        txn = create_transaction()

        resp = client.put(f"{API}/transactions/{txn['id']}", json={"description": "x"}, headers=headers_b)

        assert resp.status_code == 404


class TestDeleteTransaction:
    def test_delete_removes_payments(self, client, headers_a, refs, create_transaction, db_session):
        from models.transaction_payments import TransactionPayment

        txn = create_transaction()
        payment = {"payment_type_id": refs["payment_type"], "amount": "19.00", "payment_date": "2025-03-20"}
        assert client.post(
            f"{API}/transaction/{txn['id']}/payments", json=payment, headers=headers_a
        ).status_code == 201

        resp = client.delete(f"{API}/transactions/{txn['id']}", headers=headers_a)

        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert client.get(f"{API}/transactions/{txn['id']}", headers=headers_a).status_code == 404
        db_session.expire_all()
        assert db_session.query(TransactionPayment).count() == 0

    def test_delete_by_other_user_is_not_found(self, client, headers_b, create_transaction):
        txn = create_transaction()

        assert client.delete(f"{API}/transactions/{txn['id']}", headers=headers_b).status_code == 404
