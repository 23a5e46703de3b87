import pytest

API = "/api/v1"


@pytest.fixture
def party_payload(refs):
    def _payload(**overrides):
        payload = {
            "name": "Comercial Andes Ltda",
            "tax_id": "12345678-9",
            "business_activity": "Retail",
            "email": "ventas@andes.cl",
            "region_id": refs["region"],
            "commune_id": refs["commune"],
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.mark.parametrize("kind", ["clients", "vendors"])
class TestParties:
    def test_create_canonicalises_rut(self, client, headers_a, party_payload, kind):
        resp = client.post(f"{API}/{kind}/", json=party_payload(), headers=headers_a)

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["tax_id"] == "12.345.678-9"
        assert data["user_id"] == "user-a"
        assert data["region_name"] == "Región Metropolitana de Santiago"

    def test_invalid_rut_is_rejected(self, client, headers_a, party_payload, kind):
        resp = client.post(f"{API}/{kind}/", json=party_payload(tax_id="99999999-9"), headers=headers_a)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid RUT"

    def test_duplicate_rut_returns_existing_to_owner(self, client, headers_a, party_payload, kind):
        first = client.post(f"{API}/{kind}/", json=party_payload(), headers=headers_a).json()["data"]

        # Same identifier written differently
        resp = client.post(f"{API}/{kind}/", json=party_payload(tax_id="12.345.678-9", name="Otro"), headers=headers_a)

        assert resp.status_code == 409
        assert resp.json()["data"]["id"] == first["id"]

    def test_duplicate_rut_hides_other_users_record(self, client, headers_a, headers_b, party_payload, kind):
        client.post(
            f"{API}/{kind}/",
            json=party_payload(name="Secreto", email="private@a.cl", phone="+56 9 1234"),
            headers=headers_a,
        )

        resp = client.post(f"{API}/{kind}/", json=party_payload(name="Otro"), headers=headers_b)

        assert resp.status_code == 409
        body = resp.json()
        assert "data" not in body
        assert "private@a.cl" not in resp.text
        assert "user-a" not in resp.text

    def test_region_and_commune_are_required(self, client, headers_a, party_payload, kind):
        payload = party_payload()
        del payload["commune_id"]

        assert client.post(f"{API}/{kind}/", json=payload, headers=headers_a).status_code == 400

    def test_list_is_owner_scoped_and_filtered(self, client, headers_a, headers_b, party_payload, kind):
        client.post(f"{API}/{kind}/", json=party_payload(), headers=headers_a)
        client.post(f"{API}/{kind}/", json=party_payload(name="Ferretería Sur", tax_id="11.111.111-1"), headers=headers_a)
        client.post(f"{API}/{kind}/", json=party_payload(name="Andes B", tax_id="22.222.222-2"), headers=headers_b)

        names = [p["name"] for p in client.get(f"{API}/{kind}/", headers=headers_a).json()["data"]]
        filtered = client.get(f"{API}/{kind}/", params={"name": "andes"}, headers=headers_a).json()["data"]
        by_rut = client.get(f"{API}/{kind}/", params={"tax_id": "11.111"}, headers=headers_a).json()["data"]

        assert names == ["Comercial Andes Ltda", "Ferretería Sur"]
        assert [p["name"] for p in filtered] == ["Comercial Andes Ltda"]
        assert [p["name"] for p in by_rut] == ["Ferretería Sur"]

    def test_non_owner_cannot_read_update_or_delete(self, client, headers_a, headers_b, party_payload, kind):
        party = client.post(f"{API}/{kind}/", json=party_payload(), headers=headers_a).json()["data"]

        assert client.get(f"{API}/{kind}/{party['id']}", headers=headers_b).status_code == 403
        assert client.put(f"{API}/{kind}/{party['id']}", json={"name": "X"}, headers=headers_b).status_code == 403
        assert client.delete(f"{API}/{kind}/{party['id']}", headers=headers_b).status_code == 403

    def test_update_revalidates_rut(self, client, headers_a, party_payload, kind):
        party = client.post(f"{API}/{kind}/", json=party_payload(), headers=headers_a).json()["data"]
        client.post(f"{API}/{kind}/", json=party_payload(name="Otra", tax_id="11.111.111-1"), headers=headers_a)

        bad = client.put(f"{API}/{kind}/{party['id']}", json={"tax_id": "11.111.111-2"}, headers=headers_a)
        taken = client.put(f"{API}/{kind}/{party['id']}", json={"tax_id": "111111111"}, headers=headers_a)
        ok = client.put(f"{API}/{kind}/{party['id']}", json={"tax_id": "222222222", "phone": "+56 2 2345 6789"}, headers=headers_a)

        assert bad.status_code == 400
        assert taken.status_code == 409
        assert ok.status_code == 200
        assert ok.json()["data"]["tax_id"] == "22.222.222-2"
        assert ok.json()["data"]["phone"] == "+56 2 2345 6789"

    def test_delete(self, client, headers_a, party_payload, kind):
        party = client.post(f"{API}/{kind}/", json=party_payload(), headers=headers_a).json()["data"]

        assert client.delete(f"{API}/{kind}/{party['id']}", headers=headers_a).status_code == 200
        assert client.get(f"{API}/{kind}/{party['id']}", headers=headers_a).status_code == 404


def test_vendor_with_transactions_cannot_be_deleted(client, headers_a, vendor_a, create_transaction):
    create_transaction()

    resp = client.delete(f"{API}/vendors/{vendor_a['id']}", headers=headers_a)

    assert resp.status_code == 409


def test_clients_and_vendors_are_independent(client, headers_a, party_payload):
    assert client.post(f"{API}/clients/", json=party_payload(), headers=headers_a).status_code == 201
    assert client.post(f"{API}/vendors/", json=party_payload(), headers=headers_a).status_code == 201
