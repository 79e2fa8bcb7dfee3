import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.main import app
from app.services.mock_store import get_mock_store, reset_mock_store


@pytest.fixture(autouse=True)
def _reset_store() -> None:
    reset_mock_store()
    yield
    reset_mock_store()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _order_payload(**overrides):
    payload = {
        "customer_name": "Dewi Lestari",
        "customer_email": "dewi@example.com",
        "service_id": "SVC-00001",
        "total_amount": "10000000",
        "use_downpayment": True,
        "downpayment_percentage": 30,
    }
    payload.update(overrides)
    return payload


def _in_progress_order(client: TestClient) -> dict:
    order = client.post("/orders", json=_order_payload()).json()
    response = client.put(f"/admin/orders/{order['id']}/status", json={"status": "in_progress"})
    assert response.status_code == 200
    return response.json()


def test_health_reports_mock_mode(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "mock_data": True}


def test_public_pages(client: TestClient) -> None:
    services = client.get("/services").json()
    landing = client.get("/content/landing").json()
    footer = client.get("/content/footer").json()
    portfolio = client.get("/portfolio", params={"featured": "true"}).json()
    settings = client.get("/settings").json()

    assert services["total"] == 3
    assert [section["section_name"] for section in landing] == ["hero", "services"]
    assert len(footer) == 3
    assert portfolio[0]["title"] == "Toko Batik Online"
    assert "email_config" not in settings
    assert settings["company_info"]["name"] == "Digital Service Company"


def test_order_submission_and_preview(client: TestClient) -> None:
    preview = client.post(
        "/orders/downpayment-preview", json={"base_price": "10000000", "percentage": 30}
    )
    created = client.post("/orders", json=_order_payload())

    assert preview.status_code == 200
    assert preview.json()["downpayment_amount"] == "3000000"
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "pending"
    assert body["remaining_amount"] == "7000000"
    assert body["service_name"] == "Company Profile Website"


def test_order_validation_errors_return_422(client: TestClient) -> None:
    missing_name = client.post("/orders", json=_order_payload(customer_name=""))
    bad_budget = client.post("/orders", json=_order_payload(budget_range="1 miliar"))
    bad_percentage = client.post("/orders", json=_order_payload(downpayment_percentage=150))

    assert missing_name.status_code == 422
    assert bad_budget.status_code == 422
    assert bad_percentage.status_code == 422


def test_invoice_for_pending_order_returns_409(client: TestClient) -> None:
    order = client.post("/orders", json=_order_payload()).json()

    response = client.post(
        "/admin/invoices", json={"order_id": order["id"], "due_date": "2030-01-31"}
    )
    assert response.status_code == 409


def test_unknown_records_return_404(client: TestClient) -> None:
    assert client.get("/admin/orders/ORD-99999").status_code == 404
    assert client.get("/admin/invoices/IVC-99999").status_code == 404
    assert client.delete("/admin/services/SVC-99999").status_code == 404


def test_invoice_lifecycle(client: TestClient) -> None:
    order = _in_progress_order(client)

    created = client.post(
        "/admin/invoices",
        json={
            "order_id": order["id"],
            "due_date": "2030-01-31",
            "invoice_type": "downpayment",
            "downpayment_percentage": 30,
        },
    )
    assert created.status_code == 201
    invoice = created.json()["invoice"]
    assert created.json()["order_synced"] is True
    assert invoice["subtotal"] == "3000000"
    assert invoice["order_remaining_amount"] == "7000000"

    listed = client.get("/admin/invoices", params={"invoice_type": "downpayment"}).json()
    assert listed["total"] == 1

    adjust = {
        "type": "discount",
        "apply_as": "amount",
        "amount": "500000",
        "description": "Early payment",
    }
    preview = client.post(f"/admin/invoices/{invoice['id']}/adjust-preview", json=adjust)
    assert preview.json()["new_total"] == "2500000"
    applied = client.post(f"/admin/invoices/{invoice['id']}/adjust", json=adjust)
    assert applied.json()["total_amount"] == "2500000"
    assert applied.json()["notes"] == "Early payment"

    missing_description = client.post(
        f"/admin/invoices/{invoice['id']}/adjust", json={**adjust, "description": ""}
    )
    assert missing_description.status_code == 422

    sent = client.put(f"/admin/invoices/{invoice['id']}/status", json={"status": "sent"})
    assert sent.json()["status"] == "sent"

    resynced = client.post(f"/admin/invoices/{invoice['id']}/resync-order")
    assert resynced.status_code == 200
    assert resynced.json()["downpayment_amount"] == "2500000"

    pdf = client.get(f"/admin/invoices/{invoice['id']}/pdf")
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert invoice["invoice_number"] in pdf.headers["content-disposition"]
    assert pdf.content.startswith(b"%PDF")


def test_backend_failure_returns_502(client: TestClient) -> None:
    get_mock_store().fail_tables.add("services")

    response = client.post("/admin/services", json={"name": "Maintenance", "price": "750000"})

    assert response.status_code == 502
    assert response.json()["detail"] == "The backend service is unavailable"


def test_consent_succeeds_even_when_logging_fails(client: TestClient) -> None:
    get_mock_store().fail_tables.add("gdpr_consents")

    response = client.post("/consent", json={"user_session": "abc", "consent_given": True})

    assert response.status_code == 200
    assert response.json() == {"decision": "accepted", "recorded": False}


def test_admin_content_and_settings(client: TestClient) -> None:
    portfolio = client.post("/admin/portfolio", json={"title": "Aplikasi Kasir"})
    assert portfolio.status_code == 201
    assert client.delete(f"/admin/portfolio/{portfolio.json()['id']}").status_code == 204

    section = client.post("/admin/content/landing", json={"section_name": "testimonials", "section_order": 4})
    assert section.status_code == 201
    assert len(client.get("/admin/content/landing").json()) == 4

    settings = client.put(
        "/admin/settings/invoice_config",
        json={"prefix": "INV", "tax_rate": "11", "payment_terms": "14 hari"},
    )
    assert settings.status_code == 200
    assert settings.json()["invoice_config"]["payment_terms"] == "14 hari"

    stats = client.get("/admin/dashboard").json()
    assert stats["active_services"] == 3
    assert stats["total_revenue_display"] == "Rp 0"
