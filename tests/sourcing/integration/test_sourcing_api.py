"""Integration tests for the enquiry and supplier APIs via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers
from shared.errors import register_error_handlers
from sourcing.api.routes import enquiry_router, supplier_router

BUYER = {"X-User-Id": "cust-001"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(enquiry_router)
    app.include_router(supplier_router)
    register_exception_handlers(app)
    register_error_handlers(app)
    return TestClient(app)


def _submit(client, enquiry_details, headers=None):
    response = client.post("/enquiries", json=enquiry_details, headers=headers or {})
    assert response.status_code == 201
    return response.json()["enquiry_id"]


class TestEnquiryAPI:
    def test_anonymous_submission(self, client, enquiry_details):
        _submit(client, enquiry_details)
        body = client.get("/enquiries", headers=ADMIN).json()
        assert body["items"][0]["customer_id"] is None

    def test_signed_in_submission(self, client, enquiry_details):
        _submit(client, enquiry_details, headers=BUYER)
        body = client.get("/enquiries", headers=ADMIN).json()
        assert body["items"][0]["customer_id"] == "cust-001"

    def test_invalid_email_rejected(self, client, enquiry_details):
        enquiry_details["email"] = "nope"
        assert client.post("/enquiries", json=enquiry_details).status_code == 422

    def test_listing_is_admin_only(self, client):
        assert client.get("/enquiries", headers=BUYER).status_code == 403
        assert client.get("/enquiries").status_code == 403

    def test_respond_and_close(self, client, enquiry_details):
        enquiry_id = _submit(client, enquiry_details)
        response = client.put(f"/enquiries/{enquiry_id}/respond", json={"message": "Rs 95/kg"}, headers=ADMIN)
        assert response.status_code == 200

        response = client.put(f"/enquiries/{enquiry_id}/close", headers=ADMIN)
        assert response.status_code == 200

        body = client.get("/enquiries", params={"status": "closed"}, headers=ADMIN).json()
        assert body["items"][0]["admin_response"]["message"] == "Rs 95/kg"

    def test_empty_response(self, client, enquiry_details):
        enquiry_id = _submit(client, enquiry_details)
        response = client.put(f"/enquiries/{enquiry_id}/respond", json={"message": " "}, headers=ADMIN)
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_request"


class TestSupplierAPI:
    def test_register_and_approve(self, client, supplier_details):
        response = client.post("/suppliers", json=supplier_details)
        assert response.status_code == 201
        supplier_id = response.json()["supplier_id"]

        response = client.put(
            f"/suppliers/{supplier_id}/status",
            json={"status": "approved", "user_id": "user-042"},
            headers=ADMIN,
        )
        assert response.status_code == 200

        supplier = client.get("/suppliers", headers=ADMIN).json()["items"][0]
        assert supplier["status"] == "approved"
        assert supplier["user_id"] == "user-042"
        assert supplier["email"] == "meera@keralaspice.in"

    def test_duplicate_email(self, client, supplier_details):
        client.post("/suppliers", json=supplier_details)
        response = client.post("/suppliers", json=supplier_details)
        assert response.status_code == 400

    def test_review_is_admin_only(self, client, supplier_details):
        supplier_id = client.post("/suppliers", json=supplier_details).json()["supplier_id"]
        response = client.put(f"/suppliers/{supplier_id}/status", json={"status": "approved"}, headers=BUYER)
        assert response.status_code == 403
