"""Application tests for supplier onboarding and review."""

import pytest
from protean import current_domain
from shared.errors import InvalidRequest, NotFound
from sourcing.queries import list_suppliers
from sourcing.supplier.registration import RegisterSupplier
from sourcing.supplier.review import ReviewSupplier
from sourcing.supplier.supplier import Supplier


def _register(details, **overrides):
    return current_domain.process(RegisterSupplier(**{**details, **overrides}), asynchronous=False)


def _review(supplier_id, status, **kwargs):
    return current_domain.process(
        ReviewSupplier(supplier_id=supplier_id, decided_by="admin-001", status=status, **kwargs),
        asynchronous=False,
    )


class TestRegisterSupplier:
    def test_persists_pending_supplier(self, supplier_details):
        supplier_id = _register(supplier_details, address='{"city": "Kochi", "state": "Kerala"}')
        supplier = current_domain.repository_for(Supplier).get(supplier_id)
        assert supplier.status == "pending"
        assert supplier.address.city == "Kochi"

    def test_duplicate_email_refused(self, supplier_details):
        _register(supplier_details)
        with pytest.raises(InvalidRequest):
            _register(supplier_details, email="meera@keralaspice.in")
        assert list_suppliers()["total"] == 1


class TestReviewSupplier:
    def test_approve(self, supplier_details):
        supplier_id = _register(supplier_details)
        _review(supplier_id, "approved", comment="Verified", user_id="user-042")

        supplier = current_domain.repository_for(Supplier).get(supplier_id)
        assert supplier.status == "approved"
        assert str(supplier.user_id) == "user-042"

    def test_reject_ignores_user_link(self, supplier_details):
        supplier_id = _register(supplier_details)
        _review(supplier_id, "rejected", comment="Incomplete", user_id="user-042")

        supplier = current_domain.repository_for(Supplier).get(supplier_id)
        assert supplier.status == "rejected"
        assert supplier.user_id is None

    def test_second_review_refused(self, supplier_details):
        supplier_id = _register(supplier_details)
        _review(supplier_id, "approved")
        with pytest.raises(InvalidRequest):
            _review(supplier_id, "rejected")

    def test_unknown_decision(self, supplier_details):
        supplier_id = _register(supplier_details)
        with pytest.raises(InvalidRequest):
            _review(supplier_id, "pending")

    def test_unknown_supplier(self):
        with pytest.raises(NotFound):
            _review("no-such-supplier", "approved")

    def test_listing_by_status(self, supplier_details):
        approved = _register(supplier_details)
        _register(supplier_details, email="other@example.com")
        _review(approved, "approved")

        assert list_suppliers(status="approved")["items"][0]["supplier_id"] == approved
        assert list_suppliers(status="pending")["total"] == 1

    def test_listing_counts_every_supplier(self, supplier_details):
        for n in range(101):
            _register(supplier_details, email=f"supplier{n}@example.com")

        assert list_suppliers()["total"] == 101
