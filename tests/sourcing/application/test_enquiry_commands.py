"""Application tests for enquiry commands and listings."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from shared.errors import InvalidRequest, NotFound
from sourcing.enquiry.enquiry import Enquiry
from sourcing.enquiry.response import CloseEnquiry, RespondToEnquiry
from sourcing.enquiry.submission import SubmitEnquiry
from sourcing.queries import list_enquiries


def _submit(details, **overrides):
    return current_domain.process(SubmitEnquiry(**{**details, **overrides}), asynchronous=False)


class TestSubmitEnquiry:
    def test_persists_new_enquiry(self, enquiry_details):
        enquiry_id = _submit(enquiry_details, customer_id="cust-001", pincode="400001")
        enquiry = current_domain.repository_for(Enquiry).get(enquiry_id)
        assert enquiry.status == "new"
        assert str(enquiry.customer_id) == "cust-001"
        assert enquiry.pincode == "400001"

    def test_anonymous_submission(self, enquiry_details):
        enquiry_id = _submit(enquiry_details)
        assert current_domain.repository_for(Enquiry).get(enquiry_id).customer_id is None


class TestRespondAndClose:
    def test_respond(self, enquiry_details):
        enquiry_id = _submit(enquiry_details)
        current_domain.process(
            RespondToEnquiry(enquiry_id=enquiry_id, responded_by="admin-001", message="Rs 95/kg"),
            asynchronous=False,
        )
        enquiry = current_domain.repository_for(Enquiry).get(enquiry_id)
        assert enquiry.status == "responded"
        assert enquiry.admin_response.message == "Rs 95/kg"

    def test_empty_response(self, enquiry_details):
        enquiry_id = _submit(enquiry_details)
        with pytest.raises(InvalidRequest):
            current_domain.process(
                RespondToEnquiry(enquiry_id=enquiry_id, responded_by="admin-001", message=""),
                asynchronous=False,
            )
        assert current_domain.repository_for(Enquiry).get(enquiry_id).status == "new"

    def test_unknown_enquiry(self):
        with pytest.raises(NotFound):
            current_domain.process(
                RespondToEnquiry(enquiry_id="no-such-enquiry", responded_by="admin-001", message="Hello"),
                asynchronous=False,
            )

    def test_close_then_respond_refused(self, enquiry_details):
        enquiry_id = _submit(enquiry_details)
        current_domain.process(CloseEnquiry(enquiry_id=enquiry_id, closed_by="admin-001"), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(
                RespondToEnquiry(enquiry_id=enquiry_id, responded_by="admin-001", message="Hello"),
                asynchronous=False,
            )


class TestListEnquiries:
    def test_filter_and_paginate(self, enquiry_details):
        first = _submit(enquiry_details)
        _submit(enquiry_details)
        _submit(enquiry_details)
        current_domain.process(CloseEnquiry(enquiry_id=first, closed_by="admin-001"), asynchronous=False)

        assert list_enquiries()["total"] == 3
        assert list_enquiries(status="new")["total"] == 2
        closed = list_enquiries(status="closed")
        assert [e["enquiry_id"] for e in closed["items"]] == [first]

        page = list_enquiries(page=2, limit=2)
        assert page["pages"] == 2
        assert len(page["items"]) == 1

    def test_total_counts_every_enquiry(self, enquiry_details):
        for _ in range(101):
            _submit(enquiry_details)

        assert list_enquiries()["total"] == 101
