"""Enquiry aggregate: a buyer's question about a product.

State Machine:
    new → responded → closed
    new → closed
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text, ValueObject

from sourcing.domain import sourcing
from sourcing.enquiry.events import EnquiryClosed, EnquiryResponded, EnquirySubmitted

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class EnquiryStatus(Enum):
    NEW = "new"
    RESPONDED = "responded"
    CLOSED = "closed"


class EnquiryType(Enum):
    PRODUCT = "product"
    BULK = "bulk"
    SAMPLE = "sample"


_VALID_TRANSITIONS = {
    EnquiryStatus.NEW: {EnquiryStatus.RESPONDED, EnquiryStatus.CLOSED},
    EnquiryStatus.RESPONDED: {EnquiryStatus.RESPONDED, EnquiryStatus.CLOSED},
    EnquiryStatus.CLOSED: set(),
}


@sourcing.value_object(part_of="Enquiry")
class AdminResponse:
    message = Text(required=True)
    responded_at = DateTime(required=True)
    responded_by = Identifier(required=True)


@sourcing.aggregate
class Enquiry:
    customer_id = Identifier()
    product_id = Identifier(required=True)
    supplier_id = Identifier()
    name = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=20)
    pincode = String(max_length=20)
    enquiry_type = String(choices=EnquiryType, default=EnquiryType.PRODUCT.value)
    message = Text(required=True)
    status = String(choices=EnquiryStatus, default=EnquiryStatus.NEW.value)
    admin_response = ValueObject(AdminResponse)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email and not EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Invalid email address format"]})

    @invariant.post
    def responded_enquiry_must_carry_response(self):
        if self.status == EnquiryStatus.RESPONDED.value and self.admin_response is None:
            raise ValidationError({"admin_response": ["A responded enquiry must carry the admin's response"]})

    @classmethod
    def submit(cls, product_id, name, email, phone, message, **details):
        now = datetime.now(UTC)
        enquiry = cls(
            product_id=product_id,
            name=name,
            email=email,
            phone=phone,
            message=message,
            customer_id=details.get("customer_id"),
            supplier_id=details.get("supplier_id"),
            pincode=details.get("pincode"),
            enquiry_type=details.get("enquiry_type") or EnquiryType.PRODUCT.value,
            status=EnquiryStatus.NEW.value,
            created_at=now,
            updated_at=now,
        )
        enquiry.raise_(
            EnquirySubmitted(
                enquiry_id=str(enquiry.id),
                product_id=str(product_id),
                supplier_id=str(enquiry.supplier_id) if enquiry.supplier_id else None,
                enquiry_type=enquiry.enquiry_type,
                email=email,
                submitted_at=now,
            )
        )
        return enquiry

    def _assert_can_transition(self, target_status):
        current = EnquiryStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def respond(self, message, responded_by):
        """Record the admin's reply. A later reply replaces the earlier one."""
        if not message or not message.strip():
            raise ValidationError({"message": ["Response message is required"]})
        self._assert_can_transition(EnquiryStatus.RESPONDED)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.admin_response = AdminResponse(
                message=message.strip(),
                responded_at=now,
                responded_by=responded_by,
            )
            self.status = EnquiryStatus.RESPONDED.value
            self.updated_at = now

        self.raise_(
            EnquiryResponded(
                enquiry_id=str(self.id),
                responded_by=str(responded_by),
                responded_at=now,
            )
        )

    def close(self, closed_by):
        self._assert_can_transition(EnquiryStatus.CLOSED)

        now = datetime.now(UTC)
        self.status = EnquiryStatus.CLOSED.value
        self.updated_at = now

        self.raise_(
            EnquiryClosed(
                enquiry_id=str(self.id),
                closed_by=str(closed_by),
                closed_at=now,
            )
        )

    def to_dict_view(self) -> dict:
        return {
            "enquiry_id": str(self.id),
            "customer_id": str(self.customer_id) if self.customer_id else None,
            "product_id": str(self.product_id),
            "supplier_id": str(self.supplier_id) if self.supplier_id else None,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "pincode": self.pincode,
            "enquiry_type": self.enquiry_type,
            "message": self.message,
            "status": self.status,
            "admin_response": (
                {
                    "message": self.admin_response.message,
                    "responded_at": self.admin_response.responded_at,
                    "responded_by": str(self.admin_response.responded_by),
                }
                if self.admin_response
                else None
            ),
            "created_at": self.created_at,
        }


@sourcing.repository(part_of=Enquiry)
class EnquiryRepository:
    def listing(self, status=None):
        """Enquiries newest first, optionally restricted to one status."""
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        enquiries = query.limit(None).all().items
        return sorted(
            enquiries,
            key=lambda e: e.created_at.replace(tzinfo=None) if e.created_at else datetime.min,
            reverse=True,
        )
