"""Supplier aggregate: a company's application to sell on the marketplace.

State Machine:
    pending → approved (terminal)
    pending → rejected (terminal)

Approval may link the supplier to a platform user account. The link is set
only on approval and is never cleared.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text, ValueObject

from sourcing.domain import sourcing
from sourcing.supplier.events import SupplierApproved, SupplierRegistered, SupplierRejected

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class SupplierStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BusinessType(Enum):
    MANUFACTURER = "manufacturer"
    EXPORTER = "exporter"
    WHOLESALER = "wholesaler"
    RETAILER = "retailer"


class CategoryOption(Enum):
    AYURVEDA_HERBAL = "Ayurveda & Herbal"
    ELECTRONICS = "Electronics"
    AGRICULTURE = "Agriculture"
    TEXTILES = "Textiles"
    MACHINERY = "Machinery"
    CHEMICALS = "Chemicals"
    FOOD_PRODUCTS = "Food Products"


@sourcing.value_object(part_of="Supplier")
class SupplierAddress:
    street = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    country = String(max_length=100, default="India")
    pincode = String(max_length=20)


@sourcing.value_object(part_of="Supplier")
class Decision:
    decision = String(choices=SupplierStatus, required=True)
    comment = Text()
    decided_at = DateTime(required=True)
    decided_by = Identifier(required=True)


@sourcing.aggregate
class Supplier:
    company_name = String(required=True, max_length=255)
    contact_person = String(required=True, max_length=255)
    email = String(required=True, max_length=254, unique=True)
    phone = String(required=True, max_length=20)
    business_type = String(choices=BusinessType, required=True)
    address = ValueObject(SupplierAddress)
    category_option = String(choices=CategoryOption)
    product_description = Text()
    status = String(choices=SupplierStatus, default=SupplierStatus.PENDING.value)
    decision = ValueObject(Decision)
    user_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email and not EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Invalid email address format"]})

    @invariant.post
    def only_approved_suppliers_link_a_user(self):
        if self.user_id and self.status != SupplierStatus.APPROVED.value:
            raise ValidationError({"user_id": ["Only approved suppliers can be linked to a user account"]})

    @classmethod
    def register(cls, company_name, contact_person, email, phone, business_type, **details):
        now = datetime.now(UTC)
        address = details.get("address") or {}
        supplier = cls(
            company_name=company_name,
            contact_person=contact_person,
            email=email.strip().lower(),
            phone=phone,
            business_type=business_type,
            address=SupplierAddress(
                street=address.get("street"),
                city=address.get("city"),
                state=address.get("state"),
                country=address.get("country") or "India",
                pincode=address.get("pincode"),
            ),
            category_option=details.get("category_option"),
            product_description=details.get("product_description"),
            status=SupplierStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        supplier.raise_(
            SupplierRegistered(
                supplier_id=str(supplier.id),
                company_name=company_name,
                email=supplier.email,
                business_type=business_type,
                registered_at=now,
            )
        )
        return supplier

    def _assert_pending(self):
        if SupplierStatus(self.status) != SupplierStatus.PENDING:
            raise ValidationError({"status": [f"Supplier has already been {self.status}"]})

    def approve(self, decided_by, comment=None, user_id=None):
        self._assert_pending()

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = SupplierStatus.APPROVED.value
            self.decision = Decision(
                decision=SupplierStatus.APPROVED.value,
                comment=comment,
                decided_at=now,
                decided_by=decided_by,
            )
            if user_id:
                self.user_id = user_id
            self.updated_at = now

        self.raise_(
            SupplierApproved(
                supplier_id=str(self.id),
                decided_by=str(decided_by),
                user_id=str(user_id) if user_id else None,
                decided_at=now,
            )
        )

    def reject(self, decided_by, comment=None):
        self._assert_pending()

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = SupplierStatus.REJECTED.value
            self.decision = Decision(
                decision=SupplierStatus.REJECTED.value,
                comment=comment,
                decided_at=now,
                decided_by=decided_by,
            )
            self.updated_at = now

        self.raise_(
            SupplierRejected(
                supplier_id=str(self.id),
                decided_by=str(decided_by),
                comment=comment,
                decided_at=now,
            )
        )

    def to_dict_view(self) -> dict:
        return {
            "supplier_id": str(self.id),
            "company_name": self.company_name,
            "contact_person": self.contact_person,
            "email": self.email,
            "phone": self.phone,
            "business_type": self.business_type,
            "address": (
                {
                    "street": self.address.street,
                    "city": self.address.city,
                    "state": self.address.state,
                    "country": self.address.country,
                    "pincode": self.address.pincode,
                }
                if self.address
                else None
            ),
            "category_option": self.category_option,
            "product_description": self.product_description,
            "status": self.status,
            "decision": (
                {
                    "decision": self.decision.decision,
                    "comment": self.decision.comment,
                    "decided_at": self.decision.decided_at,
                    "decided_by": str(self.decision.decided_by),
                }
                if self.decision
                else None
            ),
            "user_id": str(self.user_id) if self.user_id else None,
            "created_at": self.created_at,
        }


@sourcing.repository(part_of=Supplier)
class SupplierRepository:
    def find_by_email(self, email):
        results = self._dao.query.filter(email=email.strip().lower()).all().items
        return results[0] if results else None

    def listing(self, status=None):
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        suppliers = query.limit(None).all().items
        return sorted(
            suppliers,
            key=lambda s: s.created_at.replace(tzinfo=None) if s.created_at else datetime.min,
            reverse=True,
        )
