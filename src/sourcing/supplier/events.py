"""Domain events for the Supplier aggregate."""

from protean.fields import DateTime, Identifier, String

from sourcing.domain import sourcing


@sourcing.event(part_of="Supplier")
class SupplierRegistered:
    """A company applied to sell on the marketplace."""

    __version__ = 1

    supplier_id = Identifier(required=True)
    company_name = String(required=True)
    email = String(required=True)
    business_type = String(required=True)
    registered_at = DateTime(required=True)


@sourcing.event(part_of="Supplier")
class SupplierApproved:
    __version__ = 1

    supplier_id = Identifier(required=True)
    decided_by = Identifier(required=True)
    user_id = Identifier()
    decided_at = DateTime(required=True)


@sourcing.event(part_of="Supplier")
class SupplierRejected:
    __version__ = 1

    supplier_id = Identifier(required=True)
    decided_by = Identifier(required=True)
    comment = String()
    decided_at = DateTime(required=True)
