"""Domain events for the Enquiry aggregate."""

from protean.fields import DateTime, Identifier, String

from sourcing.domain import sourcing


@sourcing.event(part_of="Enquiry")
class EnquirySubmitted:
    """A buyer asked about a product."""

    __version__ = 1

    enquiry_id = Identifier(required=True)
    product_id = Identifier(required=True)
    supplier_id = Identifier()
    enquiry_type = String(required=True)
    email = String(required=True)
    submitted_at = DateTime(required=True)


@sourcing.event(part_of="Enquiry")
class EnquiryResponded:
    __version__ = 1

    enquiry_id = Identifier(required=True)
    responded_by = Identifier(required=True)
    responded_at = DateTime(required=True)


@sourcing.event(part_of="Enquiry")
class EnquiryClosed:
    __version__ = 1

    enquiry_id = Identifier(required=True)
    closed_by = Identifier(required=True)
    closed_at = DateTime(required=True)
