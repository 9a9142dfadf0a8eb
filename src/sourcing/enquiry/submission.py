"""SubmitEnquiry: a buyer (or anonymous visitor) asks about a product."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from sourcing.domain import sourcing
from sourcing.enquiry.enquiry import Enquiry

logger = structlog.get_logger(__name__)


@sourcing.command(part_of="Enquiry")
class SubmitEnquiry:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=20)
    message = Text(required=True)
    customer_id = Identifier()
    supplier_id = Identifier()
    pincode = String(max_length=20)
    enquiry_type = String(max_length=20)


@sourcing.command_handler(part_of=Enquiry)
class SubmitEnquiryHandler:
    @handle(SubmitEnquiry)
    def submit_enquiry(self, command):
        enquiry = Enquiry.submit(
            product_id=command.product_id,
            name=command.name,
            email=command.email,
            phone=command.phone,
            message=command.message,
            customer_id=command.customer_id,
            supplier_id=command.supplier_id,
            pincode=command.pincode,
            enquiry_type=command.enquiry_type,
        )
        current_domain.repository_for(Enquiry).add(enquiry)

        logger.info("Enquiry submitted", enquiry_id=str(enquiry.id), product_id=str(command.product_id))
        return str(enquiry.id)
