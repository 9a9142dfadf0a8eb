"""RespondToEnquiry / CloseEnquiry: admin handling of enquiries."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from shared.errors import InvalidRequest, NotFound
from sourcing.domain import sourcing
from sourcing.enquiry.enquiry import Enquiry

logger = structlog.get_logger(__name__)


@sourcing.command(part_of="Enquiry")
class RespondToEnquiry:
    enquiry_id = Identifier(required=True)
    responded_by = Identifier(required=True)
    message = Text()


@sourcing.command(part_of="Enquiry")
class CloseEnquiry:
    enquiry_id = Identifier(required=True)
    closed_by = Identifier(required=True)


def _load(enquiry_id):
    try:
        return current_domain.repository_for(Enquiry).get(enquiry_id)
    except ObjectNotFoundError as exc:
        raise NotFound("Enquiry not found") from exc


@sourcing.command_handler(part_of=Enquiry)
class EnquiryResponseHandler:
    @handle(RespondToEnquiry)
    def respond_to_enquiry(self, command):
        if not command.message or not command.message.strip():
            raise InvalidRequest("Response message is required")

        enquiry = _load(command.enquiry_id)
        enquiry.respond(message=command.message, responded_by=command.responded_by)
        current_domain.repository_for(Enquiry).add(enquiry)

        logger.info("Enquiry responded", enquiry_id=str(enquiry.id))
        return str(enquiry.id)

    @handle(CloseEnquiry)
    def close_enquiry(self, command):
        enquiry = _load(command.enquiry_id)
        enquiry.close(closed_by=command.closed_by)
        current_domain.repository_for(Enquiry).add(enquiry)
        return str(enquiry.id)
