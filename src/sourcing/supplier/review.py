"""ReviewSupplier: admin approval or rejection of a supplier application."""

from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from shared.errors import InvalidRequest, NotFound
from sourcing.domain import sourcing
from sourcing.supplier.supplier import Supplier, SupplierStatus

logger = structlog.get_logger(__name__)


class ReviewAction(Enum):
    APPROVE = SupplierStatus.APPROVED.value
    REJECT = SupplierStatus.REJECTED.value


@sourcing.command(part_of="Supplier")
class ReviewSupplier:
    supplier_id = Identifier(required=True)
    decided_by = Identifier(required=True)
    status = String(required=True, max_length=20)  # "approved" or "rejected"
    comment = Text()
    user_id = Identifier()  # Only honoured on approval


@sourcing.command_handler(part_of=Supplier)
class ReviewSupplierHandler:
    @handle(ReviewSupplier)
    def review_supplier(self, command):
        try:
            action = ReviewAction(command.status)
        except ValueError as exc:
            raise InvalidRequest("Status must be approved or rejected") from exc

        repo = current_domain.repository_for(Supplier)
        try:
            supplier = repo.get(command.supplier_id)
        except ObjectNotFoundError as exc:
            raise NotFound("Supplier not found") from exc

        if SupplierStatus(supplier.status) != SupplierStatus.PENDING:
            raise InvalidRequest(f"Supplier has already been {supplier.status}")

        if action == ReviewAction.APPROVE:
            supplier.approve(decided_by=command.decided_by, comment=command.comment, user_id=command.user_id)
        else:
            supplier.reject(decided_by=command.decided_by, comment=command.comment)
        repo.add(supplier)

        logger.info("Supplier reviewed", supplier_id=str(supplier.id), status=supplier.status)
        return str(supplier.id)
