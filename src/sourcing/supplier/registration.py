"""RegisterSupplier: public supplier onboarding form."""

import json

import structlog
from protean import handle
from protean.fields import String, Text
from protean.utils.globals import current_domain

from shared.errors import InvalidRequest
from sourcing.domain import sourcing
from sourcing.supplier.supplier import Supplier

logger = structlog.get_logger(__name__)


@sourcing.command(part_of="Supplier")
class RegisterSupplier:
    company_name = String(required=True, max_length=255)
    contact_person = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=20)
    business_type = String(required=True, max_length=20)
    address = Text()  # JSON: {street, city, state, country, pincode}
    category_option = String(max_length=50)
    product_description = Text()


@sourcing.command_handler(part_of=Supplier)
class RegisterSupplierHandler:
    @handle(RegisterSupplier)
    def register_supplier(self, command):
        repo = current_domain.repository_for(Supplier)
        if repo.find_by_email(command.email) is not None:
            raise InvalidRequest("A supplier with this email is already registered")

        supplier = Supplier.register(
            company_name=command.company_name,
            contact_person=command.contact_person,
            email=command.email,
            phone=command.phone,
            business_type=command.business_type,
            address=json.loads(command.address) if command.address else {},
            category_option=command.category_option,
            product_description=command.product_description,
        )
        repo.add(supplier)

        logger.info("Supplier registered", supplier_id=str(supplier.id), business_type=command.business_type)
        return str(supplier.id)
