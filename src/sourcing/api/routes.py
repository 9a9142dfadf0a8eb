"""FastAPI routes for the Sourcing domain: enquiries and suppliers."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from shared.identity import Actor, optional_actor, require_admin
from sourcing.api.schemas import (
    EnquiryIdResponse,
    RegisterSupplierRequest,
    RespondToEnquiryRequest,
    ReviewSupplierRequest,
    SubmitEnquiryRequest,
    SupplierIdResponse,
)
from sourcing.enquiry.response import CloseEnquiry, RespondToEnquiry
from sourcing.enquiry.submission import SubmitEnquiry
from sourcing.queries import list_enquiries, list_suppliers
from sourcing.supplier.registration import RegisterSupplier
from sourcing.supplier.review import ReviewSupplier

# ---------------------------------------------------------------------------
# Enquiry Router
# ---------------------------------------------------------------------------
enquiry_router = APIRouter(prefix="/enquiries", tags=["enquiries"])


@enquiry_router.post("", status_code=201, response_model=EnquiryIdResponse)
async def submit_enquiry(body: SubmitEnquiryRequest, actor: Actor | None = Depends(optional_actor)) -> EnquiryIdResponse:
    command = SubmitEnquiry(
        product_id=body.product_id,
        name=body.name,
        email=body.email,
        phone=body.phone,
        message=body.message,
        customer_id=actor.user_id if actor else None,
        supplier_id=body.supplier_id,
        pincode=body.pincode,
        enquiry_type=body.enquiry_type,
    )
    enquiry_id = current_domain.process(command, asynchronous=False)
    return EnquiryIdResponse(enquiry_id=enquiry_id)


@enquiry_router.get("")
async def enquiries(
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    admin: Actor = Depends(require_admin),  # noqa: ARG001
) -> dict:
    return list_enquiries(status=status, page=page, limit=limit)


@enquiry_router.put("/{enquiry_id}/respond", response_model=EnquiryIdResponse)
async def respond_to_enquiry(
    enquiry_id: str, body: RespondToEnquiryRequest, admin: Actor = Depends(require_admin)
) -> EnquiryIdResponse:
    command = RespondToEnquiry(
        enquiry_id=enquiry_id,
        responded_by=admin.user_id,
        message=body.message,
    )
    current_domain.process(command, asynchronous=False)
    return EnquiryIdResponse(enquiry_id=enquiry_id)


@enquiry_router.put("/{enquiry_id}/close", response_model=EnquiryIdResponse)
async def close_enquiry(enquiry_id: str, admin: Actor = Depends(require_admin)) -> EnquiryIdResponse:
    current_domain.process(CloseEnquiry(enquiry_id=enquiry_id, closed_by=admin.user_id), asynchronous=False)
    return EnquiryIdResponse(enquiry_id=enquiry_id)


# ---------------------------------------------------------------------------
# Supplier Router
# ---------------------------------------------------------------------------
supplier_router = APIRouter(prefix="/suppliers", tags=["suppliers"])


@supplier_router.post("", status_code=201, response_model=SupplierIdResponse)
async def register_supplier(body: RegisterSupplierRequest) -> SupplierIdResponse:
    command = RegisterSupplier(
        company_name=body.company_name,
        contact_person=body.contact_person,
        email=body.email,
        phone=body.phone,
        business_type=body.business_type,
        address=body.address.model_dump_json() if body.address else None,
        category_option=body.category_option,
        product_description=body.product_description,
    )
    supplier_id = current_domain.process(command, asynchronous=False)
    return SupplierIdResponse(supplier_id=supplier_id)


@supplier_router.get("")
async def suppliers(
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    admin: Actor = Depends(require_admin),  # noqa: ARG001
) -> dict:
    return list_suppliers(status=status, page=page, limit=limit)


@supplier_router.put("/{supplier_id}/status", response_model=SupplierIdResponse)
async def review_supplier(
    supplier_id: str, body: ReviewSupplierRequest, admin: Actor = Depends(require_admin)
) -> SupplierIdResponse:
    command = ReviewSupplier(
        supplier_id=supplier_id,
        decided_by=admin.user_id,
        status=body.status,
        comment=body.comment,
        user_id=body.user_id,
    )
    current_domain.process(command, asynchronous=False)
    return SupplierIdResponse(supplier_id=supplier_id)
