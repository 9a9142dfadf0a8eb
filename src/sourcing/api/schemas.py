"""Pydantic request/response schemas for the Sourcing API."""

from pydantic import BaseModel, EmailStr, Field


class SubmitEnquiryRequest(BaseModel):
    product_id: str
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    message: str = Field(min_length=1)
    supplier_id: str | None = None
    pincode: str | None = None
    enquiry_type: str = "product"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "name": "Ravi Kumar",
                    "email": "ravi@example.com",
                    "phone": "9876543210",
                    "pincode": "400001",
                    "enquiry_type": "bulk",
                    "message": "Need 500 units, please share bulk pricing.",
                }
            ]
        }
    }


class RespondToEnquiryRequest(BaseModel):
    message: str


class SupplierAddressSchema(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = "India"
    pincode: str | None = None


class RegisterSupplierRequest(BaseModel):
    company_name: str = Field(min_length=1)
    contact_person: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    business_type: str
    address: SupplierAddressSchema | None = None
    category_option: str | None = None
    product_description: str | None = None


class ReviewSupplierRequest(BaseModel):
    status: str
    comment: str | None = None
    user_id: str | None = None


class EnquiryIdResponse(BaseModel):
    enquiry_id: str


class SupplierIdResponse(BaseModel):
    supplier_id: str
