"""Admin listings of enquiries and suppliers."""

from protean.utils.globals import current_domain

from shared.pagination import paginate
from sourcing.enquiry.enquiry import Enquiry
from sourcing.supplier.supplier import Supplier


def list_enquiries(status=None, page=1, limit=20) -> dict:
    result = paginate(current_domain.repository_for(Enquiry).listing(status=status), page, limit)
    result["items"] = [enquiry.to_dict_view() for enquiry in result["items"]]
    return result


def list_suppliers(status=None, page=1, limit=20) -> dict:
    result = paginate(current_domain.repository_for(Supplier).listing(status=status), page, limit)
    result["items"] = [supplier.to_dict_view() for supplier in result["items"]]
    return result
