"""Catalogue bounded context: Categories and Products.

Catalogue maintenance (CRUD, image upload, search UI) is owned by an external
service. This context holds the data contracts the ordering core reads from.
"""

import structlog
from protean.domain import Domain

catalogue = Domain(name="catalogue")

logger = structlog.get_logger(__name__)
