"""Sourcing bounded context: buyer enquiries and supplier onboarding.

Both are small admin-driven workflows: a record is submitted publicly, then
an admin responds to it (enquiries) or approves or rejects it (suppliers).
"""

import structlog
from protean.domain import Domain

sourcing = Domain(name="sourcing")

logger = structlog.get_logger(__name__)
