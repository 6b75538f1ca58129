"""Point-of-sale bounded context for the optical shop counter.

Everything the shop counter touches lives in one domain so that a sale's
stock adjustments and its sale records commit in a single unit of work.
"""

import structlog
from protean.domain import Domain

pos = Domain(name="pos")

logger = structlog.get_logger(__name__)
