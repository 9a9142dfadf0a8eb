"""Product lookup port: the ordering core's read-only view of the catalogue.

The catalogue store is owned elsewhere. Cart and checkout code program
against this port and never touch catalogue aggregates directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProductRecord:
    """The catalogue fields the ordering core reads at a point in time."""

    id: str
    name: str
    price_min: float
    price_max: float
    currency: str = "INR"
    moq_quantity: int | None = None
    moq_unit: str | None = None
    images: tuple[str, ...] = field(default_factory=tuple)
    description: str | None = None
    category_name: str = "Uncategorized"
    is_active: bool = True

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None


class ProductLookup(ABC):
    """Abstract catalogue lookup."""

    @abstractmethod
    def find_product(self, product_id: str) -> ProductRecord | None:
        """Return the product as it is now, or None when it does not exist."""
        ...
