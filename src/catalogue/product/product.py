"""Product aggregate: the catalogue record a cart line or order item is priced from.

Prices are quoted as a range (``min``/``max``) because B2B listings are
negotiated; carts always capture ``min`` as the unit price. ``moq`` is the
per-line order-quantity bound.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text, ValueObject

from catalogue.domain import catalogue


@catalogue.value_object(part_of="Product")
class PriceRange:
    min: Float(required=True, min_value=0.0)
    max: Float(required=True, min_value=0.0)
    currency: String(max_length=3, default="INR")

    @invariant.post
    def min_cannot_exceed_max(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValidationError({"price": ["Minimum price cannot exceed maximum price"]})


@catalogue.value_object(part_of="Product")
class OrderQuantity:
    quantity: Integer(required=True, min_value=1)
    unit: String(required=True, max_length=30)


@catalogue.aggregate
class Product:
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=255, unique=True)
    description: Text(required=True)
    category_id: Identifier(required=True)
    price: ValueObject(PriceRange, required=True)
    moq: ValueObject(OrderQuantity, required=True)
    images: Text()  # JSON array of image URLs
    is_active: Boolean(default=True)
    is_featured: Boolean(default=False)
    created_at: DateTime(default=lambda: datetime.now(UTC))

    @property
    def image_urls(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    @property
    def primary_image(self) -> str | None:
        urls = self.image_urls
        return urls[0] if urls else None


@catalogue.repository(part_of=Product)
class ProductRepository:
    def find_by_slug_or_id(self, slug_or_id: str) -> Product | None:
        results = self._dao.query.filter(slug=slug_or_id).all().items
        if results:
            return results[0]
        try:
            return self.get(slug_or_id)
        except ObjectNotFoundError:
            return None

    def search(self, text: str) -> list[Product]:
        """Active products whose name or description contains ``text`` (case-insensitive)."""
        needle = text.lower()
        return [
            product
            for product in self._dao.query.filter(is_active=True).limit(None).all().items
            if needle in product.name.lower() or needle in (product.description or "").lower()
        ]
