"""Category aggregate: flat grouping of products in the storefront."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String, Text

from catalogue.domain import catalogue


@catalogue.aggregate
class Category:
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120, unique=True)
    description: Text()
    image: String(max_length=500)
    is_active: Boolean(default=True)
    created_at: DateTime(default=lambda: datetime.now(UTC))


@catalogue.repository(part_of=Category)
class CategoryRepository:
    def find_by_slug(self, slug: str) -> Category | None:
        results = self._dao.query.filter(slug=slug).all().items
        return results[0] if results else None
