"""Order number allocation.

A dedicated counter aggregate is incremented once per order; the running
value is formatted as ``ORD-<YY><MM>-<6-digit sequence>``. Counting existing
orders is never used.
"""

from datetime import UTC, datetime

from protean.fields import Integer, String

from ordering.domain import ordering

ORDER_SEQUENCE = "orders"


@ordering.aggregate
class OrderSequence:
    name = String(required=True, max_length=50, unique=True)
    value = Integer(default=0, min_value=0)

    def increment(self) -> int:
        self.value = (self.value or 0) + 1
        return self.value


@ordering.repository(part_of=OrderSequence)
class OrderSequenceRepository:
    def next_value(self, name=ORDER_SEQUENCE) -> int:
        results = self._dao.query.filter(name=name).all().items
        sequence = results[0] if results else OrderSequence(name=name, value=0)
        value = sequence.increment()
        self.add(sequence)
        return value


def format_order_number(sequence_value: int, at: datetime | None = None) -> str:
    at = at or datetime.now(UTC)
    return f"ORD-{at:%y%m}-{sequence_value:06d}"
