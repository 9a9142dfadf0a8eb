import math


def paginate(records, page=1, limit=10) -> dict:
    """Slice an already-sorted list into one page plus paging metadata."""
    page = max(int(page or 1), 1)
    limit = max(int(limit or 10), 1)
    total = len(records)
    start = (page - 1) * limit
    return {
        "items": records[start : start + limit],
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }
