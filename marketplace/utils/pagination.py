# marketplace/utils/pagination.py
import math

from marketplace.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def page_window(page: int | None, limit: int | None) -> tuple[int, int, int]:
    """Normalizuje (page, limit) i zwraca (page, limit, offset)."""
    page = max(int(page or 1), 1)
    limit = min(max(int(limit or DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)
    return page, limit, (page - 1) * limit


def pagination_info(page: int, limit: int, total: int) -> dict:
    return {
        "current_page": page,
        "total_pages": math.ceil(total / limit) if limit else 0,
        "total_count": total,
        "has_next": page * limit < total,
        "has_prev": page > 1,
    }
