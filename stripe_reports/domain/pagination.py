"""In-memory pagination over fully built report rows"""

import math
from typing import List, Sequence, Tuple, TypeVar

from stripe_reports.domain.models import PaginationMeta

T = TypeVar("T")


def paginate(items: Sequence[T], page: int, limit: int) -> Tuple[List[T], PaginationMeta]:
    """Slice one 1-based page out of items and describe where it sits"""
    total = len(items)
    total_pages = math.ceil(total / limit)
    start = (page - 1) * limit

    meta = PaginationMeta(
        currentPage=page,
        itemsPerPage=limit,
        totalItems=total,
        totalPages=total_pages,
        hasPrevPage=page > 1,
        hasNextPage=page < total_pages,
    )
    return list(items[start:start + limit]), meta
