"""
Page/limit handling and the list envelope shared by the admin list endpoints.
"""
import math
from typing import Any, Dict, List


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def pagination_meta(total: int, page: int, limit: int, returned: int) -> Dict[str, int]:
    return {
        "totalElements": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "size": limit,
        "pageNo": page,
        "numberOfElements": returned,
    }


def paginated_response(message: str, data: List[Any], total: int, page: int, limit: int) -> Dict[str, Any]:
    """Envelope: {code, error, message, pagination, data}."""
    return {
        "code": 200,
        "error": False,
        "message": message,
        "pagination": pagination_meta(total, page, limit, len(data)),
        "data": data,
    }
