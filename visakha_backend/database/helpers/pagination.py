"""
Offset pagination helpers.

Query strings arrive untyped. `parse_page_params` turns them into a validated
`PageParams` instead of erroring:

- missing, non-numeric or zero `page`  → 1; negative `page` → 1
- missing, non-numeric, zero or negative `limit` → `default_limit`
- `limit` above `max_limit` → `max_limit`
"""

import math
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _parse_int(value: Optional[Union[str, int]]) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_page_params(
    page: Optional[Union[str, int]],
    limit: Optional[Union[str, int]],
    default_limit: int = 10,
    max_limit: int = 1000,
) -> PageParams:
    """
    Parse `page`/`limit` with the fallback policy above.

    >>> parse_page_params("abc", None)
    PageParams(page=1, limit=10)
    >>> parse_page_params("3", "25")
    PageParams(page=3, limit=25)
    """
    parsed_page = _parse_int(page)
    parsed_limit = _parse_int(limit)

    if not parsed_page or parsed_page < 1:
        parsed_page = 1
    if not parsed_limit or parsed_limit < 1:
        parsed_limit = default_limit
    return PageParams(page=parsed_page, limit=min(parsed_limit, max_limit))


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
