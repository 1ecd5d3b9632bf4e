"""List response envelope."""

from typing import Any

from pydantic import BaseModel

from src.domain.pagination import Page


class ListResponse(BaseModel):
    """``{"data": [...], "has_more": bool, "url": str}``"""

    data: list[Any]
    has_more: bool
    url: str

    @classmethod
    def from_page(cls, page: Page[Any], url: str) -> "ListResponse":
        return cls(data=page.data, has_more=page.has_more, url=url)
