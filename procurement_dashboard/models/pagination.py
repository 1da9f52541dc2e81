"""Paging envelopes shared by every list endpoint."""

from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PageRequest(BaseModel):
    """One page request. Immutable for the lifetime of a fetch."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1)
    search: str = ""

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PageResult(BaseModel, Generic[T]):
    """
    One page of records.

    Attributes:
        data: Records in storage order (not sorted)
        total: Backing-store count for plain paging; exact filtered count
            when a search term was applied
    """

    data: List[T] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)

    @classmethod
    def empty(cls) -> "PageResult[T]":
        return cls(data=[], total=0)


def slice_page(records: List[T], request: PageRequest) -> List[T]:
    """Page-slice an already filtered list."""
    return records[request.offset:request.offset + request.page_size]
