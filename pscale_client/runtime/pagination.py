"""
Page-number pagination for list operations.

PlanetScale list endpoints take a 1-indexed ``page`` (and optional
``per_page``) and answer with ``current_page``, ``next_page`` (null on the
last page), ``prev_page`` and a ``data`` array. ``paginate_pages`` follows
``next_page`` lazily; ``paginate_items`` flattens the ``data`` arrays.
Operations that use other field names describe them with a
``PaginationTrait``.
"""

from __future__ import annotations

from contextlib import aclosing
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, Mapping, TypeVar

from loguru import logger
from pydantic import BaseModel, Field

ItemT = TypeVar("ItemT")

PageOperation = Callable[[dict[str, Any]], Awaitable[Any]]


class PaginationTrait(BaseModel):
    """Field names describing how an operation paginates.

    Attributes:
        input_token: Input field carrying the page number.
        output_token: Dotted path to the next page number in the output.
        items: Dotted path to the item list in the output.
        page_size: Input field limiting the page size, if any.
        start: First page number (or cursor).
    """

    input_token: str = "page"
    output_token: str = "next_page"
    items: str = "data"
    page_size: str | None = "per_page"
    start: int | str = 1

    model_config = {"frozen": True}


DEFAULT_PAGINATION_TRAIT = PaginationTrait()


class Page(BaseModel, Generic[ItemT]):
    """A paginated response following the default convention."""

    current_page: int
    next_page: int | None = None
    next_page_url: str | None = None
    prev_page: int | None = None
    prev_page_url: str | None = None
    data: list[ItemT] = Field(default_factory=list)


def get_path(obj: Any, path: str) -> Any:
    """Look up a dotted path through mappings and model fields.

    Returns None when any segment is missing.
    """
    current = obj
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(part)
        elif isinstance(current, BaseModel):
            extra = current.model_extra or {}
            if part in type(current).model_fields:
                current = getattr(current, part)
            else:
                current = extra.get(part)
        elif hasattr(current, "__dict__"):
            current = vars(current).get(part)
        else:
            return None
    return current


def _base_input(input: Mapping[str, Any] | BaseModel | None) -> dict[str, Any]:
    if input is None:
        return {}
    if isinstance(input, BaseModel):
        return input.model_dump(exclude_unset=True, by_alias=True)
    return dict(input)


async def paginate_pages(
    operation: PageOperation,
    input: Mapping[str, Any] | BaseModel | None = None,
    pagination: PaginationTrait = DEFAULT_PAGINATION_TRAIT,
    page_size: int | None = None,
) -> AsyncIterator[Any]:
    """Yield every page of a paginated operation, in order.

    The operation is called with the fixed input plus the page number,
    starting at ``pagination.start``. Iteration stops once the next page
    number is missing or null. A failing call ends the iteration with that
    error.

    Args:
        operation: Async callable taking the input mapping for one page.
        input: Non-paging input fields.
        pagination: Field-name convention of the operation.
        page_size: Optional page size, sent in ``pagination.page_size``.

    Example:
        async for page in paginate_pages(list_page, {"organization": "acme"}):
            ...
    """
    fixed = _base_input(input)
    fixed.pop(pagination.input_token, None)
    if page_size is not None:
        if pagination.page_size is None:
            raise ValueError("This operation does not support a page size")
        fixed[pagination.page_size] = page_size

    page: Any = pagination.start
    while True:
        logger.debug(f"Fetching page {page}")
        response = await operation({**fixed, pagination.input_token: page})
        yield response

        next_page = get_path(response, pagination.output_token)
        if next_page is None:
            return
        page = next_page


async def paginate_items(
    operation: PageOperation,
    input: Mapping[str, Any] | BaseModel | None = None,
    pagination: PaginationTrait = DEFAULT_PAGINATION_TRAIT,
    page_size: int | None = None,
) -> AsyncIterator[Any]:
    """Yield the items of every page of a paginated operation, in order.

    Pages with an empty or missing item list contribute nothing; whether
    another page is fetched depends only on the next page number.
    """
    pages = paginate_pages(operation, input, pagination, page_size)
    async with aclosing(pages):
        async for page in pages:
            for item in get_path(page, pagination.items) or ():
                yield item
