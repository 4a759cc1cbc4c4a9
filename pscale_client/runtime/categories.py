"""
Semantic error categories.

Categories are tags attached to error *types* at definition time. They let
callers reason about failures (retry throttling, recover from not-found,
surface auth problems) without naming every concrete error variant an
operation can raise.
"""

from __future__ import annotations

import functools
import inspect
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=type)

# Attribute on an error class holding its frozenset of categories
CATEGORIES_ATTR = "__error_categories__"


class Category(str, Enum):
    """Semantic category of an error."""

    AUTH = "AuthError"
    BAD_REQUEST = "BadRequestError"
    CONFLICT = "ConflictError"
    NOT_FOUND = "NotFoundError"
    QUOTA = "QuotaError"
    SERVER = "ServerError"
    THROTTLING = "ThrottlingError"
    NETWORK = "NetworkError"
    PARSE = "ParseError"
    CONFIGURATION = "ConfigurationError"


TRANSIENT_CATEGORIES = frozenset({Category.THROTTLING, Category.SERVER, Category.NETWORK})


def with_categories(*categories: Category) -> Callable[[E], E]:
    """Class decorator attaching one or more categories to an error type.

    Categories inherited from base classes are kept, so a subclass of a
    categorized error is classified the same way plus whatever it adds.

    Example:
        @with_categories(Category.SERVER, Category.THROTTLING)
        class Overloaded(ApiErrorVariant):
            ...
    """

    def decorator(cls: E) -> E:
        inherited = getattr(cls, CATEGORIES_ATTR, frozenset())
        setattr(cls, CATEGORIES_ATTR, frozenset(inherited) | frozenset(categories))
        return cls

    return decorator


def categories_of(value: Any) -> frozenset[Category]:
    """Return the categories attached to an error's type (empty if none)."""
    if not isinstance(value, BaseException):
        return frozenset()
    return getattr(type(value), CATEGORIES_ATTR, frozenset())


def has_category(value: Any, category: Category) -> bool:
    """Check whether ``value`` is an error whose type carries ``category``.

    Never raises: non-error and uncategorized values simply return False.
    """
    return category in categories_of(value)


def is_auth_error(value: Any) -> bool:
    return has_category(value, Category.AUTH)


def is_bad_request_error(value: Any) -> bool:
    return has_category(value, Category.BAD_REQUEST)


def is_conflict_error(value: Any) -> bool:
    return has_category(value, Category.CONFLICT)


def is_not_found_error(value: Any) -> bool:
    return has_category(value, Category.NOT_FOUND)


def is_quota_error(value: Any) -> bool:
    return has_category(value, Category.QUOTA)


def is_server_error(value: Any) -> bool:
    return has_category(value, Category.SERVER)


def is_throttling_error(value: Any) -> bool:
    return has_category(value, Category.THROTTLING)


def is_network_error(value: Any) -> bool:
    return has_category(value, Category.NETWORK)


def is_parse_error(value: Any) -> bool:
    return has_category(value, Category.PARSE)


def is_configuration_error(value: Any) -> bool:
    return has_category(value, Category.CONFIGURATION)


def is_transient(value: Any) -> bool:
    """Check whether an error is worth retrying automatically.

    Transient errors are throttling (rate limiting), server (5xx) and
    network (connection, timeout) failures.
    """
    return bool(categories_of(value) & TRANSIENT_CATEGORIES)


async def _handle(handler: Callable[[BaseException], Any], error: BaseException) -> Any:
    result = handler(error)
    if inspect.isawaitable(result):
        result = await result
    return result


async def recover(
    awaitable: Awaitable[T],
    *categories: Category,
    handler: Callable[[BaseException], Any],
) -> Any:
    """Await ``awaitable``, recovering only from errors in ``categories``.

    Errors carrying none of the listed categories propagate unchanged.

    Example:
        db = await recover(client.call(get_database, inp), Category.NOT_FOUND,
                           handler=lambda e: None)
    """
    try:
        return await awaitable
    except Exception as e:
        if not any(has_category(e, category) for category in categories):
            raise
        return await _handle(handler, e)


def catch_category(
    *categories: Category,
    handler: Callable[[BaseException], Any],
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[Any]]]:
    """Decorator recovering an async function from errors in ``categories``.

    The handler may be sync or async; its result becomes the function's
    result. Any other failure propagates unchanged.

    Example:
        @catch_category(Category.AUTH, Category.NOT_FOUND, handler=lambda e: None)
        async def maybe_get_database(name: str) -> Database | None:
            ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await recover(func(*args, **kwargs), *categories, handler=handler)

        return wrapper

    return decorator


# One catcher per category, mirroring the is_*_error predicates.
Catcher = Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]


def catch_auth_error(handler: Callable[[BaseException], Any]) -> Catcher:
    return catch_category(Category.AUTH, handler=handler)


def catch_bad_request_error(handler: Callable[[BaseException], Any]) -> Catcher:
    return catch_category(Category.BAD_REQUEST, handler=handler)


def catch_conflict_error(handler: Callable[[BaseException], Any]) -> Catcher:
    return catch_category(Category.CONFLICT, handler=handler)


def catch_not_found_error(handler: Callable[[BaseException], Any]) -> Catcher:
    """Decorator recovering from not-found errors.

    Example:
        @catch_not_found_error(lambda e: None)
        async def maybe_get_database(name: str) -> Database | None:
            ...
    """
    return catch_category(Category.NOT_FOUND, handler=handler)


def catch_quota_error(handler: Callable[[BaseException], Any]) -> Catcher:
    return catch_category(Category.QUOTA, handler=handler)


def catch_server_error(handler: Callable[[BaseException], Any]) -> Catcher:
    return catch_category(Category.SERVER, handler=handler)


def catch_throttling_error(handler: Callable[[BaseException], Any]) -> Catcher:
    return catch_category(Category.THROTTLING, handler=handler)


def catch_network_error(handler: Callable[[BaseException], Any]) -> Catcher:
    return catch_category(Category.NETWORK, handler=handler)


def catch_parse_error(handler: Callable[[BaseException], Any]) -> Catcher:
    return catch_category(Category.PARSE, handler=handler)


def catch_configuration_error(handler: Callable[[BaseException], Any]) -> Catcher:
    return catch_category(Category.CONFIGURATION, handler=handler)
