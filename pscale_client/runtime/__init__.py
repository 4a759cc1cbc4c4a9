"""
Client runtime shared by every PlanetScale operation.

This package provides:
- Category: Semantic error categories and predicates
- Operation: Endpoint descriptors and the request/response dispatcher
- RetryPolicy: Retry predicates and backoff schedules
- paginate_pages / paginate_items: Page-number pagination
- Redacted / Sensitive: Redaction of secret-bearing fields
"""

from .categories import (
    Category,
    catch_auth_error,
    catch_bad_request_error,
    catch_category,
    catch_configuration_error,
    catch_conflict_error,
    catch_network_error,
    catch_not_found_error,
    catch_parse_error,
    catch_quota_error,
    catch_server_error,
    catch_throttling_error,
    has_category,
    is_transient,
    recover,
    with_categories,
)
from .errors import (
    ApiError,
    ApiErrorVariant,
    ConfigError,
    ErrorCode,
    ErrorVariant,
    NetworkError,
    ParseError,
    PlanetScaleError,
)
from .operation import MissingPathParameterError, Operation, PaginatedOperation
from .pagination import DEFAULT_PAGINATION_TRAIT, Page, PaginationTrait, paginate_items, paginate_pages
from .retry import (
    DEFAULT_RETRY_POLICY,
    NO_RETRY_POLICY,
    THROTTLING_RETRY_POLICY,
    TRANSIENT_RETRY_POLICY,
    ExponentialBackoff,
    RetryPolicy,
    RetryState,
    retry_call,
    with_retry,
)
from .sensitive import Redacted, Sensitive, SensitiveStr, unwrap
from .transport import HttpxTransport, Transport, TransportResponse

__all__ = [
    "Category",
    "catch_auth_error",
    "catch_bad_request_error",
    "catch_category",
    "catch_configuration_error",
    "catch_conflict_error",
    "catch_network_error",
    "catch_not_found_error",
    "catch_parse_error",
    "catch_quota_error",
    "catch_server_error",
    "catch_throttling_error",
    "has_category",
    "is_transient",
    "recover",
    "with_categories",
    "ApiError",
    "ApiErrorVariant",
    "ConfigError",
    "ErrorCode",
    "ErrorVariant",
    "NetworkError",
    "ParseError",
    "PlanetScaleError",
    "MissingPathParameterError",
    "Operation",
    "PaginatedOperation",
    "DEFAULT_PAGINATION_TRAIT",
    "Page",
    "PaginationTrait",
    "paginate_items",
    "paginate_pages",
    "DEFAULT_RETRY_POLICY",
    "NO_RETRY_POLICY",
    "THROTTLING_RETRY_POLICY",
    "TRANSIENT_RETRY_POLICY",
    "ExponentialBackoff",
    "RetryPolicy",
    "RetryState",
    "retry_call",
    "with_retry",
    "Redacted",
    "Sensitive",
    "SensitiveStr",
    "unwrap",
    "HttpxTransport",
    "Transport",
    "TransportResponse",
]
