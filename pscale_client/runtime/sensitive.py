"""
Redaction wrapper for secret-bearing fields.

Values read from the wire into a ``Sensitive[...]`` field are always wrapped
in ``Redacted`` so they never print or log as plain text. When writing to the
wire the raw value is emitted, and callers may supply either a raw value or a
``Redacted`` one.

Example:
    class ServiceToken(BaseModel):
        id: str
        token: SensitiveStr

    token = ServiceToken.model_validate({"id": "abc", "token": "pscale_tkn_..."})
    print(token.token)            # <redacted>
    token.model_dump(mode="json")  # {"id": "abc", "token": "pscale_tkn_..."}
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar, get_args

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

T = TypeVar("T")

PLACEHOLDER = "<redacted>"


class Redacted(Generic[T]):
    """A value that renders as a fixed placeholder instead of its content."""

    __slots__ = ("_value",)

    def __init__(self, value: T):
        if isinstance(value, Redacted):
            value = value.value
        self._value = value

    @property
    def value(self) -> T:
        """The wrapped raw value."""
        return self._value

    def get_secret_value(self) -> T:
        return self._value

    def __str__(self) -> str:
        return PLACEHOLDER

    def __repr__(self) -> str:
        return PLACEHOLDER

    def __format__(self, format_spec: str) -> str:
        return format(PLACEHOLDER, format_spec)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Redacted):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Redacted, self._value))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        args = get_args(source)
        inner = handler.generate_schema(args[0]) if args else core_schema.any_schema()

        # Raw value: validate against the inner type, then wrap
        from_raw = core_schema.no_info_after_validator_function(cls, inner)
        # Already wrapped: unwrap, re-validate, wrap again
        from_wrapped = core_schema.chain_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_plain_validator_function(unwrap),
                from_raw,
            ]
        )

        return core_schema.json_or_python_schema(
            json_schema=from_raw,
            python_schema=core_schema.union_schema(
                [from_wrapped, from_raw], mode="left_to_right"
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                _serialize, info_arg=True
            ),
        )


def _serialize(value: Any, info: core_schema.SerializationInfo) -> Any:
    # Only the wire (JSON) form exposes the raw value
    if info.mode_is_json():
        return unwrap(value)
    return value


# Field annotation: ``token: Sensitive[str]``
Sensitive = Redacted

SensitiveStr = Redacted[str]
SensitiveNullableStr = Optional[Redacted[str]]


def unwrap(value: Any) -> Any:
    """Return the raw value whether or not ``value`` is redacted."""
    if isinstance(value, Redacted):
        return value.value
    return value
