"""
PlatformKit - Cache Value Codec

Encodes typed values to bytes and back using a pydantic TypeAdapter, so any
type pydantic can validate (scalars, containers, dataclasses, models, nested
combinations) round-trips exactly.

Values are stored inside a one-element JSON array. The array carries the
codec's JSON settings (non-finite floats as Infinity/NaN constants, bytes as
base64), which then apply to plain dataclasses too. Pydantic models and
pydantic dataclasses keep their own config: set the same options in their
model_config when they hold non-finite floats or arbitrary bytes.
"""

from typing import Any, Generic, TypeVar

from pydantic import ConfigDict, PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ..errors import BadArgumentError, UnknownError

T = TypeVar("T")

JSON_CONFIG = ConfigDict(
    ser_json_inf_nan="constants",
    ser_json_bytes="base64",
    val_json_bytes="base64",
)


class ValueCodec(Generic[T]):
    """Deterministic bytes encoding for values of type T."""

    def __init__(self, value_type: Any):
        self.value_type = value_type
        try:
            self._adapter: TypeAdapter[tuple[T]] = TypeAdapter(tuple[value_type], config=JSON_CONFIG)  # type: ignore[valid-type]
        except PydanticSchemaGenerationError as e:
            raise BadArgumentError(
                f"unsupported cache value type: {value_type!r}",
                details={"value_type": repr(value_type)},
            ) from e

    def encode(self, key: str, value: T) -> bytes:
        try:
            return self._adapter.dump_json((value,), warnings="error")
        except (PydanticSerializationError, ValueError, TypeError) as e:
            raise UnknownError(
                f"could not serialize value for key: {key}, error: {e}",
                details={"key": key, "value_type": repr(self.value_type)},
            ) from e

    def decode(self, key: str, data: bytes) -> T:
        try:
            return self._adapter.validate_json(data)[0]
        except ValidationError as e:
            raise UnknownError(
                f"could not deserialize value for key: {key}, error: {e}",
                details={"key": key, "value_type": repr(self.value_type)},
            ) from e
