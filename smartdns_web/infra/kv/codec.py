"""JSON encoding of pydantic records stored as key-value values."""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from smartdns_web.core.exceptions import DeserializationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def dump_record(record: BaseModel) -> str:
    """Serialize a record with its wire (alias) field names."""
    return record.model_dump_json(by_alias=True)


def load_record(key: str, raw: str, model: type[ModelT]) -> ModelT:
    """Parse the value stored at ``key`` into ``model``.

    Raises:
        DeserializationError: If ``raw`` is not JSON of the expected shape.
    """
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        reason = e.errors()[0]["msg"] if e.errors() else str(e)
        raise DeserializationError(key, reason) from e
