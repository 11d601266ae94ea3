from datetime import date, datetime
import re
from uuid import UUID
from pydantic import BaseModel, model_validator
from typing import Any, List, Union, get_args, get_origin

INVISIBLE_CHARS_PATTERN = re.compile(
    r'[\u200e\u200f\u202a-\u202e\u2066-\u2069\ufeff]')


def deep_clean(value: Any):
    """Recursively convert blank strings to None and strip invisible chars."""
    if isinstance(value, BaseModel):
        return type(value)(**deep_clean(value.model_dump()))

    if isinstance(value, dict):
        return {k: deep_clean(v) for k, v in value.items()}

    if isinstance(value, list):
        return [deep_clean(v) for v in value]

    if isinstance(value, str):
        cleaned = INVISIBLE_CHARS_PATTERN.sub("", value).strip()
        return None if cleaned == "" else cleaned

    return value


def safe_parse_date(value: Any):
    """Convert date strings to date/datetime, return None if invalid."""
    if value is None or value == "":
        return None

    if isinstance(value, (date, datetime)):
        return value

    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def _is_union_with(annotation, *types) -> bool:
    origin = get_origin(annotation)
    args = get_args(annotation)
    return annotation in types or (origin is Union and any(a in types for a in args))


class EmptyStringModel(BaseModel):
    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    @model_validator(mode="before")
    @classmethod
    def clean_input(cls, values):
        if not isinstance(values, dict):
            return values

        values = deep_clean(values)
        for field_name, field in cls.model_fields.items():
            if field_name in values and _is_union_with(field.annotation, date, datetime):
                values[field_name] = safe_parse_date(values[field_name])
        return values

    @model_validator(mode="after")
    def finalize_nulls(self):
        """Convert None to UI friendly values (lists -> [], strings/uuids -> ""). Dates stay None."""
        for field_name, field in type(self).model_fields.items():
            if getattr(self, field_name) is not None:
                continue

            annotation = field.annotation
            origin = get_origin(annotation)

            if origin in (list, List) or annotation in (list, List):
                object.__setattr__(self, field_name, [])
            elif _is_union_with(annotation, str, UUID):
                object.__setattr__(self, field_name, "")

        return self
