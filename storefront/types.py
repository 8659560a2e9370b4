"""Column types shared by the models and the migration revisions.

PostgreSQL gets its native types; other dialects (SQLite in tests) fall back
to JSON.
"""
from sqlalchemy import JSON, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.types import TypeDecorator
from pydantic import TypeAdapter


def text_array():
    return JSON().with_variant(ARRAY(Text), "postgresql")


class VersionedJSON(TypeDecorator):
    """JSON column holding a pydantic structure (or a list of them).

    Values are validated on the way in and on the way out, so rows written
    with an unknown shape or version surface as a ValidationError on load.
    In-place edits (``user.address.city = ...``, ``cart.items.append(...)``)
    are not tracked; assign a new value to persist a change.
    """

    impl = JSON
    cache_ok = True

    def __init__(self, annotation):
        # None is SQL NULL, not the JSON literal null
        super().__init__(none_as_null=True)
        self.annotation = annotation
        self._adapter = TypeAdapter(annotation)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = self._adapter.validate_python(value)
        return self._adapter.dump_python(value, mode="json", by_alias=True)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self._adapter.validate_python(value)
