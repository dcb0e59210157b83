# backend/app/models/types.py
"""
Custom SQLAlchemy types that work across different database backends.
"""

import json
from typing import TYPE_CHECKING, Any

from sqlalchemy import String, TypeDecorator
from sqlalchemy.dialects.postgresql import ARRAY

if TYPE_CHECKING:
    from sqlalchemy.sql.type_api import TypeDecorator as _TypeDecorator

    TypeDecoratorProtocol = _TypeDecorator[Any]
else:
    TypeDecoratorProtocol = TypeDecorator


class StringArrayType(TypeDecoratorProtocol):
    """
    A string array column.

    Uses PostgreSQL ARRAY when available and a JSON-encoded string elsewhere
    (SQLite for local runs and tests).
    """

    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect: Any) -> Any:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(ARRAY(String))
        return dialect.type_descriptor(String(2048))

    def process_bind_param(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return value
        if dialect.name == "postgresql":
            return list(value)
        if isinstance(value, (list, tuple)):
            return json.dumps([str(v) for v in value])
        return json.dumps([str(value)])

    def process_result_value(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return []
        if dialect.name == "postgresql":
            return list(value)
        if isinstance(value, str):
            return json.loads(value)
        return value
