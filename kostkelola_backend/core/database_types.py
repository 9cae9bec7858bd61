"""Custom database types shared by the models."""

import uuid

from sqlalchemy import JSON, String, TypeDecorator


class UUID(TypeDecorator):
    """Portable UUID type.

    Stores UUIDs as CHAR(36) strings so the same schema runs on PostgreSQL
    and SQLite. Converts between Python uuid.UUID objects and strings.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert UUID to string when saving to database."""
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        """Convert string to UUID when reading from database."""
        if value is None:
            return value
        if isinstance(value, str):
            return uuid.UUID(value)
        return value


class StringList(TypeDecorator):
    """JSON array of strings (amenities, rules, facilities, photo URLs).

    NULL is read back as an empty list.
    """

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return []
        return [str(item) for item in value]

    def process_result_value(self, value, dialect):
        if value is None:
            return []
        return list(value)
