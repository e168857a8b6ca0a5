import uuid

from uuid_utils import UUID


def to_db_uuid(value: UUID | uuid.UUID) -> uuid.UUID:
    """uuid_utils.UUID -> stdlib uuid.UUID expected by the asyncpg UUID column type"""
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


def from_db_uuid(value: uuid.UUID) -> UUID:
    return UUID(str(value))
