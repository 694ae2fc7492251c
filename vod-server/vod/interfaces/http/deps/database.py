"""Database session dependency."""

from vod.infrastructure.database.session import get_session

# commits when the request succeeds, rolls back when it raises
get_db_session = get_session

__all__ = ["get_db_session"]
