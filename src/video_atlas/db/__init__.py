"""Database layer."""

from video_atlas.db.models import Base, VideoRecordModel, record_values
from video_atlas.db.session import (
    create_db_engine,
    create_session_factory,
    get_engine,
    get_session_factory,
    init_db,
    session_scope,
)

__all__ = [
    "Base",
    "VideoRecordModel",
    "create_db_engine",
    "create_session_factory",
    "get_engine",
    "get_session_factory",
    "init_db",
    "record_values",
    "session_scope",
]
