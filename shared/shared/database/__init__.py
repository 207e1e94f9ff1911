from shared.database.postgres import (
    AsyncSessionFactory,
    Base,
    get_async_session_factory,
    is_sqlite_url,
)

__all__ = [
    "AsyncSessionFactory",
    "Base",
    "get_async_session_factory",
    "is_sqlite_url",
]
