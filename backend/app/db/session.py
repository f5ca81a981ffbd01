from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import create_engine, Session

from app.utils import config

_engine: Optional[Engine] = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        url = config.database_url()
        connect_args = {}
        if url.startswith("sqlite"):
            # request handlers run in a threadpool
            connect_args["check_same_thread"] = False
        _engine = create_engine(url, echo=config.sql_echo(), connect_args=connect_args)
    return _engine


def reset_engine() -> None:
    """Dispose the cached engine so the next call picks up DATABASE_URL again."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def get_session() -> Session:
    engine = get_engine()
    return Session(engine)
