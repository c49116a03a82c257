"""FastAPI dependencies for database access and caller identity."""

import threading
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from hyvmind_api.config import settings

# Requests run in a worker thread pool; sqlite connections must be shareable across them.
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    connect_args={"check_same_thread": False} if settings.is_sqlite else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Commands run one at a time against the graph, like messages to a single actor.
_command_lock = threading.Lock()


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for request handling."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_caller(x_principal: Annotated[str | None, Header()] = None) -> str | None:
    """Caller principal from the `X-Principal` header; None means anonymous."""
    return x_principal


@contextmanager
def command(db: Session) -> Iterator[None]:
    """Run one command serialized and atomically: commit on success, roll back on any error."""
    with _command_lock:
        try:
            yield
            db.commit()
        except Exception:
            db.rollback()
            raise


DbSession = Annotated[Session, Depends(get_db)]
Caller = Annotated[str | None, Depends(get_caller)]
