# Database configuration
import secrets
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def generate_object_id() -> str:
    """Store-assigned identifier: 24 lowercase hex characters"""
    return secrets.token_hex(12)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
        echo=echo,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine) -> None:
    """Create tables that do not exist yet"""
    # Models must be imported so their tables are registered on Base.metadata
    from blog_api import models  # noqa: F401

    Base.metadata.create_all(bind=bind)


# Database dependency
def get_db(request: Request) -> Generator[Session, None, None]:
    """Get a session from the application's session factory"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
