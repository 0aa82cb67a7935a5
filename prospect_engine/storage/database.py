"""Database connection, session management and the prospect table."""

import uuid
from typing import Optional

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.settings import DATABASE_CONFIG

# Base class for models
Base = declarative_base()


class ProspectRow(Base):
    __tablename__ = "people_prospects"
    __table_args__ = (
        UniqueConstraint(
            "workspace_id", "linkedin_url_canonical",
            name="uq_people_prospects_workspace_canonical",
        ),
        Index("idx_people_prospects_icp", "workspace_id", "icp"),
        Index("idx_people_prospects_intent", "workspace_id", "intent_heat"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    workspace_id = Column(String(36), nullable=False, index=True)
    full_name = Column(Text)
    linkedin_url = Column(Text)
    linkedin_url_canonical = Column(Text, nullable=False)
    source_url = Column(Text)
    icp = Column(String(32))
    role_detected = Column(Text)
    icp_match_score = Column(Integer)
    icp_confidence = Column(String(16))   # high / medium / low
    intent_heat = Column(String(16), default="cold")   # cold / warm / hot
    geo_state = Column(Text)
    geo_city = Column(Text)
    times_seen = Column(Integer, default=1)
    first_seen_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True))


def create_db_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    url = url or DATABASE_CONFIG["url"]
    echo = DATABASE_CONFIG["echo"] if echo is None else echo

    kwargs = {"echo": echo, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


def init_db(engine: Engine) -> None:
    """Create the prospect table and indexes if missing."""
    Base.metadata.create_all(bind=engine)
