"""SQLAlchemy models for the ledgerbook database."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


def _uuid() -> str:
    return str(uuid.uuid4())


class Category(Base):
    """Category (main account) model. The id is a user-assigned code."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    entry_type = Column(String, nullable=False, default="both")
    advance_period_days = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    accounts = relationship("Account", back_populates="category", cascade="all, delete-orphan")
    ledger_entries = relationship(
        "LedgerEntry", back_populates="category", cascade="all, delete-orphan"
    )


class Account(Base):
    """Account (sub account) model."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=_uuid)
    category_id = Column(String, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="accounts")
    ledger_entries = relationship(
        "LedgerEntry", back_populates="account", cascade="all, delete-orphan"
    )


class LedgerEntry(Base):
    """Ledger entry model. category_id mirrors the account's category."""

    __tablename__ = "ledger_entries"

    id = Column(String(36), primary_key=True, default=_uuid)
    date = Column(Date, nullable=False, index=True)
    category_id = Column(String, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(
        String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    statement = Column(String, nullable=True)
    receivable = Column(Numeric(14, 2), nullable=False, default=0)
    debt = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="ledger_entries")
    account = relationship("Account", back_populates="ledger_entries")


class LedgerDraft(Base):
    """In-progress multi-entry batch; entries are stored as a JSON list."""

    __tablename__ = "ledger_drafts"

    id = Column(String(36), primary_key=True, default=_uuid)
    date = Column(Date, nullable=True)
    entries = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


class Report(Base):
    """Saved report definition; parameters are stored as JSON."""

    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String, nullable=False)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    parameters = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str, **engine_kwargs) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory and make sure the schema exists."""
    engine = create_engine(database_url, echo=False, **engine_kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
