from sqlalchemy import (
    Column,
    Text,
    DateTime,
    Boolean,
    ForeignKey,
    Integer,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone


Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JournalRow(Base):
    """RSS source registry."""
    __tablename__ = "journals"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    rss_url = Column(Text, nullable=False)
    category = Column(Text)
    color = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    last_fetched_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class PaperRow(Base):
    __tablename__ = "papers"
    __table_args__ = (
        UniqueConstraint("journal_id", "dedup_key", name="uq_papers_journal_dedup"),
    )

    id = Column(Text, primary_key=True)
    journal_id = Column(Text, ForeignKey("journals.id"), nullable=False, index=True)

    title = Column(Text, nullable=False)
    authors = Column(JSON, nullable=False, default=list)
    abstract = Column(Text)
    url = Column(Text)
    dedup_key = Column(Text, nullable=False)

    published_date = Column(DateTime(timezone=True), index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class SummaryRow(Base):
    """AI summary; one row per generation request."""
    __tablename__ = "summaries"

    id = Column(Text, primary_key=True)
    paper_id = Column(Text, ForeignKey("papers.id"), nullable=False, index=True)

    ai_provider = Column(Text, nullable=False)
    ai_model = Column(Text, nullable=False)

    purpose = Column(Text)
    methodology = Column(Text)
    findings = Column(Text)
    implications = Column(Text)
    summary_text = Column(Text)

    created_at = Column(DateTime(timezone=True), default=_utcnow)


class FetchLogRow(Base):
    """One row per journal fetch attempt."""
    __tablename__ = "fetch_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    journal_id = Column(Text, nullable=False, index=True)
    status = Column(Text, nullable=False)  # success | error
    papers_fetched = Column(Integer, default=0)
    new_papers = Column(Integer, default=0)
    error_message = Column(Text)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
