"""
Initialize database schema and seed the journal registry.

Run ONCE when:
- first local setup
- new environment deployment
- journals were added to `sources` in settings.yaml

Usage:
    python -m journalfeed.scripts.init_db
"""

from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from journalfeed.config import Config, Settings
from journalfeed.database.db.models import Base
from journalfeed.database.db.session import engine as default_engine
from journalfeed.database.journal_repository import JournalRepository
from journalfeed.model.journal import Journal


def init_db(
    engine: Optional[Engine] = None,
    session_factory: Optional[sessionmaker] = None,
    settings: Optional[Settings] = None,
) -> int:
    """
    Create missing tables and upsert configured journals.

    Returns:
        number of journals seeded
    """
    settings = settings or Config
    Base.metadata.create_all(bind=engine or default_engine)

    repo = JournalRepository(session_factory)
    for seed in settings.sources:
        repo.upsert(Journal(**seed.model_dump()))
    return len(settings.sources)


def main():
    print("🔧 Initializing database schema...")
    seeded = init_db()
    print(f"✅ Database schema initialized ({seeded} journal(s) seeded).")


if __name__ == "__main__":
    main()
