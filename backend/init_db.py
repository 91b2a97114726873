"""Create the workout tables for local development."""

from workout_logger.database import create_sync_engine
from workout_logger.models import Base


def init_db():
    """Create all tables in the database."""
    engine = create_sync_engine()
    Base.metadata.create_all(bind=engine)
    print("Database tables created successfully!")


if __name__ == "__main__":
    init_db()
