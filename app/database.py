from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import SQLModel, Session, create_engine
from .config import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    echo=False,
    connect_args=connect_args
)


def create_db_and_tables():
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session


def upsert_statement(db: Session, model):
    """
    INSERT for `model` in the bound dialect, supporting ON CONFLICT DO UPDATE.

    Every insert-or-update on a unique key goes through this as one statement.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    return sqlite.insert(model)
