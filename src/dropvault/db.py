"""Engine singleton and data directory."""
from sqlmodel import SQLModel, create_engine

from dropvault.config import settings

DATA_DIR = settings.data_dir
DATA_DIR.mkdir(parents=True, exist_ok=True)

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args={"check_same_thread": False} if settings.database_url.startswith("sqlite") else {},
)


def init_db() -> None:
    """Create every table registered on SQLModel.metadata."""
    import dropvault.models  # noqa: F401
    SQLModel.metadata.create_all(engine)
