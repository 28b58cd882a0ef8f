from acadtrack.db.base import Base
from acadtrack.db.session import engine


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
