from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager
import os

from gym_schedule.config import config


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(config.SQLALCHEMY_DATABASE_URI, **_engine_kwargs(config.SQLALCHEMY_DATABASE_URI))

# Создаем сессию для работы с базой данных
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Базовый класс для всех моделей
Base = declarative_base()


from sqlalchemy.orm import Session

@contextmanager
def transactional(db: Session):
    """
    A context manager for handling database transactions that is aware of the testing environment.

    In production, it commits or rolls back the transaction.
    In testing, it only flushes the session, leaving the final commit/rollback
    to the test runner's fixture.
    """
    is_test_mode = os.getenv("TESTING", "false").lower() == "true"

    if not is_test_mode:
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
    else:
        # Данные видны в пределах теста, но не фиксируются
        try:
            yield db
            db.flush()
        except Exception:
            db.rollback()
            raise
