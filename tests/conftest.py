from datetime import date, datetime
import os

# Настройки окружения должны быть выставлены до импорта приложения
os.environ["TESTING"] = "true"
os.environ["ENVIRONMENT"] = "dev"
os.environ["DATABASE_URL"] = "sqlite:///./test_database.db"
os.environ["OPERATING_TIMEZONE"] = "UTC"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from gym_schedule.main import app
from gym_schedule.database import Base
from gym_schedule.dependencies import get_activity_log, get_clock, get_db
from gym_schedule.models import (
    ClassStatus,
    GymClass,
    Member,
    MembershipStatus,
    ScheduleSlot,
    UserRole,
)
from gym_schedule.auth.jwt_handler import create_access_token
from gym_schedule.core.clock import FixedClock
from gym_schedule.services.activity_log import ActivityLog

DATABASE_URL = "sqlite:///./test_database.db"

# Понедельник, 19 октября 2026, 05:00 UTC: за час до утреннего занятия
MONDAY_MORNING = datetime(2026, 10, 19, 5, 0)

# Глобальная переменная для отслеживания первого теста
_first_test = True


@pytest.fixture(scope="function")
def db_session():
    """
    Фикстура для работы с одной общей сессией базы данных внутри каждого теста.
    """
    global _first_test

    # Удаляем файл базы данных только перед первым тестом
    if _first_test and os.path.exists("test_database.db"):
        os.remove("test_database.db")
        _first_test = False

    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(MONDAY_MORNING, "UTC")


@pytest.fixture
def activity_log() -> ActivityLog:
    return ActivityLog(limit=200)


@pytest.fixture
def client(db_session, fixed_clock, activity_log):
    """
    Тестовый клиент FastAPI: тестовая база, зафиксированное время и своя лента событий.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    app.dependency_overrides[get_activity_log] = lambda: activity_log

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_clock, None)
    app.dependency_overrides.pop(get_activity_log, None)


@pytest.fixture
def auth_headers(client):
    """
    dev_token принимается при ENVIRONMENT=dev и даёт роль admin.
    """
    return {"Authorization": "Bearer dev_token"}


def make_member(db_session: Session, email: str, **kwargs) -> Member:
    member = Member(
        first_name=kwargs.pop("first_name", "Test"),
        last_name=kwargs.pop("last_name", "Member"),
        email=email,
        phone=kwargs.pop("phone", "0940000000"),
        date_of_birth=kwargs.pop("date_of_birth", date(1990, 5, 15)),
        membership_type=kwargs.pop("membership_type", "Monthly"),
        status=kwargs.pop("status", MembershipStatus.ACTIVE),
        role=kwargs.pop("role", UserRole.MEMBER),
        **kwargs,
    )
    db_session.add(member)
    db_session.commit()
    db_session.refresh(member)
    return member


def member_headers(member: Member) -> dict:
    token = create_access_token({"sub": member.email, "id": member.id, "role": member.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_member(db_session: Session) -> Member:
    return make_member(
        db_session,
        "anna@example.com",
        first_name="Anna",
        last_name="Kowalska",
        date_of_birth=date(1992, 10, 21),
    )


@pytest.fixture
def second_member(db_session: Session) -> Member:
    return make_member(db_session, "boris@example.com", first_name="Boris", last_name="Ivanov")


@pytest.fixture
def third_member(db_session: Session) -> Member:
    return make_member(db_session, "clara@example.com", first_name="Clara", last_name="Novak")


@pytest.fixture
def test_class(db_session: Session) -> GymClass:
    """
    Занятие на два места: понедельник 06:00-07:00 и среда 18:00-19:00.
    """
    gym_class = GymClass(
        name="Morning HIIT",
        description="High intensity interval training",
        duration_minutes=60,
        max_capacity=2,
        price=0,
        status=ClassStatus.ACTIVE,
    )
    gym_class.schedule_slots = [
        ScheduleSlot(day_of_week=1, start_time="06:00", end_time="07:00"),
        ScheduleSlot(day_of_week=3, start_time="18:00", end_time="19:00"),
    ]
    db_session.add(gym_class)
    db_session.commit()
    db_session.refresh(gym_class)
    return gym_class


@pytest.fixture
def member_factory(db_session: Session):
    def factory(email: str, **kwargs) -> Member:
        return make_member(db_session, email, **kwargs)
    return factory


@pytest.fixture
def headers_for():
    """Заголовок с JWT конкретного пользователя (например, участника с ролью member)."""
    return member_headers
