from gym_schedule.config import config
from gym_schedule.core.clock import Clock, get_system_clock
from gym_schedule.database import SessionLocal
from gym_schedule.services.activity_log import ActivityLog

# Общая лента событий процесса
activity_log = ActivityLog(limit=config.ACTIVITY_LOG_LIMIT)


# Функция для получения сессии базы данных
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_clock() -> Clock:
    return get_system_clock()


def get_activity_log() -> ActivityLog:
    return activity_log
