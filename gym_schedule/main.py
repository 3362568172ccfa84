import logging

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from gym_schedule.config import config
from gym_schedule.dependencies import get_db
from gym_schedule.endpoints import (
    activity,
    bookings,
    check_ins,
    classes,
    members,
    stats,
)

logging.basicConfig(level=config.LOG_LEVEL)

logger = logging.getLogger(__name__)
logger.setLevel(config.LOG_LEVEL)

ch = logging.StreamHandler()
ch.setLevel(config.LOG_LEVEL)

formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
ch.setFormatter(formatter)

logger.addHandler(ch)
logger.propagate = False

logger.info(f"Application started, operating timezone {config.OPERATING_TIMEZONE}")


app = FastAPI(
    title="Gym Schedule API",
    description="API для расписания занятий, записей и посещаемости зала",
    version="1.0.0"
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Регистрация маршрутов
app.include_router(classes.router)
app.include_router(bookings.router)
app.include_router(check_ins.router)
app.include_router(members.router)
app.include_router(stats.router)
app.include_router(activity.router)


@app.get("/")
def read_root():
    return {"message": "Welcome to Gym Schedule API"}


@app.get("/healthz")
async def healthz():
    return {"message": "Healthy!"}


# Обработка ошибок валидации
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        if 'ctx' in error and 'error' in error['ctx']:
            # Если ошибка содержит ValueError, берем его сообщение
            if isinstance(error['ctx']['error'], ValueError):
                error['msg'] = str(error['ctx']['error'])
                del error['ctx']
        errors.append(error)

    return JSONResponse(
        status_code=422,
        content={"detail": errors},
    )


# Проверка подключения к базе данных
@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return {"status": "unhealthy", "database": "disconnected"}
