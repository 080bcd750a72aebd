# restaurant_pos/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from restaurant_pos.core.config import settings

# SQLite needs the connection shared with the threadpool that runs sync endpoints
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.ENVIRONMENT == "development" and settings.LOG_LEVEL.upper() == "DEBUG",
    pool_pre_ping=True,
    connect_args=connect_args,
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
