# restaurant_pos/initial_data.py
import logging

from sqlalchemy.orm import Session

from restaurant_pos import crud
from restaurant_pos.core.config import settings
from restaurant_pos.db.models.user import UserRole
from restaurant_pos.schemas.table import TableCreate
from restaurant_pos.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def init_db(db: Session) -> None:
    """Seed the dining room and the first owner account. Safe to run twice."""
    created = 0
    for number in range(1, settings.INITIAL_TABLE_COUNT + 1):
        if not crud.table.get_by_number(db, number=number):
            crud.table.create(db, obj_in=TableCreate(number=number))
            created += 1
    if created:
        logger.info(f"Created {created} table(s)")

    if not crud.user.get_by_username(db, username=settings.FIRST_OWNER_USERNAME):
        crud.user.create(
            db,
            obj_in=UserCreate(
                username=settings.FIRST_OWNER_USERNAME,
                password=settings.FIRST_OWNER_PASSWORD,
                role=UserRole.OWNER,
                full_name="Owner",
            ),
        )
        logger.info(f"Created owner account {settings.FIRST_OWNER_USERNAME!r}")
