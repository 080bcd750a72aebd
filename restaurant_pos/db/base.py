# Import all the models, so that Base has them before being
# imported by Alembic or used by create_all
from restaurant_pos.db.base_class import Base  # noqa: F401
from restaurant_pos.db.models.bill import Bill  # noqa: F401
from restaurant_pos.db.models.order import Order, OrderItem  # noqa: F401
from restaurant_pos.db.models.table import DiningTable  # noqa: F401
from restaurant_pos.db.models.user import User  # noqa: F401
