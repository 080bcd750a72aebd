from .crud_bill import bill
from .crud_order import order
from .crud_table import table
from .crud_user import user
