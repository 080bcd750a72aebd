# restaurant_pos/schemas/__init__.py
from .bill import Bill, BillLineItem, BillOrderSnapshot
from .event import EventKind, OrderEvent
from .menu import MenuItem
from .order import LineItem, LineItemCreate, Order, OrderCreate, TableOrders
from .table import Table, TableCreate, TableOccupy
from .user import Token, User, UserCreate
