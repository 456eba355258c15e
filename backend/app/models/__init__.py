# Models package
from .user import User
from .transaction import Transaction, EntryType
from .category import Category
from .goal import Goal
