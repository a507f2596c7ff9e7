"""
Model registry.

Importing this module registers every ledger table on ``Base.metadata``.
"""

from ledgerstore.app.models.account import Account
from ledgerstore.app.models.category import Category
from ledgerstore.app.models.expense import Expense
from ledgerstore.app.models.ledger import Ledger
from ledgerstore.app.models.tag import Tag
from ledgerstore.app.models.transaction import Transaction, transaction_tags
from ledgerstore.app.models.user import User

ENTITY_MODELS = (User, Ledger, Account, Category, Tag, Transaction, Expense)

__all__ = [
    "Account",
    "Category",
    "ENTITY_MODELS",
    "Expense",
    "Ledger",
    "Tag",
    "Transaction",
    "User",
    "transaction_tags",
]
