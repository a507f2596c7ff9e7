"""
Ledger enumerations.

Values are stored lowercase, exactly as written here.
"""

import enum

from sqlalchemy import Enum


class AccountType(str, enum.Enum):
    """
    Account type enumeration.

    Types:
        BALANCE: Regular balance account (cash, bank account, etc.)
        CREDIT_CARD: Credit card account
        INVESTMENT: Investment/financial account
        LOAN_OUT: Money lent out (owed to you)
        LOAN_IN: Money borrowed (you owe)
        OTHER: Anything else
    """
    BALANCE = "balance"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"
    LOAN_OUT = "loan_out"
    LOAN_IN = "loan_in"
    OTHER = "other"


class CategoryType(str, enum.Enum):
    """Category type enumeration."""
    EXPENSE = "expense"
    INCOME = "income"


class TransactionType(str, enum.Enum):
    """Transaction type enumeration."""
    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"  # Between accounts, including currency exchange
    REFUND = "refund"  # Reversal of a previous transaction
    REIMBURSEMENT = "reimbursement"  # Expense paid back


class TransactionStatus(str, enum.Enum):
    """Transaction status enumeration."""
    PENDING = "pending"
    COMPLETED = "completed"
    VOIDED = "voided"


def value_enum(enum_cls, length: int) -> Enum:
    """Column type storing an enum by its value in a plain VARCHAR."""
    return Enum(
        enum_cls,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        length=length,
    )
