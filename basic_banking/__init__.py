"""
Basic Banking

An in-process account model with checking accounts that issue single-use
checks and savings accounts that accrue interest behind a PIN. All balance
arithmetic uses Decimal.
"""

from .currency import Money, to_money
from .accounts import Account, AccountBalance, BasicAccount, OperationResult
from .checks import Check, CheckState
from .checking import CheckingAccount
from .savings import SavingsAccount

__version__ = "1.0.0"

__all__ = [
    "Money",
    "to_money",
    "Account",
    "AccountBalance",
    "BasicAccount",
    "OperationResult",
    "Check",
    "CheckState",
    "CheckingAccount",
    "SavingsAccount",
]
