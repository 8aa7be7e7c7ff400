"""
Account Module

Defines the Account capability (read balance, deposit, withdraw) and the
balance holder shared by every account variant. Variants compose an
AccountBalance instead of inheriting from one another.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Union
from decimal import Decimal
import logging
import threading
import uuid

from .config import get_config
from .currency import Money, to_money
from .events import DomainEvent, EventDispatcher, publish_event
from .logging_config import log_action


logger = logging.getLogger(__name__)

Amount = Union[Money, Decimal, int, float, str]


class OperationResult(Enum):
    """Outcome of operations that can fail softly"""
    OK = "ok"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    ALREADY_CASHED = "already_cashed"
    UNAUTHORIZED = "unauthorized"
    UNKNOWN_CHECK = "unknown_check"


def validate_amount(amount: Amount, operation: str) -> Money:
    """Convert to Money and reject negative amounts"""
    money = to_money(amount)
    if money.is_negative():
        raise ValueError(f"{operation} amount must not be negative: {money.amount}")
    return money


class Account(ABC):
    """Capability to read a balance and to deposit or withdraw funds"""

    @property
    @abstractmethod
    def balance(self) -> Money:
        """Current balance, never negative"""

    @abstractmethod
    def deposit(self, amount: Amount) -> None:
        """Add a non-negative amount to the balance"""

    @abstractmethod
    def withdraw(self, amount: Amount) -> None:
        """Remove an amount, flooring the balance at zero"""


class AccountBalance:
    """
    Balance holder shared by all account variants.

    Owns the balance, the per-account lock and the floor-at-zero withdrawal
    policy. Every balance mutation of an account goes through one of these,
    under its lock. credit/debit mutate only; callers that hold the lock
    across several steps announce the change once the lock is released, so
    event handlers never run under an account lock.
    """

    def __init__(
        self,
        owner_id: str,
        owner_type: str = "account",
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        self.owner_id = owner_id
        self.owner_type = owner_type
        self.event_dispatcher = event_dispatcher
        self.lock = threading.RLock()
        self._amount = Money.zero()

    @property
    def amount(self) -> Money:
        with self.lock:
            return self._amount

    def credit(self, money: Money) -> Money:
        """Add a validated amount and return the new balance"""
        with self.lock:
            self._amount = self._amount + money
            return self._amount

    def debit(self, money: Money) -> Money:
        """Remove a validated amount, flooring at zero, and return the new balance"""
        with self.lock:
            if money <= self._amount:
                self._amount = self._amount - money
            else:
                self._amount = Money.zero()
            return self._amount

    def deposit(self, amount: Amount) -> Money:
        """
        Credit the balance

        Args:
            amount: Non-negative amount to credit

        Returns:
            The balance after the credit

        Raises:
            ValueError: If amount is negative or not finite
        """
        money = validate_amount(amount, "Deposit")
        new_balance = self.credit(money)
        self.announce_deposit(money, new_balance)
        return new_balance

    def withdraw(self, amount: Amount) -> Money:
        """
        Debit the balance, setting it to zero when amount exceeds it

        Returns:
            The balance after the debit

        Raises:
            ValueError: If amount is negative or not finite
        """
        money = validate_amount(amount, "Withdrawal")
        new_balance = self.debit(money)
        self.announce_withdrawal(money, new_balance)
        return new_balance

    def announce_deposit(self, money: Money, new_balance: Money) -> None:
        log_action(
            logger, "debug", f"Deposited {money} into {self.owner_type} {self.owner_id}",
            action="deposit", resource=self.owner_id,
            extra={"amount": str(money.amount), "balance": str(new_balance.amount)}
        )
        self.publish(DomainEvent.DEPOSIT_MADE, {
            "amount": str(money.amount),
            "balance": str(new_balance.amount)
        })

    def announce_withdrawal(self, money: Money, new_balance: Money) -> None:
        log_action(
            logger, "debug", f"Withdrew {money} from {self.owner_type} {self.owner_id}",
            action="withdraw", resource=self.owner_id,
            extra={"amount": str(money.amount), "balance": str(new_balance.amount)}
        )
        self.publish(DomainEvent.WITHDRAWAL_MADE, {
            "amount": str(money.amount),
            "balance": str(new_balance.amount)
        })

    def publish(self, event_type: DomainEvent, data: dict) -> None:
        publish_event(
            event_type, self.owner_type, self.owner_id, data,
            dispatcher=self.event_dispatcher
        )


class BasicAccount(Account):
    """Minimal account: deposits add, withdrawals clamp at zero"""

    def __init__(
        self,
        account_id: Optional[str] = None,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        self.id = account_id or str(uuid.uuid4())
        self._balance = AccountBalance(self.id, "basic_account", event_dispatcher)

    @property
    def balance(self) -> Money:
        return self._balance.amount

    def deposit(self, amount: Amount) -> None:
        self._balance.deposit(amount)

    def withdraw(self, amount: Amount) -> None:
        self._balance.withdraw(amount)

    def __str__(self) -> str:
        return f"Balance: {self.balance.to_string(get_config().currency_symbol)}"
