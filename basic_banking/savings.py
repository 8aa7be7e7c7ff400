"""
Savings Account Module

Savings accounts carry an interest rate and accrue interest only when the
caller presents the account PIN.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union
import hmac
import logging
import uuid

from .accounts import Account, AccountBalance, Amount, OperationResult
from .config import get_config
from .currency import Money
from .events import DomainEvent, EventDispatcher
from .logging_config import log_action


logger = logging.getLogger(__name__)

Pin = Union[int, str]


def _normalize_pin(pin: Pin) -> str:
    if isinstance(pin, bool):
        raise ValueError("PIN must be numeric")
    if isinstance(pin, int):
        if pin < 0:
            raise ValueError("PIN must not be negative")
        return str(pin)
    if isinstance(pin, str) and pin.isdigit():
        return pin
    raise ValueError("PIN must be numeric")


class SavingsAccount(Account):
    """
    Savings account with PIN-gated interest accrual
    """

    def __init__(
        self,
        interest_rate: Union[Decimal, int, float, str],
        pin: Pin,
        account_id: Optional[str] = None,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        try:
            rate = Decimal(str(interest_rate))
        except InvalidOperation:
            raise ValueError(f"Invalid interest rate: {interest_rate!r}")
        if not rate.is_finite():
            raise ValueError(f"Interest rate must be finite: {interest_rate!r}")
        if rate < Decimal('0'):
            raise ValueError("Interest rate must not be negative")

        self.id = account_id or str(uuid.uuid4())
        self._interest_rate = rate
        self._pin = _normalize_pin(pin)
        self._balance = AccountBalance(self.id, "savings_account", event_dispatcher)

    @property
    def interest_rate(self) -> Decimal:
        return self._interest_rate

    @property
    def balance(self) -> Money:
        return self._balance.amount

    def deposit(self, amount: Amount) -> None:
        self._balance.deposit(amount)

    def withdraw(self, amount: Amount) -> None:
        self._balance.withdraw(amount)

    def process_interest(self, pin: Pin) -> OperationResult:
        """
        Deposit balance x interest_rate into this account

        A wrong PIN changes nothing and raises nothing.

        Returns:
            OperationResult.OK, or OperationResult.UNAUTHORIZED on PIN mismatch
        """
        if not self._pin_matches(pin):
            log_action(
                logger, "warning", f"Interest denied on {self.id}: PIN mismatch",
                action="process_interest", resource=self.id
            )
            self._balance.publish(DomainEvent.INTEREST_DENIED, {
                "reason": OperationResult.UNAUTHORIZED.value
            })
            return OperationResult.UNAUTHORIZED

        with self._balance.lock:
            interest = self._balance.amount * self._interest_rate
            new_balance = self._balance.credit(interest)

        self._balance.announce_deposit(interest, new_balance)
        log_action(
            logger, "info", f"Posted interest {interest} to {self.id}",
            action="process_interest", resource=self.id,
            extra={"interest": str(interest.amount), "rate": str(self._interest_rate)}
        )
        self._balance.publish(DomainEvent.INTEREST_POSTED, {
            "interest": str(interest.amount),
            "rate": str(self._interest_rate)
        })
        return OperationResult.OK

    def _pin_matches(self, pin: Pin) -> bool:
        return hmac.compare_digest(str(pin).encode(), self._pin.encode())

    def __str__(self) -> str:
        return f"Savings Balance: {self.balance.to_string(get_config().currency_symbol)}"
