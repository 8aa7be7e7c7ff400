"""
Checking Account Module

Checking accounts issue checks against their balance and redeem checks
written by any checking account. Issuance authorizes and debits under the
account lock; redemption credits a genuine check at most once. Events are
published after the account lock is released.
"""

from typing import Optional, Set
import logging
import uuid

from .accounts import Account, AccountBalance, Amount, OperationResult, validate_amount
from .checks import Check, issue_check
from .config import get_config
from .currency import Money
from .events import DomainEvent, EventDispatcher
from .logging_config import log_action


logger = logging.getLogger(__name__)


class CheckingAccount(Account):
    """
    Checking account with check issuance and redemption
    """

    def __init__(
        self,
        account_number: Optional[str] = None,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        settings = get_config()
        if account_number is None:
            account_number = self._generate_account_number(settings.account_number_prefix)
        if not account_number:
            raise ValueError("Account number must not be empty")

        self._account_number = account_number
        self._balance = AccountBalance(account_number, "checking_account", event_dispatcher)
        self._issued_checks: Set[int] = set()
        self._current_check = settings.first_check_number

    @property
    def account_number(self) -> str:
        return self._account_number

    @property
    def balance(self) -> Money:
        return self._balance.amount

    @property
    def issued_checks(self) -> Set[int]:
        with self._balance.lock:
            return set(self._issued_checks)

    def deposit(self, amount: Amount) -> None:
        self._balance.deposit(amount)

    def withdraw(self, amount: Amount) -> None:
        self._balance.withdraw(amount)

    def write_check(self, amount: Amount) -> Optional[Check]:
        """
        Write a check and debit its amount from this account

        The balance must strictly exceed the amount; a check for exactly the
        current balance is declined.

        Args:
            amount: Non-negative check amount

        Returns:
            The issued Check, or None when funds are insufficient

        Raises:
            ValueError: If amount is negative or not finite
        """
        money = validate_amount(amount, "Check")

        check = None
        with self._balance.lock:
            balance = self._balance.amount
            if balance > money:
                number = self._next_number()
                check = issue_check(money, self.account_number, number)
                self._issued_checks.add(number)
                new_balance = self._balance.debit(money)

        if check is None:
            log_action(
                logger, "warning",
                f"Check for {money} declined on {self.account_number}: insufficient funds",
                action="write_check", resource=self.account_number,
                extra={"amount": str(money.amount), "balance": str(balance.amount)}
            )
            self._balance.publish(DomainEvent.CHECK_DECLINED, {
                "amount": str(money.amount),
                "reason": OperationResult.INSUFFICIENT_FUNDS.value
            })
            return None

        self._balance.announce_withdrawal(money, new_balance)
        log_action(
            logger, "info", f"Issued check #{check.number} for {money} on {self.account_number}",
            action="write_check", resource=self.account_number,
            extra={"check_number": check.number, "amount": str(money.amount)}
        )
        self._balance.publish(DomainEvent.CHECK_ISSUED, {
            "check_number": check.number,
            "amount": str(money.amount)
        })
        return check

    def deposit_check(self, check: Check) -> OperationResult:
        """
        Redeem a check into this account

        Checks are bearer instruments and may be deposited into any checking
        account. A check that has already been cashed, or that no checking
        account wrote, credits nothing.

        Returns:
            OperationResult.OK, OperationResult.ALREADY_CASHED or
            OperationResult.UNKNOWN_CHECK
        """
        if not check.is_genuine:
            return self._reject_check(check, OperationResult.UNKNOWN_CHECK)

        with self._balance.lock:
            claimed = check._claim()
            if claimed:
                new_balance = self._balance.credit(check.amount)

        if not claimed:
            return self._reject_check(check, OperationResult.ALREADY_CASHED)

        self._balance.announce_deposit(check.amount, new_balance)
        log_action(
            logger, "info",
            f"Cashed check #{check.number} from {check.account_number} into {self.account_number}",
            action="deposit_check", resource=self.account_number,
            extra={"check_number": check.number, "amount": str(check.amount.amount)}
        )
        self._balance.publish(DomainEvent.CHECK_CASHED, {
            "check_number": check.number,
            "issuer": check.account_number,
            "amount": str(check.amount.amount)
        })
        return OperationResult.OK

    def _reject_check(self, check: Check, reason: OperationResult) -> OperationResult:
        log_action(
            logger, "warning",
            f"Check #{check.number} from {check.account_number} refused: {reason.value}",
            action="deposit_check", resource=self.account_number,
            extra={"check_number": check.number, "issuer": check.account_number}
        )
        self._balance.publish(DomainEvent.CHECK_REJECTED, {
            "check_number": check.number,
            "issuer": check.account_number,
            "reason": reason.value
        })
        return reason

    def inspect_for_fraud(self, check_number: int) -> bool:
        """Check whether this account issued the given check number"""
        with self._balance.lock:
            return check_number in self._issued_checks

    def _next_number(self) -> int:
        """Allocate the next sequential check number. Caller holds the lock."""
        number = self._current_check
        self._current_check += 1
        return number

    @staticmethod
    def _generate_account_number(prefix: str) -> str:
        """Generate a unique account number"""
        return f"{prefix}{uuid.uuid4().hex[:12].upper()}"

    def __str__(self) -> str:
        return f"Checking Balance: {self.balance.to_string(get_config().currency_symbol)}"
