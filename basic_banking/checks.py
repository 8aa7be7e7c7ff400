"""
Check Module

A check is a bearer instrument: a fixed, single-use claim on funds already
withdrawn from the issuing checking account. It circulates independently of
any account and moves from ISSUED to CASHED exactly once.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import threading
import weakref

from .currency import Money


# Held only by this module; a Check cannot be constructed without it
_ISSUE_TOKEN = object()

# Every check handed out by issue_check, so copies are not redeemable
_issued = weakref.WeakSet()
_issued_lock = threading.Lock()


class CheckState(Enum):
    """Check lifecycle states"""
    ISSUED = "issued"    # Written, funds debited from the issuer
    CASHED = "cashed"    # Redeemed, terminal


@dataclass(eq=False)
class Check:
    """
    Paper check written by a CheckingAccount.

    Only CheckingAccount.write_check creates these (through issue_check);
    only CheckingAccount.deposit_check redeems them.
    """
    amount: Money
    account_number: str
    number: int
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _token: object = field(default=None, repr=False)
    _cashed: bool = field(default=False, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self):
        if self._token is not _ISSUE_TOKEN:
            raise ValueError("Checks are issued only by CheckingAccount.write_check")
        if self.amount.is_negative():
            raise ValueError("Check amount must not be negative")
        if not self.account_number:
            raise ValueError("Check must carry the issuing account number")

    @property
    def cashed(self) -> bool:
        return self._cashed

    @property
    def state(self) -> CheckState:
        return CheckState.CASHED if self._cashed else CheckState.ISSUED

    @property
    def is_genuine(self) -> bool:
        """True if this exact object was issued by a checking account"""
        with _issued_lock:
            return self in _issued

    def cash(self) -> None:
        """Mark the check cashed. Calling it again has no further effect."""
        with self._lock:
            self._cashed = True

    def _claim(self) -> bool:
        """
        Atomically move ISSUED -> CASHED.

        Returns True only for the caller that performed the transition, so
        concurrent redemptions credit the check at most once.
        """
        with self._lock:
            if self._cashed:
                return False
            self._cashed = True
            return True

    def __repr__(self) -> str:
        return (f"Check(number={self.number}, account_number={self.account_number!r}, "
                f"amount={self.amount}, state={self.state.value})")


def issue_check(amount: Money, account_number: str, number: int) -> Check:
    """Create and register a check. Called by CheckingAccount.write_check."""
    check = Check(amount=amount, account_number=account_number, number=number,
                  _token=_ISSUE_TOKEN)
    with _issued_lock:
        _issued.add(check)
    return check
