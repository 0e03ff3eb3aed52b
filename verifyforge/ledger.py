"""Credit accounting for test submissions."""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from verifyforge.models.base import Model
from verifyforge.models.job import Mode, TestType

log = logging.getLogger(__name__)

BASE_COSTS: Mapping[str, int] = {
    TestType.WEB: 10,
    TestType.DOCUMENT: 8,
    TestType.GAME: 15,
    TestType.AI: 12,
    TestType.AVATAR: 10,
    TestType.TOOL: 8,
    TestType.API: 5,
    TestType.MOBILE: 12,
}
DEFAULT_BASE_COST = 10

DISCOUNTS: Mapping[Mode, int] = {
    Mode.STANDARD: 0,
    Mode.ECONOMY: 40,
    Mode.ULTRA_ECONOMY: 60,
}

DEFAULT_FREE_TESTS = 3


class OverdraftPolicy(StrEnum):
    """What to do when a charge exceeds the remaining paid balance."""

    REJECT = "reject"
    ALLOW_NEGATIVE = "allow_negative"


class CreditBalance(Model):
    """Snapshot of an account's balance."""

    free_tests: int
    paid_credits: int
    total: int


class InsufficientCreditsError(Exception):
    """Raised when a submission cannot be paid for."""

    def __init__(self, balance: CreditBalance, required: int | None = None) -> None:
        self.balance = balance
        self.required = required
        message = "No credits remaining"
        if required is not None:
            message = (
                f"Insufficient credits: {required} required, "
                f"{balance.paid_credits} available"
            )
        super().__init__(message)


@dataclass(frozen=True, kw_only=True)
class CreditOutcome:
    """What a successful authorization cost the caller."""

    used_free_test: bool
    credits_charged: int


@dataclass(kw_only=True)
class CreditAccount:
    """Mutable balance of a caller. Only the ledger mutates it."""

    free_tests: int = DEFAULT_FREE_TESTS
    paid_credits: int = 0


def credit_cost(test_type: str, mode: Mode) -> int:
    """Return the paid credits a submission costs once free tests are gone.

    Equals ceil(base * (1 - discount / 100)), computed in integers.
    """
    base = BASE_COSTS.get(test_type, DEFAULT_BASE_COST)
    discount = DISCOUNTS.get(mode, 0)
    return -(-base * (100 - discount) // 100)


class CreditLedger:
    """Authorizes and charges submissions against a shared account.

    Every read-modify-write of the account happens under one lock, so
    concurrent submissions are charged exactly once each.
    """

    def __init__(
        self,
        account: CreditAccount | None = None,
        overdraft: OverdraftPolicy = OverdraftPolicy.REJECT,
    ) -> None:
        self.account = account if account is not None else CreditAccount()
        self.overdraft = overdraft
        self._lock = asyncio.Lock()

    def balance(self) -> CreditBalance:
        """Return the current balance."""
        return CreditBalance(
            free_tests=self.account.free_tests,
            paid_credits=self.account.paid_credits,
            total=self.account.free_tests + self.account.paid_credits,
        )

    async def authorize_and_charge(self, test_type: str, mode: Mode) -> CreditOutcome:
        """Consume a free test, or charge paid credits for the submission.

        Raises:
            InsufficientCreditsError: If neither free tests nor paid credits
                can cover the submission.

        """
        async with self._lock:
            account = self.account
            if account.free_tests > 0:
                account.free_tests -= 1
                log.info("Free test used, %d remaining", account.free_tests)
                return CreditOutcome(used_free_test=True, credits_charged=0)

            if account.paid_credits <= 0:
                raise InsufficientCreditsError(self.balance())

            cost = credit_cost(test_type, mode)
            if (
                self.overdraft is OverdraftPolicy.REJECT
                and cost > account.paid_credits
            ):
                raise InsufficientCreditsError(self.balance(), required=cost)

            account.paid_credits -= cost
            log.info(
                "Charged %d credit(s) for %s/%s, %d remaining",
                cost,
                test_type,
                mode,
                account.paid_credits,
            )
            return CreditOutcome(used_free_test=False, credits_charged=cost)

    async def top_up(self, credits: int) -> CreditBalance:
        """Add paid credits to the account."""
        if credits <= 0:
            raise ValueError(f"Top-up must be positive, got {credits}")
        async with self._lock:
            self.account.paid_credits += credits
            log.info("Added %d paid credit(s)", credits)
            return self.balance()

    async def refund(self, outcome: CreditOutcome) -> CreditBalance:
        """Return a previous charge to the account."""
        async with self._lock:
            if outcome.used_free_test:
                self.account.free_tests += 1
            else:
                self.account.paid_credits += outcome.credits_charged
            log.info(
                "Refunded charge (free=%s, credits=%d)",
                outcome.used_free_test,
                outcome.credits_charged,
            )
            return self.balance()
