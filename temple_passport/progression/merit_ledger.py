"""
Merit Ledger

Atomic balance and append-only transaction history for merit points.

- earn(): increases both the spendable balance and lifetime merit
- spend(): decreases the spendable balance only, never below zero
- Lifetime merit drives leveling, so spending never demotes a user
"""

from typing import Iterable, List, Optional
from datetime import datetime
import logging

from temple_passport.exceptions import InsufficientBalanceError, InvalidAmountError
from temple_passport.models.ledger import MeritTransaction, TransactionKind
from temple_passport.models.passport import UserProgressionState
from temple_passport.utils.datetime_helpers import ensure_utc, now_utc

logger = logging.getLogger(__name__)


class MeritLedger:
    """
    Ledger view over a user's progression state.

    The ledger mutates the state it wraps, so the coordinator always hands
    it a working copy and only publishes that copy once the whole event
    has succeeded.
    """

    def __init__(self, state: UserProgressionState):
        self.state = state

    @property
    def balance(self) -> int:
        return self.state.merit_balance

    @property
    def lifetime_earned(self) -> int:
        return self.state.lifetime_merit_earned

    @property
    def transactions(self) -> List[MeritTransaction]:
        return list(self.state.transactions)

    def earn(
        self,
        amount: int,
        reason: str,
        timestamp: Optional[datetime] = None
    ) -> MeritTransaction:
        """
        Credit merit points

        Args:
            amount: Points to credit (must be positive)
            reason: Short source label (checkin, achievement, prayer_received, ...)
            timestamp: When the points were earned (defaults to now)

        Returns:
            The appended transaction

        Raises:
            InvalidAmountError: amount <= 0
        """
        if amount <= 0:
            raise InvalidAmountError(amount, user_id=self.state.user_id, operation="earn")

        self.state.merit_balance += amount
        self.state.lifetime_merit_earned += amount
        transaction = self._append(TransactionKind.EARN, amount, reason, timestamp)

        logger.info(
            f"User {self.state.user_id} earned {amount} merit for {reason}. "
            f"Balance: {self.state.merit_balance}, lifetime: {self.state.lifetime_merit_earned}"
        )
        return transaction

    def spend(
        self,
        amount: int,
        reason: str,
        timestamp: Optional[datetime] = None
    ) -> MeritTransaction:
        """
        Debit merit points

        No partial spend: either the full amount is debited or nothing changes.

        Raises:
            InvalidAmountError: amount <= 0
            InsufficientBalanceError: amount > current balance
        """
        if amount <= 0:
            raise InvalidAmountError(amount, user_id=self.state.user_id, operation="spend")
        if amount > self.state.merit_balance:
            raise InsufficientBalanceError(
                required=amount,
                available=self.state.merit_balance,
                user_id=self.state.user_id,
                operation="spend",
            )

        self.state.merit_balance -= amount
        transaction = self._append(TransactionKind.SPEND, amount, reason, timestamp)

        logger.info(
            f"User {self.state.user_id} spent {amount} merit on {reason}. "
            f"Balance: {self.state.merit_balance}"
        )
        return transaction

    def history(self, since: Optional[datetime] = None) -> List[MeritTransaction]:
        """
        Transaction history sorted newest first

        Args:
            since: Only include transactions at or after this time
        """
        transactions = self.state.transactions
        if since is not None:
            cutoff = ensure_utc(since)
            transactions = [t for t in transactions if ensure_utc(t.timestamp) >= cutoff]
        return list(reversed(transactions))

    def _append(
        self,
        kind: TransactionKind,
        amount: int,
        reason: str,
        timestamp: Optional[datetime]
    ) -> MeritTransaction:
        transaction = MeritTransaction(
            user_id=self.state.user_id,
            timestamp=ensure_utc(timestamp) if timestamp else now_utc(),
            kind=kind,
            amount=amount,
            reason=reason,
            balance_after=self.state.merit_balance,
        )
        self.state.transactions.append(transaction)
        return transaction


def replay_balance(transactions: Iterable[MeritTransaction]) -> int:
    """
    Recompute a balance by replaying a transaction log from zero

    Used for auditing: the result must equal the state's merit_balance.
    """
    balance = 0
    for transaction in transactions:
        balance += transaction.signed_amount
    return balance
