"""Merit ledger models"""
from enum import Enum
from datetime import datetime
from uuid import uuid4
from pydantic import BaseModel, ConfigDict, Field


class TransactionKind(str, Enum):
    """Direction of a merit transaction"""
    EARN = "earn"
    SPEND = "spend"


class MeritTransaction(BaseModel):
    """Immutable merit ledger entry"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    timestamp: datetime
    kind: TransactionKind
    amount: int = Field(gt=0)
    reason: str  # checkin, achievement, prayer, purchase, ...
    balance_after: int = Field(ge=0)

    @property
    def signed_amount(self) -> int:
        """Amount with sign applied (negative for spends)"""
        return self.amount if self.kind == TransactionKind.EARN else -self.amount
