import enum
from typing import Optional


class RepairStatus(str, enum.Enum):
    PENDING = "pending"
    DIAGNOSIS = "diagnosis"
    PRICE_QUOTED = "price_quoted"
    CUSTOMER_APPROVED = "customer_approved"
    CUSTOMER_REJECTED = "customer_rejected"
    IN_REPAIR = "in_repair"
    COMPLETED = "completed"
    DELIVERED = "delivered"

    @classmethod
    def parse(cls, value: str) -> Optional["RepairStatus"]:
        """
        Map a stored status string to a known status.

        Status values are free-form in storage, so unknown strings return None
        instead of raising.
        """
        try:
            return cls(value)
        except ValueError:
            return None


class ApprovalState(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def from_flag(cls, flag: Optional[bool]) -> "ApprovalState":
        if flag is None:
            return cls.PENDING
        return cls.APPROVED if flag else cls.REJECTED

    def to_flag(self) -> Optional[bool]:
        if self is ApprovalState.PENDING:
            return None
        return self is ApprovalState.APPROVED


class RepairItemType(str, enum.Enum):
    LABOR = "labor"
    PART = "part"
