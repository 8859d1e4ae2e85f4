from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional

from mockserver.transaction import Transaction


def format_utc(when: datetime) -> str:
    """Format a datetime the way the explorer schema expects, e.g. 'Sun, 18 Oct 2026 12:00:00 GMT'."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return format_datetime(when.astimezone(timezone.utc), usegmt=True)


class Block:
    def __init__(self, block_id: str, height: int, timestamp: datetime,
                 transactions: Optional[List[Transaction]] = None):
        self.id = block_id
        self.height = height
        self.timestamp = timestamp
        self.transactions: List[Transaction] = transactions if transactions is not None else []

    @property
    def num_transactions(self) -> int:
        return len(self.transactions)

    def is_on_day(self, when: datetime) -> bool:
        """True if this block was created on the same UTC calendar day as `when`."""
        return self.timestamp.astimezone(timezone.utc).date() == when.astimezone(timezone.utc).date()

    def to_summary(self):
        return {
            "id": self.id,
            "height": self.height,
            "timestamp": format_utc(self.timestamp),
            "numTransactions": self.num_transactions
        }

    def to_dict(self):
        data = self.to_summary()
        data["transactions"] = [tx.to_dict() for tx in self.transactions]
        return data

    def __repr__(self):
        return f"Block(id={self.id!r}, height={self.height}, transactions={self.num_transactions})"
