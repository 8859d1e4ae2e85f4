import hashlib
from typing import Optional, TYPE_CHECKING

from mockserver import config
from mockserver.random_values import random_int, random_number

if TYPE_CHECKING:
    from mockserver.block import Block


class Transaction:
    def __init__(self, tx_id: str, tx_hash: str, amount: float, block: Optional["Block"] = None):
        self.id = tx_id
        self.hash = tx_hash  # Hex digest without the 0x prefix
        self.amount = amount
        self.block = block  # Owning block, lookup only

    @staticmethod
    def random_hash() -> str:
        seed = random_int(0, config.MAX_SAFE_INTEGER)
        return hashlib.sha3_256(str(seed).encode()).hexdigest()

    @staticmethod
    def random_amount() -> float:
        # Half of all transfers are small (< 100), the other half range up to 1000
        upper = 1000 if random_number(0, 1) > 0.5 else 100
        return random_number(1, upper)

    @classmethod
    def create_random(cls, tx_id: str, block: "Block") -> "Transaction":
        return cls(tx_id=tx_id, tx_hash=cls.random_hash(), amount=cls.random_amount(), block=block)

    def to_dict(self):
        return {
            "id": self.id,
            "hash": self.hash,
            "amount": self.amount
        }

    def to_detail_dict(self):
        data = self.to_dict()
        data["block"] = {
            "id": self.block.id,
            "height": self.block.height
        } if self.block is not None else None
        return data

    def __repr__(self):
        return f"Transaction(id={self.id!r}, hash={self.hash[:12]!r}..., amount={self.amount:.4f})"
