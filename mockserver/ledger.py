from typing import Dict, List, Optional, Sequence, TypeVar

from mockserver.block import Block
from mockserver.transaction import Transaction

T = TypeVar("T")

BLOCK_ID_PREFIX = "BL"
TRANSACTION_ID_PREFIX = "TX"


def encode_block_id(index: int) -> str:
    return f"{BLOCK_ID_PREFIX}-{index}"


def encode_transaction_id(index: int) -> str:
    return f"{TRANSACTION_ID_PREFIX}-{index}"


def get_object_index(object_id: str) -> int:
    """
    Recover the sequence index from a block or transaction ID ("BL-42" -> 42).

    IDs double as pagination cursors. Malformed IDs are not validated and
    raise ValueError from int().
    """
    return int(object_id.split("-")[-1], 10)


def seek_forward(sequence: Sequence[T], first: int, after: Optional[str] = None) -> List[T]:
    """
    Page of up to `first` items after the cursor `after`, newest first.

    The sequence is stored oldest to newest, but every query orders newest
    first (height_DESC, createdAt_DESC), so "after" means older.
    Without a cursor, the newest `first` items are returned.
    """
    end = get_object_index(after) if after is not None else len(sequence)
    # Nothing comes after the oldest item
    if end == 0:
        return []
    start = max(end - first, 0)
    return list(reversed(sequence[start:end]))


def seek_backward(sequence: Sequence[T], last: int, before: Optional[str] = None) -> List[T]:
    """
    Page of up to `last` items before the cursor `before`, newest first.

    "Before" means newer in the descending order. Without a cursor, the
    oldest `last` items are returned.
    """
    start = get_object_index(before) + 1 if before is not None else 0
    # Nothing comes before the newest item
    if start == len(sequence):
        return []
    end = min(start + last, len(sequence))
    return list(reversed(sequence[start:end]))


class LedgerStore:
    """
    In-memory, append-only store of blocks and transactions.

    Blocks are kept in ascending height order; transactions in creation
    order. Both have an O(1) index (blocks by height, transactions by hash).
    """

    def __init__(self):
        self.blocks: List[Block] = []
        self.transactions: List[Transaction] = []
        self._blocks_by_height: Dict[int, Block] = {}
        self._transactions_by_hash: Dict[str, Transaction] = {}

    def append(self, block: Block):
        self.blocks.append(block)
        self._blocks_by_height[block.height] = block
        for tx in block.transactions:
            self.transactions.append(tx)
            self._transactions_by_hash[tx.hash] = tx

    def get_block_by_height(self, height: int) -> Optional[Block]:
        return self._blocks_by_height.get(height)

    def get_transaction_by_hash(self, tx_hash: str) -> Optional[Transaction]:
        return self._transactions_by_hash.get(tx_hash)

    def get_latest_block(self) -> Optional[Block]:
        return self.blocks[-1] if self.blocks else None

    def get_block_count(self) -> int:
        return len(self.blocks)

    def get_transaction_count(self) -> int:
        return len(self.transactions)

    def next_block_id(self) -> str:
        return encode_block_id(len(self.blocks))

    def next_transaction_id(self, offset: int = 0) -> str:
        """ID for a transaction not yet appended, `offset` places after the current end."""
        return encode_transaction_id(len(self.transactions) + offset)

    def blocks_seek_forward(self, first: int, after: Optional[str] = None) -> List[Block]:
        return seek_forward(self.blocks, first, after)

    def blocks_seek_backward(self, last: int, before: Optional[str] = None) -> List[Block]:
        return seek_backward(self.blocks, last, before)

    def transactions_seek_forward(self, first: int, after: Optional[str] = None) -> List[Transaction]:
        return seek_forward(self.transactions, first, after)

    def transactions_seek_backward(self, last: int, before: Optional[str] = None) -> List[Transaction]:
        return seek_backward(self.transactions, last, before)
