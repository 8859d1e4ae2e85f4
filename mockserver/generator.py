"""
Synthetic block production for the mock ledger.

Block heights are derived from wall-clock time: the chain is simulated as
if it had produced one block every BLOCK_TIME_MS since the first day of the
month START_MONTHS_BEFORE_TODAY months ago. Blocks are only materialised
on demand (pre-population at start-up, then one per poll).
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from mockserver import config
from mockserver.block import Block
from mockserver.ledger import LedgerStore
from mockserver.random_values import random_int
from mockserver.transaction import Transaction


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def first_of_month_before(today: datetime, months_before: int) -> datetime:
    """UTC midnight on the first day of the month `months_before` months before `today`."""
    year, month_index = divmod(today.year * 12 + (today.month - 1) - months_before, 12)
    return datetime(year, month_index + 1, 1, tzinfo=timezone.utc)


class LedgerGenerator:
    def __init__(self, store: LedgerStore,
                 block_time_ms: int = config.BLOCK_TIME_MS,
                 start_months_before_today: int = config.START_MONTHS_BEFORE_TODAY,
                 txs_per_block_min: int = config.TXS_PER_BLOCK_MIN,
                 txs_per_block_max: int = config.TXS_PER_BLOCK_MAX,
                 clock: Callable[[], datetime] = utc_now,
                 start_height: Optional[int] = None):
        self.store = store
        self.block_time_ms = block_time_ms
        self.txs_per_block_min = txs_per_block_min
        self.txs_per_block_max = txs_per_block_max
        self.clock = clock
        self.epoch_start = first_of_month_before(self.clock(), start_months_before_today)

        # Running height counter, post-incremented by every generated block
        self.block_height = start_height if start_height is not None else self.current_height()

    @property
    def block_interval(self) -> timedelta:
        return timedelta(milliseconds=self.block_time_ms)

    @property
    def blocks_per_day(self):
        """Blocks in a fully generated day (a whole number unless the block time does not divide a day)."""
        per_day = config.MS_PER_DAY / self.block_time_ms
        return int(per_day) if per_day.is_integer() else per_day

    def current_height(self) -> int:
        """Height the simulated chain would have reached by now."""
        return (self.clock() - self.epoch_start) // self.block_interval

    def generate_block(self, at: Optional[datetime] = None) -> Block:
        """
        Create a block with random transactions and append it to the store.

        Mutates the height counter and the store. Cheap enough to be called
        on every poll.
        """
        height = self.block_height
        self.block_height += 1

        block = Block(
            block_id=self.store.next_block_id(),
            height=height,
            timestamp=at if at is not None else self.clock()
        )

        num_transactions = random_int(self.txs_per_block_min, self.txs_per_block_max)
        for i in range(num_transactions):
            tx = Transaction.create_random(self.store.next_transaction_id(i), block)
            block.transactions.append(tx)

        self.store.append(block)
        return block

    def prepopulate(self, num_blocks: int = config.NUM_BLOCKS):
        """Generate `num_blocks` blocks, one block interval apart, the newest one interval before now."""
        now = self.clock()
        for i in range(num_blocks):
            # Progressively backdate the initial blocks
            self.generate_block(now - self.block_interval * (num_blocks - i))
        latest = self.store.get_latest_block()
        if latest:
            print(f"📦 Mock ledger pre-populated: {self.store.get_block_count()} blocks, "
                  f"{self.store.get_transaction_count()} transactions, height {latest.height}")
