"""
Query resolvers for the mock block explorer backend.

ExplorerQueries is the contract shared with the real backend: one method per
query shape of the explorer schema, each returning plain dicts with the
schema's field names. MockServer implements it over an in-memory ledger of
synthetic blocks so the explorer can run without a database or a node.
"""

import math
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from mockserver import config
from mockserver import sample_series
from mockserver.block import format_utc
from mockserver.generator import LedgerGenerator, utc_now
from mockserver.ledger import LedgerStore, get_object_index
from mockserver.random_values import random_number

DateLike = Union[datetime, str]


class ExplorerQueries(ABC):
    """One method per query shape of the explorer schema."""

    @abstractmethod
    def list_blocks(self, first: Optional[int], order_by: str = "height_DESC") -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def list_transactions(self, first: Optional[int], order_by: str = "createdAt_DESC") -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def blocks_connection(self, where: Optional[Dict[str, Any]] = None, order_by: str = "height_DESC",
                          skip: Optional[int] = None, after: Optional[str] = None,
                          before: Optional[str] = None, first: Optional[int] = None,
                          last: Optional[int] = None) -> Dict[str, Any]:
        ...

    @abstractmethod
    def transactions_connection(self, where: Optional[Dict[str, Any]] = None,
                                order_by: str = "createdAt_DESC", skip: Optional[int] = None,
                                after: Optional[str] = None, before: Optional[str] = None,
                                first: Optional[int] = None, last: Optional[int] = None) -> Dict[str, Any]:
        ...

    @abstractmethod
    def get_block(self, height: int) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def get_transaction(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def search_get_type(self, query: str) -> Dict[str, str]:
        ...

    @abstractmethod
    def search_auto_complete(self, query: str, first: Optional[int] = None) -> Dict[str, List[str]]:
        ...

    @abstractmethod
    def daily_network_statses(self, last: int, skip: Optional[int] = None,
                              order_by: str = "date_ASC") -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def get_network_stats(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def get_price(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def get_candles(self, start: DateLike, end: DateLike) -> List[Dict[str, Any]]:
        ...


def strip_hex_prefix(hash0x: str) -> str:
    return hash0x[2:] if hash0x.startswith("0x") else hash0x


def parse_date(value: DateLike) -> datetime:
    """Accept a datetime or an ISO-8601 string (a trailing 'Z' means UTC)."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_number(text: str) -> Optional[float]:
    """
    Convert a search string to a number the way the explorer front end does.

    Blank strings convert to 0; anything that is not a plain decimal,
    0x/0o/0b integer or Infinity literal converts to None.
    """
    stripped = text.strip()
    if not stripped:
        return 0.0
    if not stripped.isascii():
        return None
    lowered = stripped.lower()
    for prefix, base in (("0x", 16), ("0o", 8), ("0b", 2)):
        if lowered.startswith(prefix):
            try:
                return float(int(stripped[2:], base)) if stripped[2:].isalnum() else None
            except ValueError:
                return None
    if stripped in ("Infinity", "+Infinity", "-Infinity"):
        return float("-inf") if stripped.startswith("-") else float("inf")
    if "_" in stripped or any(c.isalpha() and c != "e" for c in lowered):
        return None
    try:
        return float(stripped)
    except ValueError:
        return None


def is_integer_number(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value.is_integer()


def _connection(nodes: List[Dict[str, Any]]) -> Dict[str, Any]:
    edges = [{"node": node} for node in nodes]
    return {
        "pageInfo": {
            "startCursor": edges[0]["node"]["id"] if edges else None,
            "endCursor": edges[-1]["node"]["id"] if edges else None
        },
        "edges": edges
    }


class MockServer(ExplorerQueries):
    """
    Simulation of the explorer's server, database and blockchain network.

    One instance holds all simulation state: the ledger, the block
    generator (with its running height) and the drifting price.
    """

    def __init__(self, store: Optional[LedgerStore] = None,
                 generator: Optional[LedgerGenerator] = None,
                 num_blocks: int = config.NUM_BLOCKS,
                 clock: Callable[[], datetime] = utc_now):
        self.store = store if store is not None else LedgerStore()
        self.clock = clock
        if generator is None:
            generator = LedgerGenerator(self.store, clock=clock)
            generator.prepopulate(num_blocks)
        self.generator = generator
        self.price = 0.0

    def list_blocks(self, first: Optional[int], order_by: str = "height_DESC") -> List[Dict[str, Any]]:
        """
        Newest `first` blocks (order_by is always height_DESC).

        Side effect: extends the ledger by one block first. Front ends poll
        this query every block interval, so each poll sees a new block.
        """
        self.generator.generate_block(self.clock())
        if first is None:
            return []
        return [block.to_summary() for block in self.store.blocks_seek_forward(first)]

    def list_transactions(self, first: Optional[int], order_by: str = "createdAt_DESC") -> List[Dict[str, Any]]:
        """
        Newest `first` transactions (order_by is always createdAt_DESC).

        Side effect: extends the ledger by one block first, like list_blocks.
        """
        self.generator.generate_block(self.clock())
        if first is None:
            return []
        return [tx.to_dict() for tx in self.store.transactions_seek_forward(first)]

    def blocks_connection(self, where: Optional[Dict[str, Any]] = None, order_by: str = "height_DESC",
                          skip: Optional[int] = None, after: Optional[str] = None,
                          before: Optional[str] = None, first: Optional[int] = None,
                          last: Optional[int] = None) -> Dict[str, Any]:
        """
        Relay-style page of blocks, or a count when `where` has `id_lte`.

        order_by is always height_DESC and skip is ignored.
        """
        if where is not None and where.get("id_lte") is not None:
            return {"aggregate": {"count": get_object_index(where["id_lte"]) + 1}}

        if first is not None:
            blocks = self.store.blocks_seek_forward(first, after)
        elif last is not None:
            blocks = self.store.blocks_seek_backward(last, before)
        else:
            blocks = []
        return _connection([block.to_summary() for block in blocks])

    def transactions_connection(self, where: Optional[Dict[str, Any]] = None,
                                order_by: str = "createdAt_DESC", skip: Optional[int] = None,
                                after: Optional[str] = None, before: Optional[str] = None,
                                first: Optional[int] = None, last: Optional[int] = None) -> Dict[str, Any]:
        if where is not None and where.get("id_lte") is not None:
            return {"aggregate": {"count": get_object_index(where["id_lte"]) + 1}}

        if first is not None:
            transactions = self.store.transactions_seek_forward(first, after)
        elif last is not None:
            transactions = self.store.transactions_seek_backward(last, before)
        else:
            transactions = []
        return _connection([tx.to_dict() for tx in transactions])

    def get_block(self, height: int) -> Optional[Dict[str, Any]]:
        block = self.store.get_block_by_height(height)
        return block.to_dict() if block is not None else None

    def get_transaction(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        tx = self.store.get_transaction_by_hash(strip_hex_prefix(tx_hash))
        return tx.to_detail_dict() if tx is not None else None

    def search_get_type(self, query: str) -> Dict[str, str]:
        if query.startswith("0x"):
            search_type = "Transaction"
        elif is_integer_number(to_number(query)):
            search_type = "Block"
        else:
            search_type = ""
        return {"type": search_type}

    def search_auto_complete(self, query: str, first: Optional[int] = None) -> Dict[str, List[str]]:
        """
        Transaction hashes or block heights starting with `query`, in store order.

        A query converting to 0 ("0", "", "00") yields no block heights,
        matching the production backend.
        """
        if query.startswith("0x"):
            prefix = query[2:]
            items = ["0x" + tx.hash for tx in self.store.transactions if tx.hash.startswith(prefix)]
        else:
            block_height = to_number(query)
            if block_height and is_integer_number(block_height):
                items = [str(block.height) for block in self.store.blocks
                         if str(block.height).startswith(query)]
            else:
                items = []
        return {"items": items[:first]}

    def daily_network_statses(self, last: int, skip: Optional[int] = None,
                              order_by: str = "date_ASC") -> List[Dict[str, Any]]:
        """
        Block and transaction counts for each of the `last` days before today, oldest first.

        Days the ledger has not fully generated (fewer blocks than a full
        day's worth) are backfilled: a full day of blocks and the sample
        transaction count for that day of the year. order_by is always
        date_ASC and skip is ignored.
        """
        now = self.clock()
        blocks_per_day = self.generator.blocks_per_day
        daily_stats = []

        for i in range(last, 0, -1):
            date = now - timedelta(days=i)
            blocks = [block for block in self.store.blocks if block.is_on_day(date)]

            if len(blocks) < blocks_per_day:
                num_blocks = blocks_per_day
                num_transactions = sample_series.get_num_transactions(date)
            else:
                num_blocks = len(blocks)
                num_transactions = sum(block.num_transactions for block in blocks)

            daily_stats.append({
                "id": f"DNS-{i}",
                "date": format_utc(date),
                "numBlocks": num_blocks,
                "numTransactions": num_transactions
            })

        return daily_stats

    def get_network_stats(self) -> Dict[str, Any]:
        """
        Average block time and throughput over the stored ledger.

        The ledger must hold at least one block.
        """
        blocks = self.store.blocks
        seconds = (blocks[-1].timestamp - blocks[0].timestamp).total_seconds()
        return {
            "id": "NS-0",
            "secondsPerBlock": seconds / len(blocks),
            "transactionsPerSecond": self.store.get_transaction_count() / seconds if seconds else 0.0
        }

    def get_price(self) -> Dict[str, Any]:
        """
        Current price as a random walk.

        The first call seeds from today's sample price; each later call
        moves the previous price by a factor in [0.999, 1.001].
        """
        if not self.price:
            self.price = sample_series.get_price(self.clock())
        else:
            self.price = self.price * random_number(0.999, 1.001)
        return {
            "id": "PR-0",
            "price": self.price
        }

    def get_candles(self, start: DateLike, end: DateLike) -> List[Dict[str, Any]]:
        """Daily candles for each day after `start` through `end`; only timestamp and close are set."""
        date_start = parse_date(start)
        num_days = (parse_date(end) - date_start).days
        candles = []
        # Never step past the end date, which may be the last representable day
        for day in range(1, num_days + 1):
            date = date_start + timedelta(days=day)
            candles.append({
                "timestamp": format_utc(date),
                "open": 0,
                "high": 0,
                "low": 0,
                "close": sample_series.get_price(date),
                "volume": 0
            })
        return candles
