"""
test_ledger.py - LedgerStore indexes and cursor pagination

Sequences are stored oldest to newest; every page comes back newest first.
Cursors are the IDs themselves ("BL-<index>"), so a plain list of encoded
IDs stands in for a ledger sequence in the property tests.
"""

from datetime import datetime, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mockserver.block import Block
from mockserver.ledger import (
    LedgerStore,
    encode_block_id,
    encode_transaction_id,
    get_object_index,
    seek_backward,
    seek_forward,
)
from mockserver.transaction import Transaction


def make_ids(n):
    return [encode_block_id(i) for i in range(n)]


def make_block(store, height):
    block = Block(store.next_block_id(), height, datetime(2026, 10, 18, tzinfo=timezone.utc))
    for i in range(2):
        block.transactions.append(
            Transaction(store.next_transaction_id(i), f"{height:04d}{i:060d}", 10.0, block))
    return block


# =============================================================================
# IDS
# =============================================================================

class TestObjectIds:

    @given(st.integers(min_value=0, max_value=10**9))
    @settings(max_examples=100)
    def test_id_round_trip(self, index):
        assert get_object_index(encode_block_id(index)) == index
        assert get_object_index(encode_transaction_id(index)) == index

    def test_id_format(self):
        assert encode_block_id(7) == "BL-7"
        assert encode_transaction_id(0) == "TX-0"

    def test_malformed_id_is_not_recoverable(self):
        with pytest.raises(ValueError):
            get_object_index("ckhts173jc7az0734crodha27")


# =============================================================================
# SEEK FORWARD
# =============================================================================

class TestSeekForward:

    def test_no_cursor_returns_newest_first(self):
        assert seek_forward(make_ids(5), 3) == ["BL-4", "BL-3", "BL-2"]

    def test_no_cursor_count_larger_than_sequence(self):
        assert seek_forward(make_ids(2), 10) == ["BL-1", "BL-0"]

    def test_after_oldest_is_empty(self):
        assert seek_forward(make_ids(5), 3, "BL-0") == []

    def test_after_cursor_returns_older_items(self):
        assert seek_forward(make_ids(10), 3, "BL-6") == ["BL-5", "BL-4", "BL-3"]

    def test_after_cursor_near_start_is_truncated(self):
        assert seek_forward(make_ids(10), 5, "BL-2") == ["BL-1", "BL-0"]

    def test_empty_sequence(self):
        assert seek_forward([], 5) == []

    @given(st.integers(min_value=0, max_value=60), st.integers(min_value=1, max_value=25))
    @settings(max_examples=100)
    def test_no_cursor_is_last_items_reversed(self, n, count):
        ids = make_ids(n)
        result = seek_forward(ids, count)
        assert len(result) == min(count, n)
        assert result == list(reversed(ids))[:count]

    @given(st.integers(min_value=1, max_value=60), st.integers(min_value=1, max_value=25), st.data())
    @settings(max_examples=100)
    def test_after_cursor_window(self, n, count, data):
        ids = make_ids(n)
        k = data.draw(st.integers(min_value=0, max_value=n - 1))
        result = seek_forward(ids, count, ids[k])
        assert result == list(reversed(ids[max(0, k - count):k]))
        assert all(get_object_index(item) < k for item in result)

    @given(st.integers(min_value=0, max_value=60), st.integers(min_value=1, max_value=25))
    @settings(max_examples=50)
    def test_paging_forward_visits_every_item_once(self, n, page_size):
        ids = make_ids(n)
        visited = []
        page = seek_forward(ids, page_size)
        while page:
            visited.extend(page)
            page = seek_forward(ids, page_size, page[-1])
        assert visited == list(reversed(ids))


# =============================================================================
# SEEK BACKWARD
# =============================================================================

class TestSeekBackward:

    def test_no_cursor_returns_oldest_reversed(self):
        assert seek_backward(make_ids(5), 3) == ["BL-2", "BL-1", "BL-0"]

    def test_before_newest_is_empty(self):
        assert seek_backward(make_ids(5), 3, "BL-4") == []

    def test_before_cursor_returns_newer_items(self):
        assert seek_backward(make_ids(10), 3, "BL-2") == ["BL-5", "BL-4", "BL-3"]

    def test_before_cursor_near_end_is_truncated(self):
        assert seek_backward(make_ids(10), 5, "BL-7") == ["BL-9", "BL-8"]

    @given(st.integers(min_value=0, max_value=60), st.integers(min_value=1, max_value=25))
    @settings(max_examples=100)
    def test_no_cursor_is_first_items_reversed(self, n, count):
        ids = make_ids(n)
        result = seek_backward(ids, count)
        assert result == list(reversed(ids[:min(count, n)]))

    @given(st.integers(min_value=0, max_value=60), st.integers(min_value=1, max_value=25))
    @settings(max_examples=50)
    def test_paging_backward_visits_every_item_once(self, n, page_size):
        ids = make_ids(n)
        pages = []
        page = seek_backward(ids, page_size)
        while page:
            pages.append(page)
            page = seek_backward(ids, page_size, page[0])
        # Pages run oldest to newest, each page newest first
        visited = [item for page in reversed(pages) for item in page]
        assert visited == list(reversed(ids))


# =============================================================================
# STORE
# =============================================================================

class TestLedgerStore:

    def test_append_indexes_block_and_transactions(self):
        store = LedgerStore()
        block = make_block(store, 100)
        store.append(block)

        assert store.get_block_by_height(100) is block
        assert store.get_block_count() == 1
        assert store.get_transaction_count() == 2
        for tx in block.transactions:
            assert store.get_transaction_by_hash(tx.hash) is tx
            assert tx.block is block

    def test_ids_follow_insertion_order(self):
        store = LedgerStore()
        for height in (100, 101, 102):
            store.append(make_block(store, height))

        assert [b.id for b in store.blocks] == ["BL-0", "BL-1", "BL-2"]
        assert [tx.id for tx in store.transactions] == [f"TX-{i}" for i in range(6)]

    def test_missing_lookups_return_none(self):
        store = LedgerStore()
        assert store.get_block_by_height(1) is None
        assert store.get_transaction_by_hash("00" * 32) is None
        assert store.get_latest_block() is None

    def test_store_seek_helpers_use_descending_order(self):
        store = LedgerStore()
        for height in range(100, 105):
            store.append(make_block(store, height))

        assert [b.height for b in store.blocks_seek_forward(2)] == [104, 103]
        assert [b.height for b in store.blocks_seek_backward(2)] == [101, 100]
        assert [tx.id for tx in store.transactions_seek_forward(3, "TX-5")] == ["TX-4", "TX-3", "TX-2"]
        assert [tx.id for tx in store.transactions_seek_backward(2, "TX-7")] == ["TX-9", "TX-8"]
