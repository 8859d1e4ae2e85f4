import asyncio
import json
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from mockserver import config
from mockserver.resolver import MockServer, parse_date

limiter = Limiter(key_func=get_remote_address, enabled=config.RATE_LIMIT_ENABLED)
app = FastAPI(title="Mock Block Explorer API", version="1.0.0")
app.state.limiter = limiter

# Use built-in rate limit handler (type-safe)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_mock_server(request: Request) -> MockServer:
    return request.app.state.mock_server


def check_page_size(name: str, value: Optional[int]):
    if value is None:
        return
    if value < 0:
        raise HTTPException(status_code=400, detail=f"{name} cannot be negative")
    if value > config.MAX_PAGE_SIZE:
        raise HTTPException(status_code=400, detail=f"{name} cannot exceed {config.MAX_PAGE_SIZE}")


def resolve_connection(resolve, id_lte: Optional[str], after: Optional[str], before: Optional[str],
                       first: Optional[int], last: Optional[int], skip: Optional[int]):
    check_page_size("first", first)
    check_page_size("last", last)
    where = {"id_lte": id_lte} if id_lte is not None else None
    try:
        return resolve(where=where, skip=skip, after=after, before=before, first=first, last=last)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid cursor")


# ============================================================================
# BLOCKS & TRANSACTIONS
# ============================================================================

@app.get("/api/blocks")
@limiter.limit("120/minute")
async def api_list_blocks(request: Request, first: Optional[int] = None):
    """
    API endpoint: Newest blocks (JSON)

    NOTE: Every call extends the mock ledger by one block, the way the
    explorer's polling front end expects new data on each poll.
    """
    check_page_size("first", first)
    return get_mock_server(request).list_blocks(first)


@app.get("/api/transactions")
@limiter.limit("120/minute")
async def api_list_transactions(request: Request, first: Optional[int] = None):
    """API endpoint: Newest transactions (JSON). Extends the ledger by one block."""
    check_page_size("first", first)
    return get_mock_server(request).list_transactions(first)


@app.get("/api/blocks/connection")
@limiter.limit("120/minute")
async def api_blocks_connection(request: Request, id_lte: Optional[str] = None,
                                after: Optional[str] = None, before: Optional[str] = None,
                                first: Optional[int] = None, last: Optional[int] = None,
                                skip: Optional[int] = None):
    """
    API endpoint: Cursor-paginated blocks, newest first (JSON)

    Args:
        id_lte: Return only the number of blocks up to and including this ID
        after: Cursor to page forward from (older blocks)
        before: Cursor to page backward from (newer blocks)
        first: Page size when paging forward
        last: Page size when paging backward
        skip: Accepted for schema compatibility, ignored
    """
    server = get_mock_server(request)
    return resolve_connection(server.blocks_connection, id_lte, after, before, first, last, skip)


@app.get("/api/transactions/connection")
@limiter.limit("120/minute")
async def api_transactions_connection(request: Request, id_lte: Optional[str] = None,
                                      after: Optional[str] = None, before: Optional[str] = None,
                                      first: Optional[int] = None, last: Optional[int] = None,
                                      skip: Optional[int] = None):
    """API endpoint: Cursor-paginated transactions, newest first (JSON)"""
    server = get_mock_server(request)
    return resolve_connection(server.transactions_connection, id_lte, after, before, first, last, skip)


@app.get("/api/blocks/{height}")
@limiter.limit("120/minute")
async def api_get_block(request: Request, height: int):
    block = get_mock_server(request).get_block(height)
    if block is None:
        raise HTTPException(status_code=404, detail="Block not found")
    return block


@app.get("/api/tx/{tx_hash}")
@limiter.limit("120/minute")
async def api_get_transaction(request: Request, tx_hash: str):
    tx = get_mock_server(request).get_transaction(tx_hash)
    if tx is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return tx


# ============================================================================
# SEARCH
# ============================================================================

@app.get("/api/search/type")
@limiter.limit("60/minute")
async def api_search_get_type(request: Request, query: str = ""):
    """API endpoint: Classify a search string as Transaction, Block or nothing"""
    return get_mock_server(request).search_get_type(query)


@app.get("/api/search/autocomplete")
@limiter.limit("60/minute")
async def api_search_auto_complete(request: Request, query: str = "", first: Optional[int] = None):
    check_page_size("first", first)
    return get_mock_server(request).search_auto_complete(query, first)


# ============================================================================
# STATISTICS & PRICE
# ============================================================================

@app.get("/api/stats/daily")
@limiter.limit("30/minute")
async def api_daily_network_stats(request: Request, last: int = 14, skip: Optional[int] = None):
    """API endpoint: Daily block and transaction counts, oldest day first (JSON)"""
    if last < 0 or last > 366:
        raise HTTPException(status_code=400, detail="last must be between 0 and 366")
    return get_mock_server(request).daily_network_statses(last, skip)


@app.get("/api/stats/network")
@limiter.limit("30/minute")
async def api_network_stats(request: Request):
    server = get_mock_server(request)
    if server.store.get_block_count() == 0:
        raise HTTPException(status_code=503, detail="Ledger is empty")
    return server.get_network_stats()


@app.get("/api/price")
@limiter.limit("60/minute")
async def api_price(request: Request):
    """API endpoint: Current price. Each call drifts the simulated price slightly."""
    return get_mock_server(request).get_price()


@app.get("/api/candles")
@limiter.limit("30/minute")
async def api_candles(request: Request, start: str, end: str):
    """
    API endpoint: Daily price candles (JSON)

    Args:
        start: ISO-8601 start date (exclusive)
        end: ISO-8601 end date (inclusive)
    """
    try:
        date_start = parse_date(start)
        date_end = parse_date(end)
        if (date_end - date_start).days > config.MAX_CANDLE_DAYS:
            raise HTTPException(status_code=400,
                                detail=f"Date range cannot exceed {config.MAX_CANDLE_DAYS} days")
        return get_mock_server(request).get_candles(date_start, date_end)
    except (ValueError, OverflowError):
        raise HTTPException(status_code=400, detail="Invalid date: use ISO-8601")


# ============================================================================
# LIVE UPDATES & HEALTH
# ============================================================================

@app.get("/stream")
async def stream(request: Request, max_events: int = 0):
    """
    Server-Sent Events (SSE) endpoint emulating the explorer's live subscriptions.

    Polls the mock ledger once per block interval, so each event carries a
    newly generated block and the drifted price. max_events=0 streams until
    the client disconnects.
    """
    server = get_mock_server(request)
    interval = server.generator.block_time_ms / 1000

    async def event_generator():
        sent = 0
        consecutive_errors = 0
        max_consecutive_errors = 5

        while True:
            if await request.is_disconnected():
                break

            try:
                latest = server.list_blocks(1)
                price = server.get_price()
                consecutive_errors = 0

                data = {
                    "block": latest[0],
                    "price": price["price"],
                    "timestamp": time.time()
                }
                yield f"data: {json.dumps(data)}\n\n"

                sent += 1
                if max_events and sent >= max_events:
                    break

                await asyncio.sleep(interval)

            except Exception as e:
                consecutive_errors += 1
                print(f"SSE Error ({consecutive_errors}/{max_consecutive_errors}): {e}")
                if consecutive_errors >= max_consecutive_errors:
                    print("SSE: Too many consecutive errors, closing connection")
                    break
                await asyncio.sleep(1)

    return StreamingResponse(event_generator(), media_type="text/event-stream")


@app.get("/api/health")
async def api_health(request: Request):
    """
    Health check endpoint for monitoring.

    Returns:
        JSON with status, latest mock block height and block count
    """
    server = get_mock_server(request)
    latest_block = server.store.get_latest_block()

    return {
        "status": "healthy",
        "height": latest_block.height if latest_block else 0,
        "blocks": server.store.get_block_count(),
        "timestamp": time.time()
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the mock ledger on startup using lifespan handler"""
    if getattr(app.state, "mock_server", None) is None:
        print("🔧 Generating mock ledger...")
        app.state.mock_server = MockServer(num_blocks=config.NUM_BLOCKS)

    server = app.state.mock_server
    print(f"✅ Mock backend ready: block time {server.generator.block_time_ms}ms, "
          f"{server.store.get_block_count()} blocks")
    if config.RATE_LIMIT_ENABLED:
        print(f"🔒 Security: Rate limiting enabled, CORS restricted to {', '.join(config.ALLOWED_ORIGINS)}")
    else:
        print("⚠️  Rate limiting disabled (MOCK_RATE_LIMIT_ENABLED)")
    yield

# Update app to use lifespan
app.router.lifespan_context = lifespan
