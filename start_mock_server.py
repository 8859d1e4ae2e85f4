#!/usr/bin/env python3
"""
Mock Block Explorer Backend Launcher

Serves a simulated blockchain (synthetic blocks, transactions, network
stats and prices) over a JSON API so the explorer front end can run in
static/demo mode without a database or a node.

⚙️  CONFIGURATION (environment variables):
    MOCK_BLOCK_TIME_MS               Simulated block time (default 10000)
    MOCK_NUM_BLOCKS                  Backdated blocks generated at start-up (default 100)
    MOCK_START_MONTHS_BEFORE_TODAY   Height is counted from this many months ago (default 6)
    MOCK_TXS_PER_BLOCK_MIN / _MAX    Random transactions per block (default 1 / 3)
    MOCK_ALLOWED_ORIGINS             Comma-separated CORS origins
    MOCK_RATE_LIMIT_ENABLED          Set to "false" to disable rate limiting

    export MOCK_BLOCK_TIME_MS=5000
    python3 start_mock_server.py --port 8080
"""
import argparse

from mockserver import config

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Mock Block Explorer Backend")
    parser.add_argument("--port", type=int, default=config.DEFAULT_PORT,
                        help=f"Port to run the mock backend on (default: {config.DEFAULT_PORT})")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    args = parser.parse_args()

    # Import uvicorn and the API after arguments are parsed
    import uvicorn
    from mockserver.explorer_api import app as explorer_app

    print(f"Starting Mock Block Explorer backend on port {args.port}...")
    print(f"API URL: http://{args.host}:{args.port}/api/health")
    print(f"")
    print(f"📡 Simulation:")
    print(f"   Block time:        {config.BLOCK_TIME_MS}ms")
    print(f"   Initial blocks:    {config.NUM_BLOCKS}")
    print(f"   Txs per block:     {config.TXS_PER_BLOCK_MIN}-{config.TXS_PER_BLOCK_MAX}")
    print(f"")
    print(f"Press Ctrl+C to stop")
    print(f"")

    uvicorn.run(explorer_app, host=args.host, port=args.port, log_level="info")
