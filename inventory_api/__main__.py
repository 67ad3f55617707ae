#!/usr/bin/env python3
"""
启动 HTTP 服务：python -m inventory_api [--host HOST] [--port PORT]
SIGINT / SIGTERM 由 uvicorn 处理，优雅退出时间受 shutdown_timeout 限制。
"""
from __future__ import annotations

import argparse
import os

import uvicorn

from .config import get_settings


def main(argv: list[str] | None = None):
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Inventory CRUD HTTP service")
    ap.add_argument("--host", default=settings["host"])
    ap.add_argument("--port", type=int, default=settings["port"])
    ap.add_argument("--log-level", default=settings["log_level"])
    args = ap.parse_args(argv)
    # 传给应用的 startup 钩子
    os.environ["INVENTORY_LOG_LEVEL"] = args.log_level

    uvicorn.run(
        "inventory_api.api:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        timeout_graceful_shutdown=settings["shutdown_timeout"],
    )


if __name__ == "__main__":
    main()
