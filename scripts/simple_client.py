#!/usr/bin/env python3
"""
Example client for a running askservice instance.

Usage:
    python scripts/simple_client.py [--url http://127.0.0.1:8000] [question ...]

Checks /health, then sends each question to POST /ask and prints the answer
(or the structured error) returned by the service.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Sequence

import aiohttp

DEFAULT_QUESTIONS = ("What is Rust?", "What is FastAPI?", "Hello!", "   ")


async def run(base_url: str, questions: Sequence[str]) -> int:
    base_url = base_url.rstrip("/")
    timeout = aiohttp.ClientTimeout(total=60)
    failures = 0
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(f"{base_url}/health") as resp:
            health = await resp.json()
        mode = "GigaChat" if health.get("gigachat_enabled") else "mock"
        print(f"Service {health.get('status')} (version {health.get('version')}, {mode} mode)\n")

        for index, question in enumerate(questions, start=1):
            print(f"{index}. Question: {question!r}")
            async with session.post(f"{base_url}/ask", json={"question": question}) as resp:
                body = await resp.json(content_type=None)
                if resp.status == 200:
                    print(f"   Source: {body['source']}")
                    print(f"   Answer: {body['answer']}\n")
                else:
                    failures += 1
                    print(f"   Error {resp.status} [{body.get('code')}]: {body.get('error')}\n")
    return 0 if failures < len(questions) else 1


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--url", default="http://127.0.0.1:8000", help="service base URL")
    parser.add_argument("questions", nargs="*", help="questions to ask (default: a small demo set)")
    args = parser.parse_args(argv)
    try:
        return asyncio.run(run(args.url, args.questions or DEFAULT_QUESTIONS))
    except aiohttp.ClientConnectionError as exc:
        print(f"Cannot reach {args.url}: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
