"""
Compare two soul hashes from the command line.

    python scripts/compare_tokens.py <host_token> <guest_token>
    python scripts/compare_tokens.py <host_token> <guest_token> --report-url http://localhost:8000
"""
import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx

from ai.analysis_engine import fetch_ai_analysis
from core.app_logging import setup_logging
from core.codec import decode_soul
from core.errors import ScenarioMismatch
from matching.compatibility import generate_ai_context


def print_matrix(context):
    print(f"\n{'=' * 60}")
    print(f"Scenario: {context.scenario.value}  |  MATCH: {context.match_score}%")
    print(f"{'=' * 60}")
    for c in context.comparison_matrix:
        flag = "!!" if c.difference >= 3 else ("ok" if c.difference <= 1 else "  ")
        print(f"{flag} Q{c.id:>2} [{c.dimension:<13}] diff={c.difference}  {c.a_label} | {c.b_label}")


async def run_report(host, guest, report_url: str):
    last_len = 0

    def on_stream(text: str):
        nonlocal last_len
        sys.stdout.write(text[last_len:])
        sys.stdout.flush()
        last_len = len(text)

    def on_retry(attempt: int):
        print(f"\n[retry {attempt}]", file=sys.stderr)

    async with httpx.AsyncClient(base_url=report_url) as client:
        result = await fetch_ai_analysis(host, guest, client=client, on_retry=on_retry, on_stream=on_stream)

    if result.offline:
        print(result.details)
    print(f"\n\n{result.summary}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Score two soul hashes")
    parser.add_argument("host", help="token of the person who sent the invite")
    parser.add_argument("guest", help="token of the person answering it")
    parser.add_argument("--report-url", help="base URL of the report service; fetches the AI report")
    args = parser.parse_args(argv)

    setup_logging("WARNING")

    host = decode_soul(args.host)
    guest = decode_soul(args.guest)
    if host is None or guest is None:
        print("Invalid code, please check it and try again.", file=sys.stderr)
        return 2

    try:
        context = generate_ai_context(host, guest)
    except ScenarioMismatch as e:
        print(e.message, file=sys.stderr)
        return 3

    print_matrix(context)

    if args.report_url:
        asyncio.run(run_report(host, guest, args.report_url))
    return 0


if __name__ == "__main__":
    sys.exit(main())
