#!/usr/bin/env python3
"""
Upload gate CLI - send files to the API or check them against the local policy
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import httpx

from upload_cli.api_client import APIClient, guess_mime_type
from upload_cli.config import Config
from upload_cli.display import (
    console,
    show_header,
    show_error,
    show_success,
    show_info,
    display_uploaded_table,
    display_rejected_table,
    display_check_table,
    display_policy,
)
from upload_cli.models import AbortedUpload
from upload_gate.config.settings import Settings, build_limits, build_policy
from upload_gate.core.gate import evaluate
from upload_gate.core.types import Rejected, SessionCounters, UploadPartMetadata


def check_files(paths: List[Path], field_name: str, settings: Settings) -> List[tuple]:
    """
    Evaluate files against the configured policy without contacting the API

    All files share one set of counters, as they would in a single request.
    """
    limits = build_limits(settings)
    policy = build_policy(settings)
    counters = SessionCounters()

    rows = []
    for path in paths:
        mime_type = guess_mime_type(path)
        size = path.stat().st_size
        part = UploadPartMetadata(
            field_name=field_name,
            original_file_name=path.name,
            declared_mime_type=mime_type,
            byte_size_so_far=size,
        )
        decision = evaluate(part, policy, limits, counters)
        label = decision.reason.value if isinstance(decision, Rejected) else "Accepted"
        rows.append((path.name, mime_type, size, label))
    return rows


async def send_command(config: Config, paths: List[Path], field_name: str) -> int:
    """Upload files and show what the API admitted"""
    show_header("Upload")
    try:
        client = APIClient(config)
        show_info(f"Sending {len(paths)} file(s) to {config.api_base_url}...")
        result = await client.upload(paths, field_name=field_name)
    except httpx.HTTPStatusError as e:
        show_error(f"HTTP {e.response.status_code}: {e.response.text}")
        return 1
    except httpx.ConnectError:
        show_error(f"Cannot connect to API at {config.api_base_url}")
        return 1

    if isinstance(result, AbortedUpload):
        show_error(f"Upload aborted: {result.error} ({result.original_name or result.field_name or '-'})")
        return 1

    if result.files:
        display_uploaded_table(result.files)
    if result.rejected:
        display_rejected_table(result.rejected)

    if result.files:
        show_success(f"{len(result.files)} file(s) stored")
        return 0
    show_error("No file was accepted")
    return 1


async def policy_command(config: Config) -> int:
    """Show the API's active policy"""
    show_header("Upload Policy")
    try:
        policy = await APIClient(config).get_policy()
    except httpx.HTTPStatusError as e:
        show_error(f"HTTP {e.response.status_code}: {e.response.text}")
        return 1
    except httpx.ConnectError:
        show_error(f"Cannot connect to API at {config.api_base_url}")
        return 1
    display_policy(policy)
    return 0


def check_command(paths: List[Path], field_name: str) -> int:
    """Show local admission decisions"""
    show_header("Local Check")
    rows = check_files(paths, field_name, Settings())
    display_check_table(rows)
    return 0 if all(row[3] == "Accepted" for row in rows) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="upload-cli", description=__doc__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    send = subparsers.add_parser("send", help="Upload files to the API")
    send.add_argument("files", nargs="+", type=Path)
    send.add_argument("--field", default="file", help="Form field name")

    check = subparsers.add_parser("check", help="Check files against the local policy")
    check.add_argument("files", nargs="+", type=Path)
    check.add_argument("--field", default="file", help="Form field name")

    subparsers.add_parser("policy", help="Show the API's active policy")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command in ("send", "check"):
        missing = [str(p) for p in args.files if not p.is_file()]
        if missing:
            show_error(f"Not a file: {', '.join(missing)}")
            return 2

    if args.command == "check":
        return check_command(args.files, args.field)

    config = Config.load()
    if args.command == "send":
        return asyncio.run(send_command(config, args.files, args.field))
    return asyncio.run(policy_command(config))


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        console.print("\n[yellow]Goodbye![/yellow]")
        sys.exit(0)
