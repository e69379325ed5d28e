from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from .config import load_config
from .engine import PanelEngine
from .host_bridge import HttpHostBridge
from .observability import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="order-panel", description="Order panel engine utilities")
    subparsers = parser.add_subparsers(dest="command", required=True)
    replay = subparsers.add_parser("replay", help="Replay JSON lines of host messages and print the panel state")
    replay.add_argument("file", help="Path to a JSON lines file of {action, data} messages")
    replay.add_argument("--env-file", default=None, help="Optional .env file")
    return parser


async def replay(engine: PanelEngine, lines: Sequence[str]) -> dict:
    for number, raw in enumerate(lines, start=1):
        text = raw.strip()
        if not text:
            continue
        try:
            message = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("replay_line_skipped", extra={"line": number, "error": str(exc)})
            continue
        if isinstance(message, dict):
            engine.dispatch(message)
    return engine.render()


async def _run_replay(path: Path, env_file: str | None) -> dict:
    config = load_config(env_file)
    configure_logging(config.log_level)
    bridge = HttpHostBridge(config)
    engine = PanelEngine(bridge, config=config)
    try:
        return await replay(engine, path.read_text(encoding="utf-8").splitlines())
    finally:
        engine.dismiss_notification()
        await bridge.aclose()


def run(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    path = Path(args.file)
    if not path.is_file():
        print(f"Cannot read {path}", file=sys.stderr)
        return 2
    snapshot = asyncio.run(_run_replay(path, args.env_file))
    print(json.dumps(snapshot, indent=2, ensure_ascii=False, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
