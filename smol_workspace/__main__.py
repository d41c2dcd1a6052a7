from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from smol_workspace.bootstrap import build_bootstrap, render_outcome
from smol_workspace.config.settings import get_settings
from smol_workspace.infra.errors import ConfigError, RemoteUnavailableError
from smol_workspace.infra.logging import setup_logging
from smol_workspace.issues.tracker import parse_repository
from smol_workspace.tools.base import ToolMode

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smol-workspace",
        description="Resolve a GitHub issue with an assistant run over local file tools",
    )
    parser.add_argument("issue", type=int, help="Issue number to resolve")
    parser.add_argument(
        "--repository", default=None,
        help="Owning repository as <owner>/<name> (default: $GITHUB_REPOSITORY)",
    )
    parser.add_argument(
        "--mode", default=None, choices=[m.value for m in ToolMode],
        help="Tool catalog declared to the assistant (default: $ASSISTANT_TOOL_MODE)",
    )
    parser.add_argument(
        "--workspace", type=Path, default=None,
        help="Root of the file tree the tools operate on (default: $WORKSPACE_ROOT or cwd)",
    )
    parser.add_argument("--log-json", action="store_true", help="Emit JSON logs")
    parser.add_argument("--log-level", default="INFO", help="Minimum log level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(json_output=args.log_json, log_level=args.log_level)

    try:
        settings = get_settings()
        if args.mode is not None:
            settings.assistant.tool_mode = args.mode
        if args.workspace is not None:
            settings.workspace.root = args.workspace
        owner, repo = parse_repository(args.repository or settings.github.repository)
    except (ValidationError, ConfigError) as e:
        logger.error("invalid_configuration", error=str(e))
        return 2

    print(f"GitHub issue - #{args.issue}")
    bootstrap = build_bootstrap(settings)
    try:
        outcome = asyncio.run(bootstrap.run(owner, repo, args.issue))
    except RemoteUnavailableError as e:
        logger.error("remote_unavailable", error_code=e.code, error=str(e))
        return 1

    print(render_outcome(outcome))
    return 0 if outcome.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
