"""Command line for the relay.

Usage:
    platerelay serve [--config platerelay.yaml]
    platerelay process nameplate.jpg [--config platerelay.yaml]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import mimetypes
import sys
from pathlib import Path

import uvicorn

from platerelay.app import build_relay, create_app
from platerelay.config import RelayConfig
from platerelay.errors import ContentRejected, RelayError
from platerelay.gateway.http_api import PROCESSING_FAILED
from platerelay.models import ImageUpload, ResponseEnvelope
from platerelay.observability.logging import setup_logging

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace, config: RelayConfig) -> int:
    """Run the HTTP relay."""
    uvicorn.run(
        create_app(config),
        host=args.host or config.host,
        port=args.port or config.port,
        log_level=config.log_level.lower(),
    )
    return 0


async def _process_once(config: RelayConfig, upload: ImageUpload) -> tuple[int, ResponseEnvelope]:
    relay = None
    try:
        relay = build_relay(config)
        formatted = await relay.process(upload)
    except ContentRejected as e:
        return 1, ResponseEnvelope.fail(str(e))
    except RelayError as e:
        return 1, ResponseEnvelope.fail(PROCESSING_FAILED, str(e))
    except Exception as e:
        logger.exception("Unexpected failure processing %s", upload.filename)
        return 1, ResponseEnvelope.fail(PROCESSING_FAILED, str(e))
    finally:
        if relay is not None:
            await relay.close()
    return 0, ResponseEnvelope.ok(formatted)


def cmd_process(args: argparse.Namespace, config: RelayConfig) -> int:
    """Run one local image through the pipeline and print the envelope."""
    path = Path(args.image)
    if not path.is_file():
        print(f"Image not found: {path}", file=sys.stderr)
        return 1

    upload = ImageUpload(
        data=path.read_bytes(),
        content_type=mimetypes.guess_type(path.name)[0] or "",
        filename=path.name,
    )
    status, envelope = asyncio.run(_process_once(config, upload))
    print(json.dumps(envelope.to_wire(), indent=2))
    return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="platerelay",
        description="Nameplate photo to structured equipment record relay",
    )
    parser.add_argument("--config", "-c", default="platerelay.yaml", help="YAML config file")
    sub = parser.add_subparsers(dest="command")

    p_serve = sub.add_parser("serve", help="Run the HTTP relay (default)")
    p_serve.add_argument("--host", default=None, help="Listen address")
    p_serve.add_argument("--port", type=int, default=None, help="Listen port")

    p_process = sub.add_parser("process", help="Process one local image and print the result")
    p_process.add_argument("image", help="Path to a nameplate photo")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the `platerelay` CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = RelayConfig.from_yaml(args.config)
    setup_logging(config.log_level)

    if not args.command:
        args.command, args.host, args.port = "serve", None, None

    commands = {
        "serve": cmd_serve,
        "process": cmd_process,
    }
    sys.exit(commands[args.command](args, config))


if __name__ == "__main__":
    main()
