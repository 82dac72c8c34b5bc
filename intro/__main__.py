from __future__ import annotations

import argparse
import asyncio

import structlog
import uvicorn

from intro.config import Settings, get_settings
from intro.main import app, metrics_app
from intro.observability.logging import configure_logging


def build_servers(host: str, devices_port: int, metrics_port: int, log_level: str) -> list[uvicorn.Server]:
    """One uvicorn server per listener: device traffic and Prometheus scrapes."""

    servers = []
    for target, port in ((app, devices_port), (metrics_app, metrics_port)):
        # log_config=None keeps uvicorn from replacing the structlog handlers.
        config = uvicorn.Config(target, host=host, port=port, log_level=log_level.lower(), log_config=None)
        servers.append(uvicorn.Server(config))
    return servers


async def serve(servers: list[uvicorn.Server]) -> None:
    tasks = [asyncio.create_task(server.serve()) for server in servers]
    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)

    # Either listener going away takes the whole process down.
    for server in servers:
        server.should_exit = True
    if pending:
        await asyncio.wait(pending)
    for task in done:
        task.result()


def parse_args(settings: Settings, argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Intro devices service with a separate Prometheus metrics listener")
    parser.add_argument("--host", default=settings.host, help="Interface both listeners bind to")
    parser.add_argument("--devices-port", type=int, default=settings.devices_port, help="Port for the devices API")
    parser.add_argument("--metrics-port", type=int, default=settings.metrics_port, help="Port for /metrics")
    parser.add_argument("--log-level", default=settings.log_level, help="Root log level (e.g. DEBUG, INFO)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(get_settings(), argv)
    configure_logging(args.log_level)

    structlog.get_logger("intro").info(
        "service.starting",
        host=args.host,
        devices_port=args.devices_port,
        metrics_port=args.metrics_port,
    )
    asyncio.run(serve(build_servers(args.host, args.devices_port, args.metrics_port, args.log_level)))


if __name__ == "__main__":
    main()
