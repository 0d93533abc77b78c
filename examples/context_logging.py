"""Minimal example demonstrating mdclog context rendering."""

from __future__ import annotations

import asyncio

import mdclog


async def handle(order_id: int) -> None:
    logger = mdclog.get_context_logger("examples.orders", app="mdclog-demo")
    with mdclog.scoped(order_id=order_id, user=f"user-{order_id}"):
        logger.info("processing order")
        await asyncio.sleep(0.1)
        logger.info("processed order")


async def main() -> None:
    mdclog.configure(
        {
            "formatters": {
                "text": {
                    "demo": {"fmt": "%(asctime)s %(levelname)-5s %(mdc)s %(message)s", "mdc_keys": "app, order_id"},
                },
            },
            "handlers": {
                "enabled": ["console"],
                "console": {"type": "console", "formatter": "text.demo", "stream": "stdout"},
            },
        }
    )
    await asyncio.gather(*(handle(order_id) for order_id in range(1, 4)))
    mdclog.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
