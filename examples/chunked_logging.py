"""Minimal example sending chunked GELF messages through the logging handler."""

from __future__ import annotations

import logging

import gelfudp


def main() -> None:
    config = gelfudp.GelfConfig(graylog_hostname="127.0.0.1", connection="wan", max_chunk_size_wan=512)
    handler = gelfudp.build_gelf_udp_handler(config, level="INFO")
    logger = logging.getLogger("examples.orders")
    logger.setLevel(logging.INFO)
    logger.addHandler(handler)

    try:
        for order_id in range(1, 4):
            logger.info("processed order", extra={"order_id": order_id, "total": order_id * 19.99})
        logger.info("large payload %s", "x" * 4000)
    finally:
        logger.removeHandler(handler)
        handler.close()


if __name__ == "__main__":
    main()
