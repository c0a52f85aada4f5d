import logging
from pathlib import Path

import pytest

HEADER = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast"
    "|bytes    packets errs drop fifo colls carrier compressed\n"
)


def net_dev_text(rows: dict[str, tuple[int, int]]) -> str:
    """Render a /proc/net/dev body with the given (rx_bytes, tx_bytes) per interface."""
    lines = [HEADER]
    for interface, (rx, tx) in rows.items():
        lines.append(
            f"{interface:>6}: {rx} 10 0 0 0 0 0 0 {tx} 20 0 0 0 0 0 0\n"
        )
    return "".join(lines)


@pytest.fixture
def write_net_dev(tmp_path: Path):
    path = tmp_path / "dev"

    def write(rows: dict[str, tuple[int, int]]) -> Path:
        path.write_text(net_dev_text(rows))
        return path

    return write


@pytest.fixture(autouse=True)
def reset_netrate_logger():
    yield
    logger = logging.getLogger("netrate")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
