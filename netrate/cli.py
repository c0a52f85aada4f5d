import json
import logging
import signal
import threading
from pathlib import Path

import click
import psutil

from netrate.data.net_dev import Result
from netrate.sampler import NetDevSampler, with_callback, with_interfaces, with_path
from netrate.util import conversion, log, procfs

context_settings = dict(help_option_names=["-h", "--help"])
logger = logging.getLogger("netrate.cli")


def check_interfaces(interfaces: list[str]):
    try:
        known = psutil.net_if_stats()
    except OSError as e:
        logger.warning(log.kv(error=e, action="interface check skipped"))
        return

    for interface in interfaces:
        if interface not in known:
            logger.warning(
                log.kv(interface=interface, error="interface not found on host")
            )


def render_result(data: Result, human: bool) -> str:
    output: dict[str, object] = data.as_dict()
    if human:
        output["received"] = conversion.process_bytes(data.bytes_rx)
        output["transmitted"] = conversion.process_bytes(data.bytes_tx)
    return json.dumps(output)


@click.command(
    name="netrate",
    help="Report network throughput from /proc/net/dev",
    context_settings=context_settings,
)
@click.option("-n", "--name", default="all", show_default=True, help="Label for each result")
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=1.0,
    show_default=True,
    help="The sampling interval (in seconds)",
)
@click.option(
    "-i", "--interface", multiple=True, help="Only count this interface (repeatable)"
)
@click.option(
    "--path",
    default=procfs.DEFAULT_PATH,
    show_default=True,
    help="The counter file to read",
)
@click.option(
    "--duration",
    type=click.FloatRange(min=0),
    default=0,
    help="Stop after this many seconds (0 runs until interrupted)",
)
@click.option(
    "-H", "--human", default=False, is_flag=True, help="Add human readable rates"
)
@click.option("-d", "--debug", default=False, is_flag=True, help="Enable debug logging")
@click.option(
    "-l",
    "--logfile",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write logs to this file instead of stderr",
)
def main(
    name: str,
    interval: float,
    interface: tuple[str, ...],
    path: str,
    duration: float,
    human: bool,
    debug: bool,
    logfile: Path | None,
):
    log.configure(debug=debug, name="netrate", logfile=logfile)
    interfaces = list(interface) if interface else None
    if interfaces:
        check_interfaces(interfaces)

    def emit(data: Result):
        click.echo(render_result(data, human=human))

    logger.info(log.kv(name=name, interval=interval, interfaces=interfaces, path=path))
    sampler = NetDevSampler(
        name,
        interval,
        with_path(path),
        with_interfaces(interfaces),
        with_callback(emit),
    )

    stop = threading.Event()
    previous = signal.signal(signal.SIGTERM, lambda _signum, _frame: stop.set())
    try:
        stop.wait(duration if duration > 0 else None)
    except KeyboardInterrupt:
        logger.info("[main] - interrupted")
    finally:
        signal.signal(signal.SIGTERM, previous)
        sampler.close()
        sampler.join(timeout=interval)


if __name__ == "__main__":
    main()
