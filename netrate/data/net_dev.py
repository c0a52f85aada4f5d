from dataclasses import asdict, dataclass, field
from typing import Callable


@dataclass
class Counters:
    bytes: int = 0
    packets: int = 0
    errs: int = 0
    drop: int = 0
    fifo: int = 0
    compressed: int = 0
    # receive only
    frame: int = 0
    multicast: int = 0
    # transmit only
    colls: int = 0
    carrier: int = 0


@dataclass
class Sample:
    interface: str = ""
    receive: Counters = field(default_factory=Counters)
    transmit: Counters = field(default_factory=Counters)


@dataclass
class Result:
    name: str = ""
    bytes_rx: int = 0
    bytes_tx: int = 0
    interval: float = 0.0
    interfaces: list[str] | None = None

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass
class AggregateState:
    """
    Totals from the previous successful tick. Owned by the sampler thread.
    """

    primed: bool = False
    last_rx: int = 0
    last_tx: int = 0


@dataclass
class SamplerConfig:
    name: str = ""
    interval: float = 1.0
    interfaces: list[str] | None = None
    path: str = "/proc/net/dev"
    callback: Callable[[Result], None] | None = None
