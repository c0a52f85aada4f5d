import logging
import sys
from pathlib import Path


class LevelPadFormatter(logging.Formatter):
    LEVEL_WIDTH = len("WARNING")

    def format(self, record):
        level = record.levelname
        pad = " " * (self.LEVEL_WIDTH - len(level))
        record.padded = f"[{level}]{pad}"
        record.unpadded = f"[{level}]"
        return super().format(record)


def kv(**fields: object) -> str:
    """
    Render keyword arguments as sorted key=value pairs for a log line.
    """
    parts: list[str] = []
    for key in sorted(fields):
        value = fields[key]
        if isinstance(value, (list, tuple)):
            value = ",".join(str(item) for item in value)
        elif value is None:
            value = "-"
        text = str(value)
        if text == "" or any(ch.isspace() for ch in text):
            text = f'"{text}"'
        parts.append(f"{key}={text}")
    return " ".join(parts)


def configure(debug: bool, name: str, logfile: Path | None = None) -> logging.Logger:
    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Keep output off the root handlers so stdout stays machine readable
    logger.propagate = False

    # Do not add handlers twice
    if logger.handlers:
        return logger

    handler: logging.Handler
    if logfile:
        handler = logging.FileHandler(logfile, mode="a", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    formatter = LevelPadFormatter(
        f"%(asctime)s %(padded)s {name}.%(funcName)s - %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
