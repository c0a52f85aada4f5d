import re

COUNTER_PATTERN = re.compile(r"-?[0-9]+")


def pad_float(number: float = 0.0, round_int: bool = False) -> str:
    """
    Pad a float to two decimal places.
    """
    if isinstance(number, int) and round_int:
        return str(int(number))
    else:
        return f"{number:.2f}"


def process_bytes(num: float) -> str:
    """
    Process the rate of data, e.g., MiB/s.
    """
    suffix = "B"
    for unit in ["", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi"]:
        if abs(num) < 1024.0:
            return f"{pad_float(num, round_int=False)} {unit}{suffix}/s"
        num = num / 1024
    return f"{pad_float(number=num, round_int=False)} Yi{suffix}/s"


def to_int(value: object) -> int:
    """
    Coerce a counter field to an int, falling back to zero.
    """
    if value is None:
        return 0
    text = str(value).strip()
    # kernel counters are plain ASCII digits
    if not COUNTER_PATTERN.fullmatch(text):
        return 0
    return int(text)
