from __future__ import annotations

from typing import Iterable

from sortviz.core.errors import InvalidInput
from sortviz.datasets.generator import DatasetBounds


def validate_values(values: Iterable[object], *, min_value: int = 1, max_value: int = 500) -> list[int]:
    """
    Check every entry is an integer within [min_value, max_value].

    Length is not checked here; sequences handed straight to the
    controller may be any length.
    """
    out: list[int] = []
    for pos, v in enumerate(values):
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidInput(f"entry {pos} is not an integer: {v!r}")
        if not min_value <= v <= max_value:
            raise InvalidInput(f"entry {pos} out of range [{min_value}, {max_value}]: {v}")
        out.append(v)
    return out


def parse_custom(text: str, bounds: DatasetBounds = DatasetBounds()) -> list[int]:
    """
    Parse a comma-separated list such as "500, 1, 250".

    Raises InvalidInput for an empty string, non-numeric entries, values out
    of bounds, or too few / too many entries.
    """
    text = text.strip()
    if not text:
        raise InvalidInput("enter some numbers")

    parsed: list[int] = []
    for pos, raw in enumerate(text.split(",")):
        token = raw.strip()
        try:
            parsed.append(int(token))
        except ValueError:
            raise InvalidInput(f"entry {pos} is not a number: {token!r}") from None

    values = validate_values(parsed, min_value=bounds.min_value, max_value=bounds.max_value)

    if len(values) < bounds.min_size:
        raise InvalidInput(f"enter at least {bounds.min_size} numbers")
    if len(values) > bounds.max_size:
        raise InvalidInput(f"at most {bounds.max_size} numbers allowed")

    return values
