"""
Plate-loading calculator.

Greedy: heaviest plate first, as many as fit on one side, then the next
size down.  With an inventory, each plate used on one side consumes a pair
(one per side) from the stock.
"""

from __future__ import annotations

from .config import BAR_WEIGHT, PLATES
from .models import UNITS, InvalidDomainValue


def calculate_plates(
    target_weight: float,
    unit: str,
    bar_weight: float | None = None,
    inventory: dict[float, int] | None = None,
) -> list[float]:
    """
    Plates to load on each side of the bar to reach target_weight.

    Args:
        target_weight: Total weight including the bar
        unit: "lbs" or "kg" (selects default plates and bar)
        bar_weight: Bar weight override
        inventory: plate -> total count owned; limits usage to count // 2
                   per side and restricts sizes to its keys

    Returns:
        Per-side plate list, heaviest first.  Empty when target < bar.
        If the target cannot be matched exactly the closest lighter
        load is returned.

    Raises:
        InvalidDomainValue: If unit is not "lbs" or "kg"
    """
    if unit not in UNITS:
        raise InvalidDomainValue(f"Invalid unit: {unit!r}. Must be 'lbs' or 'kg'")

    bar = BAR_WEIGHT[unit] if bar_weight is None else bar_weight
    remaining = (target_weight - bar) / 2
    if remaining < 0:
        return []

    if inventory is not None:
        sizes = sorted(inventory, reverse=True)
        available = dict(inventory)
    else:
        sizes = list(PLATES[unit])
        available = None

    plates: list[float] = []
    for plate in sizes:
        if plate <= 0:
            continue
        while remaining >= plate:
            if available is not None:
                if available.get(plate, 0) < 2:
                    break
                available[plate] -= 2
            plates.append(plate)
            # keep 1.25 kg style fractions exact
            remaining = round(remaining - plate, 2)
    return plates


def loaded_weight(plates: list[float], bar_weight: float) -> float:
    """Total bar weight for a per-side plate list."""
    return bar_weight + 2 * sum(plates)
