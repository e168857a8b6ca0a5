from decimal import ROUND_FLOOR, Decimal


def max_holdable_units(total_units: int, quota_percentage: float) -> int:
    """
    Maximum number of units that may be held at the same time.

    floor(total_units * quota_percentage / 100). A percentage outside [0, 100]
    is clamped, so the result always lies in [0, total_units].
    """
    if total_units < 0:
        raise ValueError(f'total_units must be >= 0, got {total_units}')

    clamped = min(max(Decimal(str(quota_percentage)), Decimal(0)), Decimal(100))
    # Decimal keeps e.g. 29 * 0.1 from flooring to the wrong integer
    return int((Decimal(total_units) * clamped / 100).to_integral_value(rounding=ROUND_FLOOR))
