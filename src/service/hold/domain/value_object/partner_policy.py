from datetime import timedelta

import attrs


def _validate_percentage(instance: 'PartnerPolicy', attribute: attrs.Attribute, value: float) -> None:
    if not 0 <= value <= 100:
        raise ValueError(f'{attribute.name} must be between 0 and 100, got {value}')


def _validate_positive_duration(
    instance: 'PartnerPolicy', attribute: attrs.Attribute, value: timedelta
) -> None:
    if value <= timedelta(0):
        raise ValueError(f'{attribute.name} must be positive, got {value}')


@attrs.frozen
class PartnerPolicy:
    """Per-partner hold configuration, read-only to the hold engine"""

    partner_id: str
    hold_enabled: bool
    quota_percentage: float = attrs.field(validator=_validate_percentage)
    hold_expiry: timedelta = attrs.field(validator=_validate_positive_duration)
