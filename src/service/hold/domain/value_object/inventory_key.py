import attrs

from src.service.hold.domain.enum.inventory_category import InventoryCategory


@attrs.frozen
class InventoryKey:
    """
    Composite identity of a schedule inventory.

    sub_key is the seat class for buses, the room type for hotels
    and the cabin class for flights.
    """

    category: InventoryCategory
    schedule_id: str
    sub_key: str = 'default'

    def __str__(self) -> str:
        return f'{self.category}:{self.schedule_id}:{self.sub_key}'
