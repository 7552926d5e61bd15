from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Rarity(str, Enum):
    """Printed rarity of a card."""

    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    ULTRA_RARE = "Ultra Rare"
    SECRET_RARE = "Secret Rare"


class ElementType(str, Enum):
    """Elemental (energy) type of a card."""

    ELECTRIC = "Electric"
    FIRE = "Fire"
    WATER = "Water"
    GRASS = "Grass"
    PSYCHIC = "Psychic"
    FIGHTING = "Fighting"
    DARKNESS = "Darkness"
    METAL = "Metal"
    DRAGON = "Dragon"
    COLORLESS = "Colorless"


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    A catalog card.

    Attributes:
        id: Unique identifier, set code plus collector number (e.g., "swsh4-25")
        name: Card name as printed
        set_name: Expansion the card was printed in
        rarity: Printed rarity
        element_type: Elemental type
        price: Market price in dollars
        image_url: Artwork location for the presentation layer
    """

    id: str
    name: str
    set_name: str
    rarity: Rarity
    element_type: ElementType
    price: Decimal
    image_url: str = "/placeholder.svg"

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"Price for '{self.name}' cannot be negative: {self.price}")
