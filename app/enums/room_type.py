from enum import Enum


class RoomCategory(str, Enum):
    SINGLE = "Single"
    DOUBLE = "Double"
    TWIN = "Twin"
    SUITE = "Suite"
    DELUXE = "Deluxe"
    PRESIDENTIAL = "Presidential"


class BedType(str, Enum):
    SINGLE = "Single"
    DOUBLE = "Double"
    TWIN = "Twin"
    QUEEN = "Queen"
    KING = "King"
