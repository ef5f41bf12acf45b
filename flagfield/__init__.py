from .bit_enum import BitEnum
from .bit_field import BitField, FrozenBitField, InvalidBit, UnknownFlag

__version__ = "0.1.0"


__all__ = [
    "BitEnum",
    "BitField",
    "FrozenBitField",
    "InvalidBit",
    "UnknownFlag",
]
