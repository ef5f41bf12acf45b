import enum


class BitEnum(enum.IntEnum):
    """A type for enums representing bitmask field values.

    A ``BitEnum`` subclass may be used directly as the ``FLAGS`` of a
    :class:`~flagfield.BitField`.
    """
    @classmethod
    def flags(cls):
        """The mapping from member name to bit value, including aliases.

        Returns
        -------
        flags : dict[str, int]
            The flags in definition order.
        """
        return {k: int(v) for k, v in cls.__members__.items()}
