class classproperty:
    """Decorator for a read-only property computed on the class.

    The value is recomputed on every access; nothing is cached.
    """
    def __init__(self, fget):
        self._fget = fget
        self.__doc__ = fget.__doc__

    def __get__(self, instance, owner):
        if owner is None:
            owner = type(instance)
        return self._fget(owner)


class no_default:
    """Sentinel type; this should not be instantiated.

    This type is used so functions can tell the difference between no argument
    passed and an explicit value passed even if ``None`` is a valid value.

    Notes
    -----
    This is implemented as a type to make functions which use this as a default
    argument serializable.
    """
    def __new__(cls):
        raise TypeError('cannot create instances of sentinel type')


def is_single_bit(n):
    """Check if an integer has exactly one bit set.

    Parameters
    ----------
    n : int
        The integer to check.

    Returns
    -------
    single : bool
        True if ``n`` is a power of two.
    """
    return n > 0 and n & (n - 1) == 0
