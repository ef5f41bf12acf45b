from functools import reduce
import logging
import numbers
import operator as op
from types import MappingProxyType

import numpy as np

from .bit_enum import BitEnum
from .utils import classproperty, is_single_bit, no_default


log = logging.getLogger(__name__)


class InvalidBit(ValueError):
    """Raised when a value cannot be resolved into a bitfield.

    Parameters
    ----------
    bit : any
        The value which could not be resolved.
    reason : str, optional
        A description of the problem. Defaults to naming the type of ``bit``.
    """
    def __init__(self, bit, reason=None):
        self.bit = bit
        if reason is None:
            reason = f'received: {type(bit).__name__}'
        super().__init__(f'an invalid bit was provided, {reason}')


class UnknownFlag(InvalidBit, KeyError):
    """Raised when a flag name is not part of a flag set.

    Parameters
    ----------
    name : str
        The unknown flag name.
    owner : type
        The :class:`BitField` subclass the name was looked up on.
    """
    def __init__(self, name, owner):
        self.name = name
        super().__init__(
            name,
            f'{name!r} is not a flag of {owner.__qualname__}',
        )

    def __str__(self):
        return self.args[0]


class FrozenBitField(AttributeError):
    """Raised when assigning to the bitfield of a frozen instance.
    """


def _normalize_flags(owner, flags):
    """Coerce a flag set definition into a read-only name to bit mapping.

    Parameters
    ----------
    owner : str
        The name of the class the flags are being defined for.
    flags : mapping[str, int] or type[BitEnum]
        The flag set definition.

    Returns
    -------
    flags : mappingproxy[str, int]
        The flags in definition order.
    """
    if isinstance(flags, type) and issubclass(flags, BitEnum):
        flags = flags.flags()
    else:
        flags = dict(flags)

    seen = 0
    for name, value in flags.items():
        if not isinstance(name, str):
            raise TypeError(
                f'flag names of {owner} must be str, got {name!r}',
            )
        if (not isinstance(value, numbers.Integral) or
                isinstance(value, bool) or
                value < 0):
            raise TypeError(
                f'flag {owner}.{name} must be a non-negative int,'
                f' got {value!r}',
            )
        value = flags[name] = int(value)

        if not is_single_bit(value):
            log.debug('flag %s.%s is not a single bit: %#x',
                      owner, name, value)
        elif seen & value:
            log.debug('flag %s.%s overlaps an earlier flag: %#x',
                      owner, name, value)
        seen |= value

    return MappingProxyType(flags)


class BitField:
    """A set of named single-bit flags stored as a non-negative integer.

    Concrete flag sets subclass ``BitField`` and supply ``FLAGS``.

    Parameters
    ----------
    bits : resolvable, optional
        The initial bits. Defaults to the class's ``DEFAULT``.

    Attributes
    ----------
    FLAGS : mapping[str, int]
        The flag set definition, from flag name to bit value. Subclasses may
        provide a dict or a :class:`~flagfield.BitEnum` subclass; it is
        replaced with a read-only mapping when the subclass is created.
    DEFAULT : resolvable
        The bits used when no ``bits`` are passed to the constructor. This is
        resolved once, when the subclass is created.

    Notes
    -----
    A *resolvable* is any of: a flag name, a non-negative integer (including
    numpy integer scalars), a bitfield-like object exposing an integer
    ``bitfield`` attribute, or a list, tuple, or array of resolvables.

    Instances are mutable and shared by reference. :meth:`freeze` makes an
    instance permanently immutable; the mutating methods of a frozen instance
    return a new instance instead.

    Examples
    --------
    .. code-block:: python

       class Permissions(BitField):
           FLAGS = {'read': 1, 'write': 2, 'execute': 4}

       perms = Permissions(['read', 'write'])
       perms.has('write')      # True
       perms.missing(Permissions.ALL)  # ['execute']
    """
    __slots__ = ('_bitfield', '_frozen')

    FLAGS = MappingProxyType({})
    DEFAULT = 0
    _default = 0

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.FLAGS = _normalize_flags(cls.__qualname__, cls.FLAGS)
        cls._default = cls.resolve(cls.DEFAULT)

    def __init__(self, bits=no_default):
        self._frozen = False
        if bits is no_default:
            self._bitfield = self._default
        else:
            self._bitfield = self.resolve(bits)

    @classmethod
    def resolve(cls, bit=no_default):
        """Resolve a resolvable into a bitfield integer.

        Parameters
        ----------
        bit : resolvable, optional
            The bit or bits to resolve. If not passed, resolves to 0.

        Returns
        -------
        bitfield : int
            The union of all of the bits in ``bit``.

        Raises
        ------
        UnknownFlag
            Raised when a flag name is not in ``FLAGS``.
        InvalidBit
            Raised when ``bit`` is negative or not a resolvable.
        """
        if bit is no_default:
            return 0

        # bool is an Integral but never a bit
        if isinstance(bit, numbers.Integral) and not isinstance(bit, bool):
            if bit < 0:
                raise InvalidBit(
                    bit,
                    f'received negative {type(bit).__name__}: {bit!r}',
                )
            # widens numpy fixed-width scalars
            return int(bit)

        if isinstance(bit, BitField):
            return bit._bitfield

        bitfield = getattr(bit, 'bitfield', None)
        if bitfield is not None:
            if (not isinstance(bitfield, numbers.Integral) or
                    isinstance(bitfield, bool) or
                    bitfield < 0):
                raise InvalidBit(
                    bit,
                    f'received {type(bit).__name__} with a bitfield of'
                    f' {bitfield!r}',
                )
            return int(bitfield)

        if isinstance(bit, np.ndarray) and bit.ndim == 0:
            return cls.resolve(bit[()])

        if isinstance(bit, (list, tuple, np.ndarray)):
            return reduce(op.or_, map(cls.resolve, bit), 0)

        if isinstance(bit, str):
            try:
                return cls.FLAGS[bit]
            except KeyError:
                raise UnknownFlag(bit, cls) from None

        raise InvalidBit(bit)

    @classproperty
    def ALL(cls):
        """The union of every flag in ``FLAGS``.
        """
        return reduce(op.or_, cls.FLAGS.values(), 0)

    @property
    def bitfield(self):
        """The stored integer.

        Assigning to this raises :class:`FrozenBitField` once the instance is
        frozen.
        """
        return self._bitfield

    @bitfield.setter
    def bitfield(self, value):
        if self._frozen:
            raise FrozenBitField(
                f'cannot assign bitfield of frozen {type(self).__qualname__}',
            )
        self._bitfield = self.resolve(value)

    @property
    def frozen(self):
        """Has :meth:`freeze` been called on this instance?
        """
        return self._frozen

    def freeze(self):
        """Make this instance permanently immutable.

        Returns
        -------
        self : BitField
            This instance.
        """
        self._frozen = True
        return self

    def copy(self):
        """Create an unfrozen copy of this instance.
        """
        return type(self)(self._bitfield)

    __copy__ = copy

    # queries

    def equals(self, bit):
        """Check if this bitfield is exactly ``bit``.

        Parameters
        ----------
        bit : resolvable
            The bits to compare to.

        Returns
        -------
        equal : bool
            True if the stored integer is equal to the resolved ``bit``.
        """
        return self._bitfield == self.resolve(bit)

    def has(self, bit):
        """Check if this bitfield has all of the bits in ``bit``.

        Parameters
        ----------
        bit : resolvable
            The bits to check.

        Returns
        -------
        has : bool
            True if every bit of ``bit`` is set. Empty ``bit`` is always
            contained.
        """
        bits = self.resolve(bit)
        return self._bitfield & bits == bits

    def missing(self, bits):
        """The names of the flags in ``bits`` which this bitfield lacks.

        Parameters
        ----------
        bits : resolvable
            The bits to check for.

        Returns
        -------
        missing : list[str]
            The missing flag names in definition order.
        """
        return type(self)(bits).remove(self._bitfield).to_array()

    # mutation

    def _fold(self, bits):
        return reduce(op.or_, map(self.resolve, bits), 0)

    def _update(self, bitfield):
        if self._frozen:
            return type(self)(bitfield)
        self._bitfield = bitfield
        return self

    def add(self, *bits):
        """Set the given bits.

        Parameters
        ----------
        *bits : resolvable
            The bits to set.

        Returns
        -------
        bitfield : BitField
            ``self`` if not frozen, otherwise a new instance with the result.
        """
        return self._update(self._bitfield | self._fold(bits))

    def remove(self, *bits):
        """Clear the given bits.

        Parameters
        ----------
        *bits : resolvable
            The bits to clear.

        Returns
        -------
        bitfield : BitField
            ``self`` if not frozen, otherwise a new instance with the result.
        """
        return self._update(self._bitfield & ~self._fold(bits))

    def mask(self, *bits):
        """Keep only the given bits.

        Parameters
        ----------
        *bits : resolvable
            The bits to keep.

        Returns
        -------
        bitfield : BitField
            ``self`` if not frozen, otherwise a new instance with the result.
        """
        return self._update(self._bitfield & self._fold(bits))

    # conversion

    def serialize(self):
        """Unpack this bitfield into a dictionary from flag name to state.

        Returns
        -------
        status : dict[str, bool]
            The state of every flag in definition order.
        """
        bitfield = self._bitfield
        return {
            name: bitfield & value == value
            for name, value in self.FLAGS.items()
        }

    def to_array(self):
        """The names of the flags that are set.

        Returns
        -------
        names : list[str]
            The set flag names in definition order.
        """
        return [name for name, state in self.serialize().items() if state]

    def to_json(self):
        """The decimal string form of the stored integer.

        The string form is used instead of a JSON number so that bitfields
        wider than 53 bits survive JSON parsers which use doubles.
        """
        return str(self._bitfield)

    @classmethod
    def from_json(cls, text):
        """Parse the output of :meth:`to_json`.

        Parameters
        ----------
        text : str
            The decimal string form of a bitfield.

        Returns
        -------
        bitfield : BitField
            The parsed bitfield.
        """
        if not isinstance(text, str) or not (text.isascii() and
                                             text.isdigit()):
            raise InvalidBit(text, f'expected a decimal string, got {text!r}')
        return cls(int(text))

    @classmethod
    def pack(cls, **kwargs):
        """Pack a bitfield integer from explicit flag states.

        Parameters
        ----------
        kwargs
            The names of the flags and their status. Any flags not explicitly
            passed will be cleared.

        Returns
        -------
        bitfield : int
            The packed bitfield.
        """
        bitfield = 0
        for name, state in kwargs.items():
            value = cls.resolve(name)
            if state:
                bitfield |= value
        return bitfield

    @classmethod
    def from_serialized(cls, status):
        """Construct a bitfield from the output of :meth:`serialize`.

        Parameters
        ----------
        status : mapping[str, bool]
            The mapping from flag name to flag state.

        Returns
        -------
        bitfield : BitField
            The packed bitfield.
        """
        return cls(cls.pack(**status))

    def __iter__(self):
        """Iterate over the names of the flags that are set.

        The names are computed from the stored integer when the first item is
        requested, not when :func:`iter` is called.
        """
        yield from self.to_array()

    def __len__(self):
        return len(self.to_array())

    def __bool__(self):
        return self._bitfield != 0

    def __contains__(self, bit):
        return self.has(bit)

    def __int__(self):
        return self._bitfield

    __index__ = __int__

    def __str__(self):
        return self.to_json()

    def __repr__(self):
        names = self.to_array()
        unknown = self._bitfield & ~self.ALL
        if unknown:
            names.append(hex(unknown))
        return f'{type(self).__qualname__}({"|".join(names) or 0})'

    def __eq__(self, other):
        if isinstance(other, BitField):
            return (
                type(self) is type(other) and
                self._bitfield == other._bitfield
            )
        if (isinstance(other, numbers.Integral) and
                not isinstance(other, bool)):
            return self._bitfield == int(other)
        return NotImplemented

    def __hash__(self):
        if not self._frozen:
            raise TypeError(
                f'unhashable type: unfrozen {type(self).__qualname__}',
            )
        return hash(self._bitfield)

    # operators never mutate; they always return a new instance

    def __or__(self, other):
        return type(self)(self._bitfield | self.resolve(other))

    __ror__ = __or__

    def __and__(self, other):
        return type(self)(self._bitfield & self.resolve(other))

    __rand__ = __and__

    def __xor__(self, other):
        return type(self)(self._bitfield ^ self.resolve(other))

    __rxor__ = __xor__

    def __sub__(self, other):
        return type(self)(self._bitfield & ~self.resolve(other))

    def __rsub__(self, other):
        return type(self)(self.resolve(other) & ~self._bitfield)

    def __invert__(self):
        # complement within the declared flags; unknown bits are dropped
        return type(self)(self.ALL & ~self._bitfield)
