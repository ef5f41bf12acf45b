import numpy as np
from hypothesis.strategies import (
    booleans,
    composite,
    integers,
    just,
    lists,
    one_of,
    recursive,
    sampled_from,
)


def bits(cls, *, width=None):
    """Non-negative integers which fit in the flags of ``cls``.

    Parameters
    ----------
    cls : type[BitField]
        The flag set.
    width : int, optional
        The number of bits to draw from. Defaults to the width of ``cls.ALL``
        plus one so that unknown bits are also generated.
    """
    if width is None:
        width = cls.ALL.bit_length() + 1
    return integers(0, (1 << width) - 1)


def flag_names(cls):
    """The names of the flags of ``cls``.
    """
    return sampled_from(list(cls.FLAGS))


def numpy_bits(cls):
    """Bits of ``cls`` as numpy fixed-width unsigned scalars.
    """
    return bits(cls, width=min(cls.ALL.bit_length() + 1, 64)).map(np.uint64)


@composite
def bit_fields(draw, cls, *, frozen=None):
    """Instances of ``cls``.

    Parameters
    ----------
    cls : type[BitField]
        The flag set.
    frozen : bool, optional
        Force the instances to be frozen or unfrozen. By default both are
        drawn.
    """
    instance = cls(draw(bits(cls)))
    if frozen is None:
        frozen = draw(booleans())
    if frozen:
        instance.freeze()
    return instance


def resolvables(cls, *, max_leaves=10):
    """Any value accepted by ``cls.resolve``, including nested lists.
    """
    if cls.FLAGS:
        leaves = one_of(
            bits(cls),
            numpy_bits(cls),
            flag_names(cls),
            bit_fields(cls),
        )
    else:
        leaves = one_of(bits(cls), just(0))
    return recursive(
        leaves,
        lambda children: lists(children, max_size=4),
        max_leaves=max_leaves,
    )
