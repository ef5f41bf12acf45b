import pytest

import flagfield.utils


def test_is_single_bit():
    assert flagfield.utils.is_single_bit(1)
    assert flagfield.utils.is_single_bit(1 << 100)
    assert not flagfield.utils.is_single_bit(0)
    assert not flagfield.utils.is_single_bit(3)
    assert not flagfield.utils.is_single_bit(-2)


def test_no_default():
    with pytest.raises(TypeError):
        flagfield.utils.no_default()


def test_classproperty():
    calls = []

    class C:
        value = 1

        @flagfield.utils.classproperty
        def doubled(cls):
            calls.append(cls)
            return cls.value * 2

    class D(C):
        value = 2

    assert C.doubled == 2
    assert D.doubled == 4
    assert D().doubled == 4

    # not cached
    C.value = 5
    assert C.doubled == 10
    assert calls == [C, D, D, C]
