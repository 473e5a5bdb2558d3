#  ___________________________________________________________________________
#
#  Pyomo: Python Optimization Modeling Objects
#  Copyright (c) 2008-2025
#  National Technology and Engineering Solutions of Sandia, LLC
#  Under the terms of Contract DE-NA0003525 with National Technology and
#  Engineering Solutions of Sandia, LLC, the U.S. Government retains certain
#  rights in this software.
#  This software is distributed under the 3-clause BSD License.
#  ___________________________________________________________________________
"""Sets (cones) that constraint functions are restricted to."""

from pyomo.common.numeric_types import native_numeric_types


class AbstractSet(object):
    __slots__ = ()

    def _key(self):
        raise NotImplementedError  # pragma:nocover

    def __eq__(self, other):
        return type(other) is type(self) and other._key() == self._key()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((type(self),) + self._key())

    def __repr__(self):
        return '%s(%s)' % (type(self).__name__, ', '.join(map(str, self._key())))


class AbstractScalarSet(AbstractSet):
    __slots__ = ()


class AbstractVectorSet(AbstractSet):
    """Base class for sets of vectors with a fixed dimension"""

    __slots__ = ('dimension',)

    def __init__(self, dimension):
        if type(dimension) is not int or dimension < 0:
            raise ValueError(
                "The dimension of %s must be a nonnegative integer (received %r)"
                % (type(self).__name__, dimension)
            )
        self.dimension = dimension

    def _key(self):
        return (self.dimension,)


class GreaterThan(AbstractScalarSet):
    """The set ``[lower, inf)``"""

    __slots__ = ('lower',)

    def __init__(self, lower):
        if type(lower) not in native_numeric_types:
            raise TypeError(
                "GreaterThan expects a numeric lower bound (received %s)"
                % (type(lower).__name__,)
            )
        self.lower = lower

    def _key(self):
        return (self.lower,)


class Nonnegatives(AbstractVectorSet):
    """The nonnegative orthant ``{x : x[i] >= 0 for all i}``"""

    __slots__ = ()


class NormInfinityCone(AbstractVectorSet):
    """The cone ``{(t, x) : t >= max(abs(x[i]))}`` of dimension ``1 + len(x)``"""

    __slots__ = ()


class NormOneCone(AbstractVectorSet):
    """The cone ``{(t, x) : t >= sum(abs(x[i]))}`` of dimension ``1 + len(x)``"""

    __slots__ = ()


def dimension(s):
    """Return the number of rows a function must have to belong to ``s``"""
    if isinstance(s, AbstractVectorSet):
        return s.dimension
    if isinstance(s, AbstractScalarSet):
        return 1
    raise TypeError("Object of type %s is not a set" % (type(s).__name__,))
