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
"""Opaque handles into the variable and constraint stores of a model."""


class VariableIndex(object):
    """A reference to a variable of a model.

    The handle carries no data of its own: everything about the variable
    lives in the model that issued it.
    """

    __slots__ = ('value',)

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return type(other) is VariableIndex and other.value == self.value

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((VariableIndex, self.value))

    def __lt__(self, other):
        return self.value < other.value

    def __repr__(self):
        return 'VariableIndex(%s)' % (self.value,)


class ConstraintIndex(object):
    """A reference to a constraint of a model.

    The function and set types are part of the handle so that a model can
    route requests without looking the constraint up first.
    """

    __slots__ = ('function_type', 'set_type', 'value')

    def __init__(self, function_type, set_type, value):
        self.function_type = function_type
        self.set_type = set_type
        self.value = value

    def _key(self):
        return (self.function_type, self.set_type, self.value)

    def __eq__(self, other):
        return type(other) is ConstraintIndex and other._key() == self._key()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((ConstraintIndex,) + self._key())

    def __repr__(self):
        return 'ConstraintIndex(%s, %s, %s)' % (
            self.function_type.__name__,
            self.set_type.__name__,
            self.value,
        )
