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
"""Attributes that can be queried (and for some, set) on a model.

Attributes are small marker objects passed to ``get`` and ``set``.
Result attributes (``is_result``) hold values produced by a solve:
they are loaded into a model, never written by a user as a hint.
"""


class AbstractAttribute(object):
    __slots__ = ()
    is_result = False

    def _key(self):
        return ()

    def __eq__(self, other):
        return type(other) is type(self) and other._key() == self._key()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((type(self),) + self._key())

    def __repr__(self):
        args = ', '.join(getattr(k, '__name__', str(k)) for k in self._key())
        return '%s(%s)' % (type(self).__name__, args)


class AbstractModelAttribute(AbstractAttribute):
    __slots__ = ()


class AbstractVariableAttribute(AbstractAttribute):
    __slots__ = ()


class AbstractConstraintAttribute(AbstractAttribute):
    __slots__ = ()


#
# Constraint attributes
#


class ConstraintFunction(AbstractConstraintAttribute):
    __slots__ = ()


class ConstraintSet(AbstractConstraintAttribute):
    __slots__ = ()


class ConstraintPrimal(AbstractConstraintAttribute):
    __slots__ = ()
    is_result = True


class ConstraintDual(AbstractConstraintAttribute):
    __slots__ = ()
    is_result = True


class ConstraintPrimalStart(AbstractConstraintAttribute):
    __slots__ = ()


class ConstraintDualStart(AbstractConstraintAttribute):
    __slots__ = ()


#
# Variable attributes
#


class VariablePrimal(AbstractVariableAttribute):
    __slots__ = ()
    is_result = True


class VariablePrimalStart(AbstractVariableAttribute):
    __slots__ = ()


#
# Model attributes
#


class NumberOfVariables(AbstractModelAttribute):
    __slots__ = ()


class ListOfVariableIndices(AbstractModelAttribute):
    __slots__ = ()


class NumberOfConstraints(AbstractModelAttribute):
    """The number of constraints of a given (function type, set type)"""

    __slots__ = ('function_type', 'set_type')

    def __init__(self, function_type, set_type):
        self.function_type = function_type
        self.set_type = set_type

    def _key(self):
        return (self.function_type, self.set_type)


class ListOfConstraintIndices(NumberOfConstraints):
    """The indices of the constraints of a given (function type, set type)"""

    __slots__ = ()
