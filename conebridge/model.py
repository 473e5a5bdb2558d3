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
"""An in-memory host model.

:py:class:`Model` stores variables and constraints and the attributes
attached to them (start values, loaded results).  It does not solve
anything: result attributes are loaded with :py:meth:`Model.set`, the
way a solver interface loads a solution, and constraint primal values
are computed from the loaded variable values.
"""

import logging

from pyomo.common.config import ConfigDict, ConfigValue
from pyomo.common.log import is_debug_set

from conebridge.attributes import (
    ConstraintDual,
    ConstraintDualStart,
    ConstraintFunction,
    ConstraintPrimal,
    ConstraintPrimalStart,
    ConstraintSet,
    ListOfConstraintIndices,
    ListOfVariableIndices,
    NumberOfConstraints,
    NumberOfVariables,
    VariablePrimal,
    VariablePrimalStart,
)
from conebridge.errors import (
    InvalidIndexError,
    InvalidModelOperationError,
    UnsupportedAttributeError,
    UnsupportedConstraintError,
    UnsupportedShapeError,
)
from conebridge.functions import (
    ScalarAffineFunction,
    VectorAffineFunction,
    VectorOfVariables,
)
from conebridge.index import ConstraintIndex, VariableIndex
from conebridge.sets import (
    AbstractScalarSet,
    AbstractSet,
    AbstractVectorSet,
    GreaterThan,
    Nonnegatives,
    dimension,
)

logger = logging.getLogger(__name__)


def _set_type_list(val):
    if isinstance(val, type):
        val = (val,)
    ans = tuple(val)
    for s in ans:
        if not (isinstance(s, type) and issubclass(s, AbstractSet)):
            raise ValueError("Expected a set type (received %r)" % (s,))
    return ans


def _function_variables(func):
    if isinstance(func, VectorOfVariables):
        return func.variables
    return func.variables()


class _VariableData(object):
    __slots__ = ('primal', 'primal_start')

    def __init__(self):
        self.primal = None
        self.primal_start = None


class _ConstraintData(object):
    __slots__ = ('function', 'set', 'dual', 'primal_start', 'dual_start')

    def __init__(self, function, set_):
        self.function = function
        self.set = set_
        self.dual = None
        self.primal_start = None
        self.dual_start = None


class Model(object):
    """An in-memory store of variables and constraints.

    Only the set types listed in the ``supported_sets`` option are
    accepted.  The default is a linear host: ``GreaterThan`` (with
    :py:class:`ScalarAffineFunction`) and ``Nonnegatives`` (with
    :py:class:`VectorAffineFunction` or :py:class:`VectorOfVariables`).
    """

    CONFIG = ConfigDict('conebridge.model')
    CONFIG.declare(
        'supported_sets',
        ConfigValue(
            default=(GreaterThan, Nonnegatives),
            domain=_set_type_list,
            description="Set types the model accepts natively",
        ),
    )

    def __init__(self, **kwds):
        self.config = self.CONFIG(kwds)
        self._variables = {}
        self._constraints = {}
        self._last_variable = 0
        self._last_constraint = 0

    #
    # Variables
    #

    def add_variable(self):
        self._last_variable += 1
        vi = VariableIndex(self._last_variable)
        self._variables[vi] = _VariableData()
        return vi

    def add_variables(self, n):
        if n < 0:
            raise ValueError("Cannot add a negative number of variables (%s)" % (n,))
        return [self.add_variable() for i in range(n)]

    def _variable_data(self, vi):
        try:
            return self._variables[vi]
        except KeyError:
            raise InvalidIndexError(
                "Invalid variable index %r: the variable does not exist or "
                "has been deleted" % (vi,)
            ) from None

    #
    # Constraints
    #

    def supports_constraint(self, function_type, set_type):
        if set_type not in self.config.supported_sets:
            return False
        if issubclass(set_type, AbstractScalarSet):
            return function_type is ScalarAffineFunction
        return function_type in (VectorAffineFunction, VectorOfVariables)

    def add_constraint(self, func, set_):
        function_type, set_type = type(func), type(set_)
        if not self.supports_constraint(function_type, set_type):
            raise UnsupportedConstraintError(
                "Constraints of type %s-in-%s are not supported by the model"
                % (function_type.__name__, set_type.__name__)
            )
        if isinstance(set_, AbstractVectorSet) and len(func) != dimension(set_):
            raise UnsupportedShapeError(
                "Cannot add a function with %s rows to a set of dimension %s"
                % (len(func), dimension(set_))
            )
        for v in _function_variables(func):
            self._variable_data(v)
        self._last_constraint += 1
        ci = ConstraintIndex(function_type, set_type, self._last_constraint)
        self._constraints[ci] = _ConstraintData(func, set_)
        if is_debug_set(logger):
            logger.debug("Added constraint %r: %s in %r", ci, func, set_)
        return ci

    def _constraint_data(self, ci):
        try:
            return self._constraints[ci]
        except KeyError:
            raise InvalidIndexError(
                "Invalid constraint index %r: the constraint does not exist "
                "or has been deleted" % (ci,)
            ) from None

    def is_valid(self, index):
        if type(index) is VariableIndex:
            return index in self._variables
        return index in self._constraints

    #
    # Attributes
    #

    def get(self, attr, index=None):
        if isinstance(attr, (NumberOfVariables, ListOfVariableIndices)):
            ans = list(self._variables)
            return len(ans) if type(attr) is NumberOfVariables else ans
        if isinstance(attr, NumberOfConstraints):
            ans = [
                ci
                for ci in self._constraints
                if ci.function_type is attr.function_type
                and ci.set_type is attr.set_type
            ]
            return ans if type(attr) is ListOfConstraintIndices else len(ans)
        if type(attr) is VariablePrimal:
            return self._variable_data(index).primal
        if type(attr) is VariablePrimalStart:
            return self._variable_data(index).primal_start
        if type(attr) is ConstraintPrimal:
            return self._constraint_primal(self._constraint_data(index))
        data = self._constraint_data(index)
        if type(attr) is ConstraintFunction:
            return data.function
        if type(attr) is ConstraintSet:
            return data.set
        if type(attr) is ConstraintDual:
            return data.dual
        if type(attr) is ConstraintPrimalStart:
            return data.primal_start
        if type(attr) is ConstraintDualStart:
            return data.dual_start
        raise UnsupportedAttributeError(
            "Model does not support getting attribute %r" % (attr,)
        )

    def _constraint_primal(self, data):
        func = data.function
        if isinstance(func, VectorOfVariables):
            func = func.as_affine()
        values = {}
        for v in _function_variables(func):
            val = self._variables[v].primal
            if val is None:
                return None
            values[v] = val
        return func.evaluate(values)

    def set(self, attr, index, value):
        if type(attr) is VariablePrimal:
            self._variable_data(index).primal = value
        elif type(attr) is VariablePrimalStart:
            self._variable_data(index).primal_start = value
        elif type(attr) is ConstraintFunction:
            data = self._constraint_data(index)
            if type(value) is not type(data.function):
                raise UnsupportedAttributeError(
                    "Cannot change the function type of constraint %r from %s "
                    "to %s"
                    % (index, type(data.function).__name__, type(value).__name__)
                )
            self._check_value_shape(index, data, value)
            for v in _function_variables(value):
                self._variable_data(v)
            data.function = value
        elif type(attr) in (ConstraintDual, ConstraintPrimalStart, ConstraintDualStart):
            data = self._constraint_data(index)
            if value is not None:
                self._check_value_shape(index, data, value)
                if isinstance(data.set, AbstractVectorSet):
                    value = list(value)
            if type(attr) is ConstraintDual:
                data.dual = value
            elif type(attr) is ConstraintPrimalStart:
                data.primal_start = value
            else:
                data.dual_start = value
        else:
            raise UnsupportedAttributeError(
                "Model does not support setting attribute %r" % (attr,)
            )

    def _check_value_shape(self, ci, data, value):
        if not isinstance(data.set, AbstractVectorSet):
            return
        if len(value) != data.set.dimension:
            raise UnsupportedShapeError(
                "Constraint %r has dimension %s but the value has length %s"
                % (ci, data.set.dimension, len(value))
            )

    #
    # Deletion
    #

    def delete(self, index):
        """Delete a variable or constraint (or a list of them).

        All indices in a list are validated before anything is deleted.
        """
        if isinstance(index, (list, tuple)):
            indices = list(index)
        else:
            indices = [index]
        for idx in indices:
            if type(idx) is VariableIndex:
                self._variable_data(idx)
            else:
                self._constraint_data(idx)
        dropped = set(i for i in indices if type(i) is VariableIndex)
        if dropped:
            for ci, data in self._constraints.items():
                if ci in indices:
                    continue
                used = dropped.intersection(_function_variables(data.function))
                if used:
                    raise InvalidModelOperationError(
                        "Cannot delete variable %r: it is used by constraint %r"
                        % (sorted(used)[0], ci)
                    )
        for idx in indices:
            if type(idx) is VariableIndex:
                del self._variables[idx]
            else:
                del self._constraints[idx]
            if is_debug_set(logger):
                logger.debug("Deleted %r", idx)
