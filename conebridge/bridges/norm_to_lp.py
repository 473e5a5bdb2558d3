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
"""Bridges from the infinity-norm and one-norm cones to linear constraints."""

import logging

from pyomo.common.log import is_debug_set

from conebridge.attributes import (
    ConstraintDualStart,
    ConstraintFunction,
    ConstraintPrimalStart,
    ConstraintSet,
    VariablePrimalStart,
)
from conebridge.bridges.base import AbstractBridge, SetMapBridge, check_function_shape
from conebridge.bridges.registry import BridgeFactory
from conebridge.errors import InvariantViolationError, UnsupportedShapeError
from conebridge.functions import (
    ScalarAffineFunction,
    VectorAffineFunction,
    VectorOfVariables,
    convert_approx,
    eachscalar,
    remove_variables,
    stack,
    vcat,
)
from conebridge.sets import (
    GreaterThan,
    Nonnegatives,
    NormInfinityCone,
    NormOneCone,
    dimension,
)

logger = logging.getLogger(__name__)


def _split_halves(scalars):
    n = len(scalars)
    if not n or n % 2:
        raise UnsupportedShapeError(
            "Expected a nonempty vector of even length (received length %s)" % (n,)
        )
    return n // 2


def _merged(f):
    # one term per variable, so dividing the sum is exact
    if isinstance(f, ScalarAffineFunction):
        return f.canonical()
    return f


@BridgeFactory.register(
    'norm_infinity',
    doc="Reformulate t >= max(abs(x)) as t - x >= 0 and t + x >= 0",
)
class NormInfinityBridge(SetMapBridge):
    """Bridge a NormInfinityCone constraint to Nonnegatives.

    ``t >= max(abs(x[i]))`` holds if and only if ``t >= x[i]`` and
    ``t >= -x[i]`` for all ``i``.  The ``2d`` target rows are ordered
    ``[t - x[1], ..., t - x[d], t + x[1], ..., t + x[d]]``.
    """

    source_set_type = NormInfinityCone
    target_set_type = Nonnegatives

    @classmethod
    def map_set(cls, set_):
        if dimension(set_) < 2:
            raise UnsupportedShapeError(
                "%r is not supported: the dimension must be at least 2" % (set_,)
            )
        return Nonnegatives(2 * (dimension(set_) - 1))

    @classmethod
    def inverse_map_set(cls, set_):
        dim = dimension(set_)
        if not dim or dim % 2:
            raise UnsupportedShapeError(
                "Cannot recover a NormInfinityCone from %r: the dimension "
                "must be even and positive" % (set_,)
            )
        return NormInfinityCone(dim // 2 + 1)

    @classmethod
    def map_function(cls, func):
        scalars = eachscalar(func)
        if len(scalars) < 2:
            raise UnsupportedShapeError(
                "Expected a vector of length at least 2 (received length %s)"
                % (len(scalars),)
            )
        t = scalars[0]
        x = scalars[1:]
        return stack([t - xi for xi in x] + [t + xi for xi in x])

    @classmethod
    def inverse_map_function(cls, func):
        scalars = eachscalar(func)
        d = _split_halves(scalars)
        t = _merged(sum(scalars)) / len(scalars)
        x = [(scalars[d + i] - scalars[i]) / 2 for i in range(d)]
        return vcat(t, x)

    # Given a[i] is the dual on t - x[i] >= 0 and b[i] is the dual on
    # t + x[i] >= 0, the dual on (t, x) in NormInfinityCone is (u, v) in
    # NormOneCone, where v[i] = b[i] - a[i] and u = sum(a) + sum(b).
    @classmethod
    def adjoint_map_function(cls, func):
        scalars = eachscalar(func)
        d = _split_halves(scalars)
        t = sum(scalars)
        x = [scalars[d + i] - scalars[i] for i in range(d)]
        return vcat(t, x)

    @classmethod
    def inverse_adjoint_map_function(cls, func, tol=0.0):
        """Split a (t, x) dual into multipliers on the 2d linear rows.

        At most one of the bounds ``t - x[i] >= 0``, ``t + x[i] >= 0`` is
        active, so the sign of ``x[i]`` tells which multiplier is nonzero.
        Any difference between ``t`` and ``sum(abs(x))`` is spread evenly
        over all rows.  This is a heuristic, not a projection: if ``t <
        sum(abs(x))`` the input is outside the dual cone and the rows
        that would become negative are clipped to zero.
        """
        scalars = eachscalar(func)
        if len(scalars) < 2:
            raise UnsupportedShapeError(
                "Expected a vector of length at least 2 (received length %s)"
                % (len(scalars),)
            )
        t = scalars[0]
        x = scalars[1:]
        lower = [-xi if xi < 0 else 0.0 for xi in x]
        upper = [xi if xi > 0 else 0.0 for xi in x]
        split = lower + upper
        shift = (t - sum(split)) / len(split)
        ans = [v + shift for v in split]
        if min(ans) < -tol:
            logger.warning(
                "Dual start %s is outside the dual cone (t < sum(abs(x))); "
                "negative multipliers were clipped to zero.",
                list(scalars),
            )
        return [max(v, 0.0) for v in ans]


@BridgeFactory.register(
    'norm_one',
    doc="Reformulate t >= sum(abs(x)) with auxiliary variables y as "
    "t - sum(y) >= 0, y - x >= 0 and y + x >= 0",
)
class NormOneBridge(AbstractBridge):
    """Bridge a NormOneCone constraint to linear constraints.

    ``t >= sum(abs(x[i]))`` holds if and only if there exists ``y`` with
    ``t >= sum(y[i])``, ``y[i] >= x[i]`` and ``y[i] >= -x[i]``.  The bridge
    owns the ``d`` variables ``y``, a GreaterThan constraint on
    ``t - sum(y)`` and a Nonnegatives constraint on
    ``[y[1] - x[1], ..., y[d] - x[d], y[1] + x[1], ..., y[d] + x[d]]``.
    """

    def __init__(self, y, ge_index, nn_index, function_type, config):
        super().__init__(config)
        self.y = list(y)
        self.ge_index = ge_index
        self.nn_index = nn_index
        self._function_type = function_type

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return set_type is NormOneCone and function_type in (
            VectorAffineFunction,
            VectorOfVariables,
        )

    @classmethod
    def added_constraint_types(cls):
        return [(ScalarAffineFunction, GreaterThan), (VectorAffineFunction, Nonnegatives)]

    @classmethod
    def bridge_constraint(cls, model, func, set_, **kwds):
        config = cls._process_config(kwds)
        check_function_shape(func, set_, minimum_dimension=2)
        scalars = eachscalar(func)
        t = scalars[0]
        x = scalars[1:]
        d = len(x)
        created = []
        try:
            y = model.add_variables(d)
            created.append(y)
            if len(y) != d:
                raise InvariantViolationError(
                    "Requested %s auxiliary variables but the model created %s"
                    % (d, len(y))
                )
            ge_index = model.add_constraint(
                t - ScalarAffineFunction([1.0] * d, y), GreaterThan(0.0)
            )
            created.append(ge_index)
            y = eachscalar(VectorOfVariables(y))
            nn_index = model.add_constraint(
                stack([yi - xi for yi, xi in zip(y, x)] + [yi + xi for yi, xi in zip(y, x)]),
                Nonnegatives(2 * d),
            )
        except Exception:
            _remove_partial_bridge(model, created)
            raise
        if is_debug_set(logger):
            logger.debug(
                "NormOneBridge: added %s variables, %r and %r", d, ge_index, nn_index
            )
        return cls(created[0], ge_index, nn_index, type(func), config)

    def _delete(self, model):
        model.delete(self.nn_index)
        model.delete(self.ge_index)
        model.delete(self.y)

    def _check_dimension(self, n):
        d = len(self.y)
        if n != 2 * d:
            raise InvariantViolationError(
                "NormOneBridge owns %s auxiliary variables but its Nonnegatives "
                "constraint has dimension %s" % (d, n)
            )
        return d

    def _get_function(self, model):
        ge_func = model.get(ConstraintFunction(), self.ge_index)
        nn_func = eachscalar(model.get(ConstraintFunction(), self.nn_index))
        d = self._check_dimension(len(nn_func))
        t = ge_func + sum(nn_func) / 2
        x = [(nn_func[d + i] - nn_func[i]) / 2 for i in range(d)]
        func = remove_variables(
            vcat(t, x), self.y, tol=self.config.elimination_tolerance
        )
        return convert_approx(self._function_type, func)

    def _get_set(self, model):
        nn_dim = dimension(model.get(ConstraintSet(), self.nn_index))
        d = self._check_dimension(nn_dim)
        return NormOneCone(1 + d)

    def _get_primal(self, model, attr):
        ge_primal = model.get(attr, self.ge_index)
        nn_primal = model.get(attr, self.nn_index)
        if ge_primal is None or nn_primal is None:
            return None
        d = self._check_dimension(len(nn_primal))
        t = ge_primal + sum(nn_primal) / 2
        x = [(nn_primal[d + i] - nn_primal[i]) / 2 for i in range(d)]
        return [t] + x

    def _check_value_length(self, value):
        if len(value) != 1 + len(self.y):
            raise UnsupportedShapeError(
                "Value of length %s cannot be assigned to a constraint of "
                "dimension %s" % (len(value), 1 + len(self.y))
            )

    # Start writes are not atomic: if the host fails part way, the starts
    # already written stay in place until they are overwritten or unset.
    def _set_primal_start(self, model, value):
        if value is None:
            for yi in self.y:
                model.set(VariablePrimalStart(), yi, None)
            model.set(ConstraintPrimalStart(), self.nn_index, None)
            model.set(ConstraintPrimalStart(), self.ge_index, None)
            return
        self._check_value_length(value)
        x = list(value[1:])
        y = [abs(xi) for xi in x]
        for yi, val in zip(self.y, y):
            model.set(VariablePrimalStart(), yi, val)
        model.set(
            ConstraintPrimalStart(),
            self.nn_index,
            [yi - xi for yi, xi in zip(y, x)] + [yi + xi for yi, xi in zip(y, x)],
        )
        model.set(ConstraintPrimalStart(), self.ge_index, value[0] - sum(y))

    # Given a[i] is the dual on y[i] - x[i] >= 0, b[i] is the dual on
    # y[i] + x[i] >= 0 and c is the dual on t - sum(y) >= 0, the dual on
    # (t, x) in NormOneCone is (u, v) in NormInfinityCone, where
    # v[i] = b[i] - a[i] and u = c.
    def _get_dual(self, model, attr):
        ge_dual = model.get(attr, self.ge_index)
        nn_dual = model.get(attr, self.nn_index)
        if ge_dual is None or nn_dual is None:
            return None
        d = self._check_dimension(len(nn_dual))
        return [ge_dual] + [nn_dual[d + i] - nn_dual[i] for i in range(d)]

    # By complementary slackness only one of a[i], b[i] is nonzero (unless
    # v[i] == 0), so the sign of v[i] decides which one.
    def _set_dual_start(self, model, value):
        if value is None:
            model.set(ConstraintDualStart(), self.ge_index, None)
            model.set(ConstraintDualStart(), self.nn_index, None)
            return
        self._check_value_length(value)
        d = len(self.y)
        nn_dual = [0.0] * (2 * d)
        for i in range(d):
            v = value[1 + i]
            if v < 0:
                nn_dual[i] = -v
            else:
                nn_dual[d + i] = v
        model.set(ConstraintDualStart(), self.ge_index, value[0])
        model.set(ConstraintDualStart(), self.nn_index, nn_dual)

    def list_of_variable_indices(self):
        return list(self.y)

    def list_of_constraint_indices(self, function_type, set_type):
        if (function_type, set_type) == (ScalarAffineFunction, GreaterThan):
            return [self.ge_index]
        if (function_type, set_type) == (VectorAffineFunction, Nonnegatives):
            return [self.nn_index]
        return []


def _remove_partial_bridge(model, created):
    for handle in reversed(created):
        try:
            model.delete(handle)
        except Exception:
            logger.exception(
                "Failed to remove %r while undoing a partially built bridge", handle
            )
