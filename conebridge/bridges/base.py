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
"""Base classes for constraint bridges.

A bridge replaces one constraint that a host model cannot hold natively
by an equivalent set of constraints (and possibly variables) that it
can.  Once installed, every read and write of the original constraint
goes through the bridge, and deleting the original constraint deletes
everything the bridge created.

There are two tiers:

- :py:class:`SetMapBridge` covers reformulations that are an exact affine
  image of the source set with no auxiliary variables.  Subclasses only
  provide the set and function maps; the base class forwards everything
  else.

- :py:class:`AbstractBridge` is the full interface, implemented directly
  by bridges that own auxiliary state.
"""

import logging

from pyomo.common.config import ConfigDict, ConfigValue, NonNegativeFloat
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
)
from conebridge.errors import (
    BridgeDeletedError,
    UnsupportedAttributeError,
    UnsupportedShapeError,
)
from conebridge.functions import (
    VectorAffineFunction,
    VectorOfVariables,
    as_vector_affine,
    convert_approx,
)
from conebridge.sets import Nonnegatives, dimension

logger = logging.getLogger(__name__)


def check_function_shape(func, set_, minimum_dimension=0):
    """Raise :py:class:`UnsupportedShapeError` unless ``len(func)`` matches
    the dimension of ``set_`` (and that dimension is at least
    ``minimum_dimension``)"""
    dim = dimension(set_)
    if len(func) != dim:
        raise UnsupportedShapeError(
            "Function with %s rows cannot be constrained to %r "
            "(expected %s rows)" % (len(func), set_, dim)
        )
    if dim < minimum_dimension:
        raise UnsupportedShapeError(
            "%r is not supported: the dimension must be at least %s"
            % (set_, minimum_dimension)
        )


class AbstractBridge(object):
    """The full bridge interface.

    Bridges are created with :py:meth:`bridge_constraint` and are active
    until :py:meth:`delete` is called.  Every other method raises
    :py:class:`BridgeDeletedError` on a deleted bridge.

    Derived classes implement the protected ``_get_function``,
    ``_get_set``, ``_get_primal``, ``_get_dual``, ``_set_primal_start``,
    ``_set_dual_start`` and ``_delete`` methods, and the class-level
    declarations (:py:meth:`supports_constraint`,
    :py:meth:`added_constrained_variable_types`,
    :py:meth:`added_constraint_types`).
    """

    CONFIG = ConfigDict('conebridge.bridge')
    CONFIG.declare(
        'elimination_tolerance',
        ConfigValue(
            default=1e-8,
            domain=NonNegativeFloat,
            description="Largest coefficient an auxiliary variable may keep "
            "in a recovered constraint function",
            doc="""
            When a bridge recovers the original constraint function, the
            auxiliary variables it introduced must cancel out.  A remaining
            coefficient larger than this (in magnitude) is reported as an
            invariant violation.""",
        ),
    )
    CONFIG.declare(
        'dual_start_tolerance',
        ConfigValue(
            default=1e-8,
            domain=NonNegativeFloat,
            description="Negative multiplier magnitude tolerated (and clipped "
            "silently) when splitting a dual start",
        ),
    )

    def __init__(self, config):
        self.config = config
        self._deleted = False

    @classmethod
    def _process_config(cls, kwds):
        config = cls.CONFIG(kwds.pop('options', {}))
        config.set_value(kwds)
        return config

    #
    # Declarations used by the registry
    #

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        """Return True if the bridge can reformulate function_type-in-set_type"""
        return False

    @classmethod
    def added_constrained_variable_types(cls):
        """Return the (set type,) tuples of the constrained variables the
        bridge creates"""
        return []

    @classmethod
    def added_constraint_types(cls):
        """Return the (function type, set type) pairs of the constraints the
        bridge creates"""
        raise NotImplementedError  # pragma:nocover

    @classmethod
    def bridge_constraint(cls, model, func, set_, **kwds):
        """Reformulate ``func``-in-``set_`` on ``model`` and return the bridge"""
        raise NotImplementedError  # pragma:nocover

    #
    # Lifecycle
    #

    @property
    def deleted(self):
        return self._deleted

    def _check_active(self):
        if self._deleted:
            raise BridgeDeletedError(
                "%s has been deleted and can no longer be used" % (type(self).__name__,)
            )

    def delete(self, model):
        """Delete everything the bridge created from ``model``.

        The bridge is unusable as soon as deletion starts, even if the
        host model fails part way through.
        """
        self._check_active()
        self._deleted = True
        self._delete(model)
        if is_debug_set(logger):
            logger.debug("Deleted %s", type(self).__name__)

    def _delete(self, model):
        raise NotImplementedError  # pragma:nocover

    #
    # The bridge acting as a constraint
    #

    def get_function(self, model):
        self._check_active()
        return self._get_function(model)

    def get_set(self, model):
        self._check_active()
        return self._get_set(model)

    def get_primal(self, model, attr=ConstraintPrimal()):
        self._check_active()
        return self._get_primal(model, attr)

    def get_dual(self, model, attr=ConstraintDual()):
        self._check_active()
        return self._get_dual(model, attr)

    def set_primal_start(self, model, value):
        self._check_active()
        self._set_primal_start(model, value)

    def set_dual_start(self, model, value):
        self._check_active()
        self._set_dual_start(model, value)

    @classmethod
    def supports(cls, attr):
        """Return True if ``attr`` can be set through the bridge"""
        return type(attr) in (ConstraintPrimalStart, ConstraintDualStart)

    def get(self, model, attr):
        """Get a constraint (or bridge-as-model) attribute"""
        self._check_active()
        attr_type = type(attr)
        if attr_type is ConstraintFunction:
            return self._get_function(model)
        elif attr_type is ConstraintSet:
            return self._get_set(model)
        elif attr_type in (ConstraintPrimal, ConstraintPrimalStart):
            return self._get_primal(model, attr)
        elif attr_type in (ConstraintDual, ConstraintDualStart):
            return self._get_dual(model, attr)
        elif attr_type is NumberOfVariables:
            return self.number_of_variables()
        elif attr_type is ListOfVariableIndices:
            return self.list_of_variable_indices()
        elif attr_type is NumberOfConstraints:
            return self.number_of_constraints(attr.function_type, attr.set_type)
        elif attr_type is ListOfConstraintIndices:
            return self.list_of_constraint_indices(attr.function_type, attr.set_type)
        raise UnsupportedAttributeError(
            "%s does not support getting attribute %r" % (type(self).__name__, attr)
        )

    def set(self, model, attr, value):
        """Set a constraint start attribute"""
        self._check_active()
        attr_type = type(attr)
        if attr_type is ConstraintPrimalStart:
            self._set_primal_start(model, value)
        elif attr_type is ConstraintDualStart:
            self._set_dual_start(model, value)
        else:
            raise UnsupportedAttributeError(
                "%s does not support setting attribute %r"
                % (type(self).__name__, attr)
            )

    #
    # The bridge acting as a model
    #

    def number_of_variables(self):
        return len(self.list_of_variable_indices())

    def list_of_variable_indices(self):
        return []

    def number_of_constraints(self, function_type, set_type):
        return len(self.list_of_constraint_indices(function_type, set_type))

    def list_of_constraint_indices(self, function_type, set_type):
        return []


class SetMapBridge(AbstractBridge):
    """A bridge defined by an affine map between two sets.

    The source constraint ``f``-in-``S`` is stored on the host model as
    ``map_function(f)``-in-``map_set(S)``.  Derived classes define:

    - :py:meth:`map_set` / :py:meth:`inverse_map_set`: exact inverses of
      each other on valid sets.
    - :py:meth:`map_function`: the source-to-target map, applied to
      constraint functions and to primal values.
    - :py:meth:`inverse_map_function`: a left inverse of
      :py:meth:`map_function`.
    - :py:meth:`adjoint_map_function`: the transpose of
      :py:meth:`map_function`, taking target duals to source duals.
    - :py:meth:`inverse_adjoint_map_function`: a right inverse of the
      adjoint, used to seed dual starts.

    The function maps accept both vector functions and numeric sequences.
    """

    source_set_type = None
    target_set_type = Nonnegatives

    def __init__(self, constraint, function_type, config):
        super().__init__(config)
        self.constraint = constraint
        self._function_type = function_type

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return set_type is cls.source_set_type and function_type in (
            VectorAffineFunction,
            VectorOfVariables,
        )

    @classmethod
    def added_constraint_types(cls):
        return [(VectorAffineFunction, cls.target_set_type)]

    @classmethod
    def map_set(cls, set_):
        raise NotImplementedError  # pragma:nocover

    @classmethod
    def inverse_map_set(cls, set_):
        raise NotImplementedError  # pragma:nocover

    @classmethod
    def map_function(cls, func):
        raise NotImplementedError  # pragma:nocover

    @classmethod
    def inverse_map_function(cls, func):
        raise NotImplementedError  # pragma:nocover

    @classmethod
    def adjoint_map_function(cls, func):
        raise NotImplementedError  # pragma:nocover

    @classmethod
    def inverse_adjoint_map_function(cls, func, tol=0.0):
        raise NotImplementedError  # pragma:nocover

    @classmethod
    def bridge_constraint(cls, model, func, set_, **kwds):
        config = cls._process_config(kwds)
        check_function_shape(func, set_)
        target_set = cls.map_set(set_)
        target_func = cls.map_function(as_vector_affine(func))
        constraint = model.add_constraint(target_func, target_set)
        if is_debug_set(logger):
            logger.debug(
                "%s: stored %s-in-%r as %r",
                cls.__name__,
                type(func).__name__,
                set_,
                constraint,
            )
        return cls(constraint, type(func), config)

    def _delete(self, model):
        model.delete(self.constraint)

    def _get_function(self, model):
        func = model.get(ConstraintFunction(), self.constraint)
        return convert_approx(self._function_type, self.inverse_map_function(func))

    def _get_set(self, model):
        return self.inverse_map_set(model.get(ConstraintSet(), self.constraint))

    def _get_primal(self, model, attr):
        value = model.get(attr, self.constraint)
        if value is None:
            return None
        return self.inverse_map_function(value)

    def _get_dual(self, model, attr):
        value = model.get(attr, self.constraint)
        if value is None:
            return None
        return self.adjoint_map_function(value)

    def _check_value_length(self, model, value):
        dim = dimension(self._get_set(model))
        if len(value) != dim:
            raise UnsupportedShapeError(
                "Value of length %s cannot be assigned to a constraint of "
                "dimension %s" % (len(value), dim)
            )

    def _set_primal_start(self, model, value):
        if value is not None:
            self._check_value_length(model, value)
            value = self.map_function(value)
        model.set(ConstraintPrimalStart(), self.constraint, value)

    def _set_dual_start(self, model, value):
        if value is not None:
            self._check_value_length(model, value)
            value = self.inverse_adjoint_map_function(
                value, tol=self.config.dual_start_tolerance
            )
        model.set(ConstraintDualStart(), self.constraint, value)

    def list_of_constraint_indices(self, function_type, set_type):
        if (function_type, set_type) == (VectorAffineFunction, self.target_set_type):
            return [self.constraint]
        return []
