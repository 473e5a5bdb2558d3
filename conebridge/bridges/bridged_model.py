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

import logging

from pyomo.common.config import ConfigDict, ConfigValue
from pyomo.common.log import is_debug_set

from conebridge.attributes import (
    AbstractModelAttribute,
    ListOfConstraintIndices,
    ListOfVariableIndices,
    NumberOfConstraints,
    NumberOfVariables,
)
from conebridge.bridges.base import AbstractBridge
from conebridge.bridges.registry import BridgeFactory, bridge_for
from conebridge.errors import InvalidIndexError, UnsupportedConstraintError
from conebridge.index import ConstraintIndex

logger = logging.getLogger(__name__)


def _bridge_name_list(val):
    if val is None:
        return None
    if isinstance(val, str):
        val = [val]
    ans = list(val)
    for name in ans:
        if name not in BridgeFactory:
            raise ValueError(
                "Unknown constraint bridge '%s' (registered bridges: %s)"
                % (name, ', '.join(sorted(BridgeFactory)))
            )
    return ans


class BridgedModel(object):
    """Route constraints a host model cannot hold through bridges.

    Constraints the wrapped model supports are added to it directly.
    For any other constraint, the first enabled bridge supporting its
    (function type, set type) is installed, and every later request on
    the returned index is forwarded to that bridge.  Deleting a bridged
    constraint deletes everything the bridge created.

    Variables and constraints created by bridges are hidden from the
    variable and constraint listings.  Only one level of bridging is
    performed: the constraints a bridge creates must be supported by the
    wrapped model.
    """

    CONFIG = ConfigDict('conebridge.bridged_model')
    CONFIG.declare(
        'bridges',
        ConfigValue(
            default=None,
            domain=_bridge_name_list,
            description="Names of the bridges that may be applied",
            doc="""
            The list of registered bridge names that may be used to
            reformulate unsupported constraints, in order of preference.
            If None (default), every registered bridge may be used.""",
        ),
    )
    CONFIG.declare_from(AbstractBridge.CONFIG)

    def __init__(self, model, **kwds):
        self.model = model
        self.config = self.CONFIG(kwds.pop('options', {}))
        self.config.set_value(kwds)
        self._bridges = {}
        self._last_index = 0

    def _bridge_options(self):
        return {key: self.config[key] for key in AbstractBridge.CONFIG.keys()}

    #
    # Variables
    #

    def add_variable(self):
        return self.model.add_variable()

    def add_variables(self, n):
        return self.model.add_variables(n)

    #
    # Constraints
    #

    def supports_constraint(self, function_type, set_type):
        if self.model.supports_constraint(function_type, set_type):
            return True
        return self._find_bridge(function_type, set_type) is not None

    def _find_bridge(self, function_type, set_type):
        bridge_type = bridge_for(function_type, set_type, self.config.bridges)
        if bridge_type is None:
            return None
        for F, S in bridge_type.added_constraint_types():
            if not self.model.supports_constraint(F, S):
                return None
        return bridge_type

    def add_constraint(self, func, set_):
        function_type, set_type = type(func), type(set_)
        if self.model.supports_constraint(function_type, set_type):
            return self.model.add_constraint(func, set_)
        bridge_type = self._find_bridge(function_type, set_type)
        if bridge_type is None:
            raise UnsupportedConstraintError(
                "Constraints of type %s-in-%s are not supported by the model "
                "and no enabled bridge reformulates them into supported "
                "constraints" % (function_type.__name__, set_type.__name__)
            )
        bridge = bridge_type.bridge_constraint(
            self.model, func, set_, **self._bridge_options()
        )
        # Bridged constraints use negative values so that they can never
        # collide with the indices of the wrapped model
        self._last_index -= 1
        ci = ConstraintIndex(function_type, set_type, self._last_index)
        self._bridges[ci] = bridge
        if is_debug_set(logger):
            logger.debug("Bridged %r using %s", ci, bridge_type.__name__)
        return ci

    def is_bridged(self, index):
        return index in self._bridges

    def bridge(self, index):
        """Return the bridge installed for the constraint ``index``"""
        try:
            return self._bridges[index]
        except KeyError:
            raise InvalidIndexError(
                "%r is not a bridged constraint of this model" % (index,)
            ) from None

    def is_valid(self, index):
        if index in self._bridges:
            return True
        return self.model.is_valid(index)

    #
    # Attributes
    #

    def get(self, attr, index=None):
        if isinstance(attr, AbstractModelAttribute):
            return self._get_model_attribute(attr)
        if index in self._bridges:
            return self._bridges[index].get(self.model, attr)
        return self.model.get(attr, index)

    def set(self, attr, index, value):
        if index in self._bridges:
            self._bridges[index].set(self.model, attr, value)
        else:
            self.model.set(attr, index, value)

    def _get_model_attribute(self, attr):
        attr_type = type(attr)
        if attr_type in (NumberOfVariables, ListOfVariableIndices):
            hidden = set()
            for bridge in self._bridges.values():
                hidden.update(bridge.list_of_variable_indices())
            ans = [
                v
                for v in self.model.get(ListOfVariableIndices())
                if v not in hidden
            ]
            return len(ans) if attr_type is NumberOfVariables else ans
        if attr_type in (NumberOfConstraints, ListOfConstraintIndices):
            F, S = attr.function_type, attr.set_type
            hidden = set()
            for bridge in self._bridges.values():
                hidden.update(bridge.list_of_constraint_indices(F, S))
            ans = [
                ci
                for ci in self.model.get(ListOfConstraintIndices(F, S))
                if ci not in hidden
            ]
            ans.extend(
                ci
                for ci in self._bridges
                if ci.function_type is F and ci.set_type is S
            )
            return len(ans) if attr_type is NumberOfConstraints else ans
        return self.model.get(attr)

    #
    # Deletion
    #

    def delete(self, index):
        """Delete a variable or constraint (or a list of them).

        All indices in a list are validated before anything is deleted.
        Bridged constraints are deleted first, so that variables they
        reference can be deleted in the same call.
        """
        if isinstance(index, (list, tuple)):
            indices = list(index)
        else:
            indices = [index]
        for idx in indices:
            if idx not in self._bridges and not self.model.is_valid(idx):
                raise InvalidIndexError(
                    "Invalid index %r: it does not exist or has been deleted"
                    % (idx,)
                )
        native = []
        for idx in indices:
            bridge = self._bridges.pop(idx, None)
            if bridge is None:
                native.append(idx)
            else:
                bridge.delete(self.model)
        if native:
            self.model.delete(native)
