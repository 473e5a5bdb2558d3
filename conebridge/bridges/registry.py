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

from pyomo.common.factory import Factory

BridgeFactory = Factory('constraint bridge')


def bridge_for(function_type, set_type, names=None):
    """Return the first registered bridge class that supports
    function_type-in-set_type, or None.

    ``names`` restricts (and orders) the bridges that are considered.
    """
    if names is None:
        names = list(BridgeFactory)
    for name in names:
        if name not in BridgeFactory:
            raise ValueError("Unknown constraint bridge: '%s'" % (name,))
        bridge_type = BridgeFactory.get_class(name)
        if bridge_type.supports_constraint(function_type, set_type):
            return bridge_type
    return None
