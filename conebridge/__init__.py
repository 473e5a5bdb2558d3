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
"""conebridge: linear reformulations of norm-cone constraints

conebridge rewrites infinity-norm and one-norm epigraph constraints as
linear inequalities and maps functions, primal and dual values, and
start values between the two representations.
"""

# The log should be imported first so that the conebridge handler is
# set up as soon as possible
from conebridge import log

from conebridge.version import version, version_info, __version__
from conebridge.index import ConstraintIndex, VariableIndex
from conebridge.functions import (
    ScalarAffineFunction,
    VectorAffineFunction,
    VectorOfVariables,
)
from conebridge.sets import (
    GreaterThan,
    Nonnegatives,
    NormInfinityCone,
    NormOneCone,
    dimension,
)
from conebridge import attributes
from conebridge.model import Model
from conebridge.bridges import (
    AbstractBridge,
    BridgedModel,
    BridgeFactory,
    NormInfinityBridge,
    NormOneBridge,
    SetMapBridge,
)
