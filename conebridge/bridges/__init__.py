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

from conebridge.bridges.registry import BridgeFactory, bridge_for
from conebridge.bridges.base import AbstractBridge, SetMapBridge
from conebridge.bridges.norm_to_lp import NormInfinityBridge, NormOneBridge
from conebridge.bridges.bridged_model import BridgedModel
