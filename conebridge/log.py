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
#
#  Logging setup for the conebridge package
#
"""Set up the ``conebridge`` root logger.

Messages from every ``conebridge.*`` module propagate to the
``conebridge`` logger, which emits them to stdout using Pyomo's
:py:class:`LegacyPyomoFormatter`.  The verbose format (source file and
line) is used when the ``conebridge`` logger has been explicitly set to
DEBUG.  The handler stays silent if the application has registered
handlers on the root logger.
"""

import logging
import os
import sys

from pyomo.common.log import LegacyPyomoFormatter, is_debug_set

CONEBRIDGE_ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class _RootHandlerFilter(object):
    def __init__(self):
        self.logger = logging.getLogger()

    def filter(self, record):
        return not self.logger.handlers


conebridge_logger = logging.getLogger('conebridge')
conebridge_handler = logging.StreamHandler(sys.stdout)
conebridge_formatter = LegacyPyomoFormatter(
    base=CONEBRIDGE_ROOT_DIR, verbosity=lambda: is_debug_set(conebridge_logger)
)
conebridge_handler.setFormatter(conebridge_formatter)
conebridge_handler.addFilter(_RootHandlerFilter())
conebridge_logger.addHandler(conebridge_handler)
