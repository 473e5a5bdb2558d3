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

from pyomo.common.errors import DeveloperError, PyomoException, format_exception


class ConeBridgeError(PyomoException):
    """
    Exception class for other conebridge exceptions to inherit from,
    allowing them to be caught in a general way.
    """


class UnsupportedShapeError(ConeBridgeError, ValueError):
    """
    Exception raised when the length of a function is inconsistent with
    the dimension of the set it is paired with (e.g., an odd-length
    Nonnegatives block when recovering a norm cone).  This is always
    detected before the host model is modified.
    """


class UnsupportedConstraintError(ConeBridgeError, TypeError):
    """
    Exception raised when neither the host model nor any registered
    bridge accepts a (function type, set type) pair.
    """


class UnsupportedAttributeError(ConeBridgeError, NotImplementedError):
    """Exception raised when getting or setting an unsupported attribute"""


class InvalidIndexError(ConeBridgeError, KeyError):
    """
    Exception raised by the host model when a variable or constraint
    index is unknown or has already been deleted.
    """

    def __str__(self):
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ''


class InvalidModelOperationError(ConeBridgeError, RuntimeError):
    """
    Exception raised by the host model for operations that would leave
    the model inconsistent (e.g., deleting a variable that is still
    referenced by a constraint).
    """


class BridgeDeletedError(ConeBridgeError, RuntimeError):
    """Exception raised when a deleted bridge is used"""

    default_message = "The bridge has been deleted and can no longer be used."


class InvariantViolationError(DeveloperError):
    """
    Exception raised when an internal consistency check of a bridge
    fails.  This signals a defect (in the bridge or in the host model),
    not a recoverable modeling error.
    """

    def __str__(self):
        return format_exception(
            repr(super(DeveloperError, self).__str__()),
            prolog="Internal conebridge invariant violated:",
            epilog="Please report this to the conebridge developers.",
            exception=self,
        )
