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
from io import StringIO

import pyomo.common.unittest as unittest
from pyomo.common.log import LoggingIntercept

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
from conebridge.model import Model
from conebridge.sets import GreaterThan, Nonnegatives, NormOneCone


class TestModel(unittest.TestCase):
    def build(self):
        m = Model()
        x, y = m.add_variables(2)
        c = m.add_constraint(
            ScalarAffineFunction([1, -1], [x, y], 1), GreaterThan(0.0)
        )
        n = m.add_constraint(VectorOfVariables([x, y]), Nonnegatives(2))
        return m, x, y, c, n

    def test_add_variables(self):
        m = Model()
        v = m.add_variables(3)
        self.assertEqual(len(v), 3)
        self.assertEqual(m.get(NumberOfVariables()), 3)
        self.assertEqual(m.get(ListOfVariableIndices()), v)
        self.assertEqual(m.add_variables(0), [])
        with self.assertRaisesRegex(ValueError, "negative number of variables"):
            m.add_variables(-1)

    def test_add_constraint(self):
        m, x, y, c, n = self.build()
        self.assertTrue(m.is_valid(c))
        self.assertTrue(m.is_valid(x))
        self.assertEqual(
            m.get(ConstraintFunction(), c), ScalarAffineFunction([1, -1], [x, y], 1)
        )
        self.assertEqual(m.get(ConstraintSet(), n), Nonnegatives(2))
        self.assertEqual(m.get(NumberOfConstraints(VectorOfVariables, Nonnegatives)), 1)
        self.assertEqual(
            m.get(ListOfConstraintIndices(ScalarAffineFunction, GreaterThan)), [c]
        )
        self.assertEqual(
            m.get(NumberOfConstraints(VectorAffineFunction, Nonnegatives)), 0
        )

    def test_unsupported_constraint(self):
        m = Model()
        x, y = m.add_variables(2)
        with self.assertRaisesRegex(
            UnsupportedConstraintError,
            "VectorOfVariables-in-NormOneCone are not supported",
        ):
            m.add_constraint(VectorOfVariables([x, y]), NormOneCone(2))
        self.assertFalse(m.supports_constraint(VectorOfVariables, GreaterThan))
        self.assertTrue(m.supports_constraint(VectorAffineFunction, Nonnegatives))

        m = Model(supported_sets=[GreaterThan, Nonnegatives, NormOneCone])
        self.assertTrue(m.supports_constraint(VectorOfVariables, NormOneCone))
        with self.assertRaisesRegex(ValueError, "Expected a set type"):
            Model(supported_sets=[int])

    def test_shape_mismatch(self):
        m = Model()
        x, y = m.add_variables(2)
        with self.assertRaisesRegex(UnsupportedShapeError, "2 rows to a set of dimension 3"):
            m.add_constraint(VectorOfVariables([x, y]), Nonnegatives(3))
        self.assertEqual(m.get(NumberOfConstraints(VectorOfVariables, Nonnegatives)), 0)

    def test_unknown_variable(self):
        m = Model()
        (x,) = m.add_variables(1)
        other = Model().add_variables(2)[1]
        with self.assertRaisesRegex(InvalidIndexError, "VariableIndex\\(2\\)"):
            m.add_constraint(VectorOfVariables([x, other]), Nonnegatives(2))

    def test_starts(self):
        m, x, y, c, n = self.build()
        self.assertIsNone(m.get(ConstraintPrimalStart(), c))
        self.assertIsNone(m.get(VariablePrimalStart(), x))
        m.set(ConstraintPrimalStart(), c, 2.0)
        m.set(ConstraintDualStart(), n, (1, 2))
        m.set(VariablePrimalStart(), x, 5)
        self.assertEqual(m.get(ConstraintPrimalStart(), c), 2.0)
        self.assertEqual(m.get(ConstraintDualStart(), n), [1, 2])
        self.assertEqual(m.get(VariablePrimalStart(), x), 5)
        with self.assertRaisesRegex(UnsupportedShapeError, "dimension 2 but the value"):
            m.set(ConstraintPrimalStart(), n, [1, 2, 3])
        m.set(ConstraintDualStart(), n, None)
        self.assertIsNone(m.get(ConstraintDualStart(), n))

    def test_results(self):
        m, x, y, c, n = self.build()
        self.assertIsNone(m.get(ConstraintPrimal(), c))
        m.set(VariablePrimal(), x, 3.0)
        self.assertIsNone(m.get(ConstraintPrimal(), c))
        m.set(VariablePrimal(), y, 1.0)
        self.assertEqual(m.get(ConstraintPrimal(), c), 3.0)
        self.assertEqual(m.get(ConstraintPrimal(), n), [3.0, 1.0])
        m.set(ConstraintDual(), n, [0.5, 0])
        self.assertEqual(m.get(ConstraintDual(), n), [0.5, 0])

    def test_set_function(self):
        m, x, y, c, n = self.build()
        m.set(ConstraintFunction(), c, ScalarAffineFunction([2], [x]))
        self.assertEqual(m.get(ConstraintFunction(), c), ScalarAffineFunction([2], [x]))
        with self.assertRaisesRegex(UnsupportedAttributeError, "function type"):
            m.set(ConstraintFunction(), n, VectorAffineFunction([x, y]))
        with self.assertRaisesRegex(UnsupportedAttributeError, "ConstraintSet"):
            m.set(ConstraintSet(), n, Nonnegatives(2))

    def test_delete(self):
        m, x, y, c, n = self.build()
        with self.assertRaisesRegex(
            InvalidModelOperationError, "VariableIndex\\(1\\): it is used"
        ):
            m.delete(x)
        self.assertTrue(m.is_valid(x))
        m.delete([n, c])
        self.assertFalse(m.is_valid(n))
        self.assertFalse(m.is_valid(c))
        m.delete([x, y])
        self.assertEqual(m.get(NumberOfVariables()), 0)
        with self.assertRaisesRegex(InvalidIndexError, "does not exist or has been"):
            m.get(ConstraintFunction(), c)
        with self.assertRaises(KeyError):
            m.delete(x)

    def test_delete_validates_first(self):
        m, x, y, c, n = self.build()
        m.delete(c)
        with self.assertRaises(InvalidIndexError):
            m.delete([n, c])
        self.assertTrue(m.is_valid(n))

    def test_debug_logging(self):
        m = Model()
        (x,) = m.add_variables(1)
        OUT = StringIO()
        with LoggingIntercept(OUT, 'conebridge.model', logging.DEBUG):
            ci = m.add_constraint(VectorOfVariables([x]), Nonnegatives(1))
            m.delete(ci)
        self.assertIn("Added constraint", OUT.getvalue())
        self.assertIn("Deleted ConstraintIndex(VectorOfVariables", OUT.getvalue())


if __name__ == "__main__":
    unittest.main()
