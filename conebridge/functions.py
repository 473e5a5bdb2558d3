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
"""Affine functions of model variables.

The representation follows Pyomo's StandardRepn: a scalar function is a
constant plus parallel tuples of linear coefficients and variables.
Terms are not merged on construction; :py:meth:`canonical` merges
duplicates and drops zero coefficients.

The module level helpers (:py:func:`eachscalar`, :py:func:`stack`,
:py:func:`vcat`) accept both symbolic functions and plain numeric
sequences, so that the same mapping code can transform constraint
functions and the values (primal, dual, start) attached to them.
"""

from pyomo.common.numeric_types import native_numeric_types

from conebridge.errors import InvariantViolationError
from conebridge.index import VariableIndex


def _as_scalar_operand(other):
    if isinstance(other, ScalarAffineFunction):
        return other
    if type(other) is VariableIndex:
        return ScalarAffineFunction((1,), (other,))
    if type(other) in native_numeric_types:
        return ScalarAffineFunction(constant=other)
    return NotImplemented


def _format_term(coef, var, first):
    if coef < 0:
        sign = '- ' if first else ' - '
        coef = -coef
    else:
        sign = '' if first else ' + '
    if var is None:
        return '%s%s' % (sign, coef)
    if coef == 1:
        return '%sv%s' % (sign, var.value)
    return '%s%s*v%s' % (sign, coef, var.value)


class ScalarAffineFunction(object):
    """A scalar affine function ``sum(linear_coefs[i]*linear_vars[i]) + constant``"""

    __slots__ = ('linear_coefs', 'linear_vars', 'constant')

    def __init__(self, linear_coefs=(), linear_vars=(), constant=0):
        self.linear_coefs = tuple(linear_coefs)
        self.linear_vars = tuple(linear_vars)
        if len(self.linear_coefs) != len(self.linear_vars):
            raise ValueError(
                "ScalarAffineFunction received %s coefficients for %s variables"
                % (len(self.linear_coefs), len(self.linear_vars))
            )
        self.constant = constant

    def variables(self):
        """Return the distinct variables of the function, in term order"""
        seen = {}
        for v in self.linear_vars:
            seen.setdefault(v, None)
        return list(seen)

    def coefficient(self, var):
        """Return the (merged) coefficient of ``var``"""
        return sum(c for c, v in zip(self.linear_coefs, self.linear_vars) if v == var)

    def canonical(self):
        """Return an equivalent function with one term per variable.

        Terms are ordered by variable index and terms whose merged
        coefficient is exactly zero are dropped.
        """
        coefs = {}
        for c, v in zip(self.linear_coefs, self.linear_vars):
            coefs[v] = coefs.get(v, 0) + c
        linear_vars = sorted(v for v, c in coefs.items() if c != 0)
        return ScalarAffineFunction(
            [coefs[v] for v in linear_vars], linear_vars, self.constant
        )

    def evaluate(self, values):
        """Evaluate the function given a mapping from variables to values"""
        ans = self.constant
        for c, v in zip(self.linear_coefs, self.linear_vars):
            ans += c * values[v]
        return ans

    def _combine(self, other, sign):
        other = _as_scalar_operand(other)
        if other is NotImplemented:
            return NotImplemented
        if sign > 0:
            other_coefs = other.linear_coefs
        else:
            other_coefs = tuple(-c for c in other.linear_coefs)
        return ScalarAffineFunction(
            self.linear_coefs + other_coefs,
            self.linear_vars + other.linear_vars,
            self.constant + sign * other.constant,
        )

    def __add__(self, other):
        return self._combine(other, 1)

    def __radd__(self, other):
        return self._combine(other, 1)

    def __sub__(self, other):
        return self._combine(other, -1)

    def __rsub__(self, other):
        return (-self)._combine(other, 1)

    def __neg__(self):
        return ScalarAffineFunction(
            [-c for c in self.linear_coefs], self.linear_vars, -self.constant
        )

    def __mul__(self, other):
        if type(other) not in native_numeric_types:
            return NotImplemented
        return ScalarAffineFunction(
            [c * other for c in self.linear_coefs],
            self.linear_vars,
            self.constant * other,
        )

    __rmul__ = __mul__

    def __truediv__(self, other):
        if type(other) not in native_numeric_types:
            return NotImplemented
        return ScalarAffineFunction(
            [c / other for c in self.linear_coefs],
            self.linear_vars,
            self.constant / other,
        )

    def __eq__(self, other):
        other = _as_scalar_operand(other)
        if other is NotImplemented:
            return NotImplemented
        a = self.canonical()
        b = other.canonical()
        return (
            a.linear_vars == b.linear_vars
            and a.linear_coefs == b.linear_coefs
            and a.constant == b.constant
        )

    def __ne__(self, other):
        ans = self.__eq__(other)
        if ans is NotImplemented:
            return ans
        return not ans

    __hash__ = None

    def __str__(self):
        terms = [
            _format_term(c, v, not i)
            for i, (c, v) in enumerate(zip(self.linear_coefs, self.linear_vars))
        ]
        if self.constant or not terms:
            terms.append(_format_term(self.constant, None, not terms))
        return ''.join(terms)

    def __repr__(self):
        return 'ScalarAffineFunction(%r, %r, %r)' % (
            list(self.linear_coefs),
            list(self.linear_vars),
            self.constant,
        )


class VectorOfVariables(object):
    """A vector function whose rows are single variables"""

    __slots__ = ('variables',)

    def __init__(self, variables):
        self.variables = tuple(variables)
        for v in self.variables:
            if type(v) is not VariableIndex:
                raise TypeError(
                    "VectorOfVariables expects VariableIndex objects (received %s)"
                    % (type(v).__name__,)
                )

    def __len__(self):
        return len(self.variables)

    def __iter__(self):
        return iter(self.variables)

    def as_affine(self):
        return VectorAffineFunction(
            ScalarAffineFunction((1,), (v,)) for v in self.variables
        )

    def __eq__(self, other):
        if not isinstance(other, VectorOfVariables):
            return NotImplemented
        return self.variables == other.variables

    def __ne__(self, other):
        ans = self.__eq__(other)
        if ans is NotImplemented:
            return ans
        return not ans

    __hash__ = None

    def __repr__(self):
        return 'VectorOfVariables(%r)' % (list(self.variables),)


class VectorAffineFunction(object):
    """An ordered sequence of :py:class:`ScalarAffineFunction` rows"""

    __slots__ = ('rows',)

    def __init__(self, rows):
        _rows = []
        for r in rows:
            _r = _as_scalar_operand(r)
            if _r is NotImplemented:
                raise TypeError(
                    "Cannot use an object of type %s as a row of a "
                    "VectorAffineFunction" % (type(r).__name__,)
                )
            _rows.append(_r)
        self.rows = tuple(_rows)

    @property
    def output_dimension(self):
        return len(self.rows)

    def __len__(self):
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return VectorAffineFunction(self.rows[idx])
        return self.rows[idx]

    def variables(self):
        seen = {}
        for r in self.rows:
            for v in r.linear_vars:
                seen.setdefault(v, None)
        return list(seen)

    def canonical(self):
        return VectorAffineFunction(r.canonical() for r in self.rows)

    def evaluate(self, values):
        return [r.evaluate(values) for r in self.rows]

    def _elementwise(self, other, op):
        if isinstance(other, VectorOfVariables):
            other = other.as_affine()
        if isinstance(other, VectorAffineFunction):
            other_rows = other.rows
        else:
            try:
                other_rows = list(other)
            except TypeError:
                return NotImplemented
        if len(other_rows) != len(self.rows):
            raise ValueError(
                "Cannot combine vector functions of dimensions %s and %s"
                % (len(self.rows), len(other_rows))
            )
        return VectorAffineFunction(op(a, b) for a, b in zip(self.rows, other_rows))

    def __add__(self, other):
        return self._elementwise(other, lambda a, b: a + b)

    def __radd__(self, other):
        return self._elementwise(other, lambda a, b: b + a)

    def __sub__(self, other):
        return self._elementwise(other, lambda a, b: a - b)

    def __rsub__(self, other):
        return self._elementwise(other, lambda a, b: b - a)

    def __neg__(self):
        return VectorAffineFunction(-r for r in self.rows)

    def __mul__(self, other):
        if type(other) not in native_numeric_types:
            return NotImplemented
        return VectorAffineFunction(r * other for r in self.rows)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if type(other) not in native_numeric_types:
            return NotImplemented
        return VectorAffineFunction(r / other for r in self.rows)

    def __eq__(self, other):
        if isinstance(other, VectorOfVariables):
            other = other.as_affine()
        if not isinstance(other, VectorAffineFunction):
            return NotImplemented
        return len(self.rows) == len(other.rows) and all(
            a == b for a, b in zip(self.rows, other.rows)
        )

    def __ne__(self, other):
        ans = self.__eq__(other)
        if ans is NotImplemented:
            return ans
        return not ans

    __hash__ = None

    def __str__(self):
        return '[' + ', '.join(str(r) for r in self.rows) + ']'

    def __repr__(self):
        return 'VectorAffineFunction(%r)' % (list(self.rows),)


_symbolic_scalar_types = (ScalarAffineFunction, VariableIndex)
_vector_function_types = (VectorAffineFunction, VectorOfVariables)


def is_symbolic(obj):
    """Return True if ``obj`` is a function rather than numeric data"""
    return isinstance(obj, _symbolic_scalar_types + _vector_function_types)


def eachscalar(f):
    """Return the rows of a vector function (or the entries of a numeric
    sequence) as a list"""
    if isinstance(f, VectorAffineFunction):
        return list(f.rows)
    if isinstance(f, VectorOfVariables):
        return [ScalarAffineFunction((1,), (v,)) for v in f.variables]
    return list(f)


def stack(rows):
    """Assemble rows into a vector.

    Returns a :py:class:`VectorAffineFunction` if any row is symbolic and
    a list of numbers otherwise.
    """
    rows = list(rows)
    if any(isinstance(r, _symbolic_scalar_types) for r in rows):
        return VectorAffineFunction(rows)
    return rows


def vcat(*parts):
    """Vertically concatenate scalars and vectors"""
    rows = []
    for p in parts:
        if isinstance(p, _vector_function_types) or hasattr(p, '__len__'):
            rows.extend(eachscalar(p))
        else:
            rows.append(p)
    return stack(rows)


def as_vector_affine(f):
    """Return ``f`` as a :py:class:`VectorAffineFunction`"""
    if isinstance(f, VectorAffineFunction):
        return f
    if isinstance(f, VectorOfVariables):
        return f.as_affine()
    raise TypeError(
        "Expected a vector function; received an object of type %s"
        % (type(f).__name__,)
    )


def remove_variables(f, variables, tol=None):
    """Return ``f`` with every term in ``variables`` removed.

    If ``tol`` is not None, the removed variables are expected to have
    (merged) coefficients that vanish: a coefficient larger than ``tol``
    in magnitude raises :py:class:`InvariantViolationError`.
    """
    if isinstance(f, _vector_function_types):
        return VectorAffineFunction(
            remove_variables(r, variables, tol) for r in eachscalar(f)
        )
    drop = set(variables)
    f = f.canonical()
    coefs = []
    linear_vars = []
    for c, v in zip(f.linear_coefs, f.linear_vars):
        if v not in drop:
            coefs.append(c)
            linear_vars.append(v)
        elif tol is not None and abs(c) > tol:
            raise InvariantViolationError(
                "Variable %s was expected to cancel out of the recovered "
                "function but has coefficient %s" % (v, c)
            )
    return ScalarAffineFunction(coefs, linear_vars, f.constant)


def convert_approx(function_type, f):
    """Convert a vector function to ``function_type`` where that is exact.

    A :py:class:`VectorAffineFunction` is converted to
    :py:class:`VectorOfVariables` if every row is a single variable with
    unit coefficient and no constant.  Otherwise the affine function is
    returned.
    """
    if function_type is VectorOfVariables:
        variables = []
        for r in eachscalar(f):
            r = r.canonical()
            if r.constant != 0 or r.linear_coefs != (1,):
                break
            variables.append(r.linear_vars[0])
        else:
            return VectorOfVariables(variables)
    return as_vector_affine(f)
