"""

    Data model

    An ``Objective`` is defined on a ``VectorSpace``; the line search restricts it
    to a ray ``x + alpha * s`` and only ever sees it through ``value`` and
    ``value_gradient``.

    A ``LineSearchResults`` is the history of evaluated points along one ray.
    The line search algorithms share it and refer to entries by index.

    Non-finite values (inf / nan) are data, not errors: an objective shall return
    them for points outside of its feasible region, and the line search recovers
    by shrinking the step.
"""
import logging

import numpy

logger = logging.getLogger("hzline")
_logging_handler = logging.StreamHandler()
logger.addHandler(_logging_handler)

class LineSearchError(Exception):
    pass

class ConvergenceFailure(LineSearchError):
    """ The line search did not find an acceptable step within linesearchmax iterations.

        alpha is the lower end of the last bracket, which is always an admissible
        (finite, not ascending) step; lsr is the complete history of the search.
    """
    def __init__(self, message, alpha, lsr):
        LineSearchError.__init__(self, message)
        self.message = message
        self.alpha = alpha
        self.lsr = lsr

class InvalidDescentDirection(LineSearchError):
    def __init__(self, message, dphia, dphib):
        LineSearchError.__init__(self, message)
        self.message = message
        self.dphia = dphia
        self.dphib = dphib

class VectorSpace(object):
    def __init__(self, addmul=None, dot=None, copyto=None):
        if addmul:
            self.addmul = addmul
        if dot:
            self.dot = dot
        if copyto:
            self.copyto = copyto

    def addmul(self, a, b, c):
        """ Defines the addmul operation.

            either subclass this method or supply a method in the constructor, __init__

            addmul(a, b, c) := a + b * c

            The result shall be a vector like b; c is a scalar step length
            in the line search.
        """
        raise NotImplementedError

    def dot(self, a, b):
        """ defines the inner product operation.

            dot(a, b) := a @ b

            The result shall be a scalar floating point number.
        """
        raise NotImplementedError

    def copyto(self, dst, src):
        """ Stores src into the scratch vector dst, and returns the stored vector.

            The scratch vector is owned by a single line search; it is overwritten
            for every trial step. Immutable vectors are not stored, src is returned
            instead.
        """
        raise NotImplementedError

class Objective(object):
    """ The objective function, as seen by the line search.

        Parameters
        ----------
        objective : callable f(x)
            returns a scalar; inf or nan for infeasible x.
        gradient : callable g(x)
            returns the gradient as a vector of the same space as x.
        value_and_gradient : callable fg(x), optional
            returns (f(x), g(x)) in one call; used in place of objective and gradient
            by value_gradient when given.
        vs : VectorSpace
            the vector space of x; default is real_vector_space.

        fev and gev count the number of evaluations of the objective and the gradient.
    """
    def __init__(self, objective, gradient=None, value_and_gradient=None, vs=None):
        if vs is None:
            from .vectorspace import real_vector_space
            vs = real_vector_space

        if not isinstance(vs, VectorSpace):
            raise TypeError("expecting a VectorSpace object for vs, got type(vs) = %s" % repr(type(vs)))

        if gradient is None and value_and_gradient is None:
            raise ValueError("either gradient or value_and_gradient must be given")

        self.vs = vs
        self._objective = objective
        self._gradient = gradient
        self._value_and_gradient = value_and_gradient
        self.fev = 0
        self.gev = 0

    def dot(self, a, b):
        return self.vs.dot(a, b)

    def value(self, x):
        self.fev = self.fev + 1
        return self._objective(x)

    def value_gradient(self, x):
        """ returns (f(x), g(x)); g(x) is None if f(x) is not finite. """
        if self._value_and_gradient is not None:
            self.fev = self.fev + 1
            self.gev = self.gev + 1
            return self._value_and_gradient(x)

        y = self.value(x)
        if not numpy.isfinite(y):
            return y, None

        self.gev = self.gev + 1
        return y, self._gradient(x)

    def __repr__(self):
        return "Objective(fev=%d, gev=%d)" % (self.fev, self.gev)
