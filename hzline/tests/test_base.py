import pytest
import numpy
from numpy.testing import assert_allclose

from hzline.base import Objective, VectorSpace
from hzline.base import ConvergenceFailure, InvalidDescentDirection, LineSearchError
from hzline.vectorspace import real_vector_space
from hzline.history import LineSearchResults

def quad(x):
    return ((x - 0.5) ** 2).sum()

def quad_der(x):
    return (x - 0.5) * 2

def test_objective():
    problem = Objective(quad, quad_der)
    x = numpy.zeros(2)

    assert_allclose(problem.value(x), 0.5)
    y, g = problem.value_gradient(x)
    assert_allclose(y, 0.5)
    assert_allclose(g, -1.0)
    assert problem.fev == 2
    assert problem.gev == 1
    assert problem.dot(g, g) == 2.0
    assert 'fev=2' in repr(problem)

def test_objective_value_and_gradient():
    problem = Objective(quad, value_and_gradient=lambda x: (quad(x), quad_der(x)))
    y, g = problem.value_gradient(numpy.zeros(2))
    assert_allclose(y, 0.5)
    assert_allclose(g, -1.0)
    assert problem.fev == 1
    assert problem.gev == 1

def test_objective_nonfinite():
    def gradient(x):
        raise AssertionError("gradient shall not be evaluated")

    problem = Objective(lambda x: numpy.nan, gradient)
    y, g = problem.value_gradient(numpy.zeros(2))
    assert numpy.isnan(y)
    assert g is None
    assert problem.gev == 0

def test_objective_bad_args():
    with pytest.raises(ValueError):
        Objective(quad)

    with pytest.raises(TypeError):
        Objective(quad, quad_der, vs=object())

def test_vectorspace():
    vs = real_vector_space
    a = numpy.array([1.0, 2.0])
    b = numpy.array([3.0, 4.0])

    assert_allclose(vs.addmul(a, b, 2.0), [7.0, 10.0])
    assert vs.dot(a, b) == 11.0
    assert vs.dot(2.0, 3.0) == 6.0
    assert vs.addmul(1.0, 2.0, 3.0) == 7.0

def test_vectorspace_copyto():
    vs = real_vector_space
    dst = numpy.zeros(2)
    r = vs.copyto(dst, numpy.array([1.0, 2.0]))
    assert r is dst
    assert_allclose(dst, [1.0, 2.0])

    # immutable scratch
    assert vs.copyto(None, 2.0) == 2.0
    assert vs.copyto(1.0, 2.0) == 2.0

def test_vectorspace_custom():
    vs = VectorSpace(addmul=lambda a, b, c: a + b * c,
                     dot=lambda a, b: float(numpy.vdot(a, b)),
                     copyto=lambda dst, src: src)
    problem = Objective(quad, quad_der, vs=vs)
    assert problem.dot(numpy.ones(2), numpy.ones(2)) == 2.0

    with pytest.raises(NotImplementedError):
        VectorSpace().dot(1.0, 1.0)

def test_history():
    lsr = LineSearchResults.origin(1.0, -1.0)
    assert len(lsr) == 1
    assert lsr[0] == (0.0, 1.0, -1.0)
    assert lsr.nfailures == 0

    i = lsr.push(0.5, 0.5, numpy.nan)
    assert i == 1
    assert lsr.last == 1
    assert lsr.alpha == [0.0, 0.5]
    assert lsr[1][:2] == (0.5, 0.5)
    assert numpy.isnan(lsr.slope[-1])
    assert 'nfailures=0' in repr(lsr)

    with pytest.raises(ValueError):
        LineSearchResults(alpha=[0.0], value=[], slope=[])

def test_exceptions():
    lsr = LineSearchResults.origin(1.0, -1.0)
    e = ConvergenceFailure("failed", 0.5, lsr)
    assert isinstance(e, LineSearchError)
    assert e.alpha == 0.5
    assert e.lsr is lsr
    assert str(e) == "failed"

    e = InvalidDescentDirection("not descent", 1.0, 2.0)
    assert isinstance(e, LineSearchError)
    assert (e.dphia, e.dphib) == (1.0, 2.0)
