from hzline.base import Objective
from scipy.optimize import rosen, rosen_der
import numpy

class RayProblem(Objective):
    """
        a one dimensional problem, phi(x[0]), to be searched along s = [1]
        from x = [0]. Every evaluated point is recorded in `evaluated`.
    """
    def __init__(self, phi, dphi):
        self.evaluated = []

        def objective(x):
            self.evaluated.append(float(x[0]))
            return phi(x[0])

        def gradient(x):
            return numpy.array([dphi(x[0])])

        Objective.__init__(self, objective=objective, gradient=gradient)

        self.phi = phi
        self.dphi = dphi

    def start(self):
        """ x, s and a scratch vector for a search along the ray """
        return numpy.zeros(1), numpy.ones(1), numpy.zeros(1)

class QuadraticProblem(RayProblem):
    """ phi(alpha) = (alpha - xmin) ** 2 """
    def __init__(self, xmin=2.0):
        RayProblem.__init__(self,
            phi=lambda a: (a - xmin) ** 2,
            dphi=lambda a: 2 * (a - xmin))
        self.xmin = xmin

class BarrierProblem(RayProblem):
    """ quadratic with minimum at xmin; inf beyond wall. """
    def __init__(self, xmin=0.5, wall=1.0):
        def phi(a):
            if a > wall: return numpy.inf
            return (a - xmin) ** 2

        def dphi(a):
            if a > wall: return numpy.nan
            return 2 * (a - xmin)

        RayProblem.__init__(self, phi=phi, dphi=dphi)
        self.xmin = xmin
        self.wall = wall

class CubicHumpProblem(RayProblem):
    """
        phi(alpha) = - alpha (alpha - 1) (alpha - 2)

        decreases to a local minimum at 1 - 1 / sqrt(3),
        crests at 1 + 1 / sqrt(3), and then decreases forever.
    """
    def __init__(self):
        RayProblem.__init__(self,
            phi=lambda a: -a ** 3 + 3 * a ** 2 - 2 * a,
            dphi=lambda a: -3 * a ** 2 + 6 * a - 2)

class RosenProblem(Objective):
    """ RosenBrock problem in n dimensions. """
    def __init__(self):
        Objective.__init__(self, objective=rosen, gradient=rosen_der)
