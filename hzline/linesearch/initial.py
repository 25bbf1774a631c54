"""
    Initial step size of the Hager-Zhang line search, from

    W. W. Hager and H. Zhang (2006) Algorithm 851: CG_DESCENT, a
    conjugate gradient method with guaranteed descent. ACM
    Transactions on Mathematical Software 32: 113-137.

    In step I2 we multiply by psi2 only if the convexity test failed, not if
    the function-value test failed. This prevents going uphill further when
    we already know the value is higher than at alpha=0.
"""
import numpy

from hzline.base import logger

from .wolfe import iterfinitemax

class LineSearchState(object):
    """ The part of an optimizer state the initial step size reads and writes.

        x : current point; s : search direction; x_ls : scratch vector;
        lsr : history of the line search along s;
        f_x, g : value and gradient at x;
        f_x_previous : value at the previous point, nan at the first iteration;
        alpha : step length of the previous iteration;
        mayterminate : set by the initial step size, passed to the line search.
    """
    def __init__(self, x, s, x_ls, lsr, f_x=numpy.nan, g=None, f_x_previous=numpy.nan, alpha=numpy.nan):
        self.x = x
        self.s = s
        self.x_ls = x_ls
        self.lsr = lsr
        self.f_x = f_x
        self.g = g
        self.f_x_previous = f_x_previous
        self.alpha = alpha
        self.mayterminate = False

    def __repr__(self):
        return "LineSearchState(alpha=%g, mayterminate=%s, f_x=%g, f_x_previous=%g)" % (
            self.alpha, self.mayterminate, self.f_x, self.f_x_previous)

class InitialHagerZhang(object):
    """ Initial step size of the Hager-Zhang line search.

        If alpha0 is nan, procedure I0 is used at the first iteration,
        otherwise I1-I2 is used, starting from alpha0.

        Parameters
        ----------
        psi0 : float
            scale of the step of I0, relative to |x| / |g|.
        psi1 : float
            the quadratic fit of I1 is tested at psi1 * alpha.
        psi2 : float
            expansion factor when the quadratic fit is not convex.
        psi3 : float
            shrink factor after a non-finite value.
        alphamax : float
            maximum step length.
        alpha0 : float
            initial step length guess; nan to calculate it with I0.
    """
    initial_defaults = {
        'psi0' : 0.01,
        'psi1' : 0.2,
        'psi2' : 2.0,
        'psi3' : 0.1,
        'alphamax' : numpy.inf,
        'alpha0' : 1.0,
    }

    def __init__(self, **kwargs):
        defaults = type(self).initial_defaults
        unknown = sorted(set(kwargs) - set(defaults))
        if unknown:
            raise TypeError("unknown parameters for %s: %s" % (type(self).__name__, ", ".join(unknown)))

        self.__dict__.update(defaults)
        self.__dict__.update(kwargs)
        self.check()

    def check(self):
        if not self.psi0 > 0:
            raise ValueError("psi0 must be positive, got %g" % self.psi0)
        if not self.psi1 > 0:
            raise ValueError("psi1 must be positive, got %g" % self.psi1)
        if not self.psi2 > 1.0:
            raise ValueError("psi2 is an expansion factor, must be > 1, got %g" % self.psi2)
        if not 0.0 < self.psi3 < 1.0:
            raise ValueError("psi3 is a shrink factor, must be in (0, 1), got %g" % self.psi3)
        if not self.alphamax > 0:
            raise ValueError("alphamax must be positive, got %g" % self.alphamax)
        if not (numpy.isnan(self.alpha0) or 0 < self.alpha0 < numpy.inf):
            raise ValueError("alpha0 must be positive and finite or nan, got %g" % self.alpha0)

    def __setattr__(self, name, value):
        raise AttributeError("%s is immutable" % type(self).__name__)

    def __delattr__(self, name):
        raise AttributeError("%s is immutable" % type(self).__name__)

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__,
            ", ".join("%s=%r" % (key, getattr(self, key)) for key in sorted(type(self).initial_defaults)))

    def __call__(self, state, objective):
        """ Sets state.alpha and state.mayterminate for the next line search. """
        if numpy.isnan(state.f_x_previous) and numpy.isnan(self.alpha0):
            # first iteration, and no initial step size from the user.
            state.alpha = initial_alpha_I0(state.x, state.g, state.f_x, self.psi0, vs=objective.vs)
            state.mayterminate = False
        else:
            alpha = state.alpha
            if numpy.isnan(alpha):
                alpha = self.alpha0
            state.alpha, state.mayterminate = initial_alpha_I12(alpha,
                    objective, state.x, state.s, state.x_ls, state.lsr,
                    self.psi1, self.psi2, self.psi3, self.alphamax)
        return state.alpha

def estimate_initial_alpha(previous_alpha, objective, x, s, scratch, history, config=None, g=None, f_x=None):
    """ The first trial step of a line search.

        Parameters
        ----------
        previous_alpha : float
            the step of the previous line search; nan at the first iteration.
            Otherwise it must be positive and finite (ValueError).
        history : LineSearchResults
            holding the origin of the ray.
        g, f_x : gradient and value at x; used by I0, and evaluated
            if not given.

        Returns
        -------
        alpha, mayterminate
    """
    if config is None:
        config = InitialHagerZhang()

    if numpy.isnan(previous_alpha):
        if numpy.isnan(config.alpha0):
            if g is None or f_x is None:
                f_x, g = objective.value_gradient(x)
            return initial_alpha_I0(x, g, f_x, config.psi0, vs=objective.vs), False
        previous_alpha = config.alpha0

    return initial_alpha_I12(previous_alpha, objective, x, s, scratch, history,
            config.psi1, config.psi2, config.psi3, config.alphamax)

def initial_alpha_I12(alpha, objective, x, s, xtmp, lsr,
        psi1=0.2, psi2=2.0, psi3=0.1, alphamax=numpy.inf):
    """ Pick the initial step size (HZ, I1-I2).

        Returns
        -------
        alpha, mayterminate : mayterminate is True if alpha is the minimum
            of a convex quadratic fit; (0, True) if no finite value is found.

        Raises
        ------
        ValueError : if the previous step alpha is not positive and finite,
            e.g. the 0 returned by a line search that found no finite point.
    """
    if not (alpha > 0 and numpy.isfinite(alpha)):
        raise ValueError("previous step must be positive and finite, got alpha = %g" % alpha)

    vs = objective.vs

    # Prevent values of xtmp that are likely to make the objective infinite
    nfinitemax = iterfinitemax(x)

    phi0 = lsr.value[0]
    dphi0 = lsr.slope[0]

    alphatest = min(psi1 * alpha, alphamax)

    xtmp = vs.copyto(xtmp, vs.addmul(x, s, alphatest))
    phitest = objective.value(xtmp)

    iterfinite = 1
    while not numpy.isfinite(phitest):
        alphatest = psi3 * alphatest
        xtmp = vs.copyto(xtmp, vs.addmul(x, s, alphatest))
        phitest = objective.value(xtmp)
        lsr.nfailures += 1
        iterfinite += 1
        if iterfinite >= nfinitemax:
            logger.warning("Failed to achieve finite test value; alphatest = %g", alphatest)
            return 0.0, True

    # quadratic fit
    a = ((phitest - phi0) / alphatest - dphi0) / alphatest
    logger.debug("quadfit: alphatest = %g, phi0 = %g, phitest = %g, quadcoef = %g",
            alphatest, phi0, phitest, a)

    mayterminate = False
    if numpy.isfinite(a) and a > 0 and phitest <= phi0:
        # if convex, choose minimum of quadratic
        alpha = -dphi0 / 2 / a
        if alpha == 0:
            raise RuntimeError("alpha is zero. dphi0 = %g, phi0 = %g, phitest = %g, alphatest = %g, a = %g"
                    % (dphi0, phi0, phitest, alphatest, a))
        if alpha <= alphamax:
            mayterminate = True
        else:
            alpha = alphamax
            mayterminate = False
        logger.debug("alpha guess (quadratic): %g, (mayterminate = %s)", alpha, mayterminate)
    else:
        if phitest > phi0:
            alpha = alphatest
        else:
            # if not convex, expand the interval
            alpha *= psi2

    alpha = min(alphamax, alpha)
    logger.debug("alpha guess (expand): %g", alpha)
    return alpha, mayterminate

def initial_alpha_I0(x, g, f_x, psi0=0.01, vs=None):
    """ Generate initial guess for step size (HZ, I0). """
    alpha = 1.0
    gmax = numpy.max(numpy.abs(g))
    if gmax != 0:
        xmax = numpy.max(numpy.abs(x))
        if xmax != 0:
            alpha = psi0 * xmax / gmax
        elif f_x != 0:
            if vs is None:
                gnorm = numpy.linalg.norm(numpy.ravel(g))
            else:
                gnorm = vs.dot(g, g) ** 0.5
            alpha = psi0 * abs(f_x) / gnorm
    return alpha
