"""
    Conjugate gradient line search from

    W. W. Hager and H. Zhang (2006) Algorithm 851: CG_DESCENT, a
    conjugate gradient method with guaranteed descent. ACM
    Transactions on Mathematical Software 32: 113-137.

    Comments such as "HZ, stage X" or "HZ, eq Y" refer to the paper.

    Differences from the paper:

    - the Wolfe conditions are checked only after alpha is generated by
      quadratic interpolation or secant interpolation, not when alpha is
      generated by bisection or expansion. This increases the likelihood
      that alpha is a good approximation of the minimum.

    - non-finite function values are handled by shrinking the step.

    - a maximum step alphamax is supported. This allows the line search
      to be used in constrained minimization when the distance to the
      disallowed region along the ray is known. alphamax shall be the largest
      step for which a finite value is returned. (Infeasible points can also be
      reported by returning inf or nan, it is only less efficient.)

    The algorithms share a LineSearchResults and refer to its entries by index.
    A bracket (ia, ib) satisfies

        slope[ia] < 0, value[ia] <= philim, alpha[ib] > alpha[ia],

    and either slope[ib] >= 0, or slope[ib] < 0 and value[ib] > philim.

"""
import logging

import numpy

from hzline.base import logger
from hzline.base import ConvergenceFailure, InvalidDescentDirection

from .wolfe import linefunc, satisfies_wolfe, eps, iterfinitemax

# Values taken from HZ paper (Nocedal & Wright recommends 0.01?)
DEFAULTDELTA = 0.1
DEFAULTSIGMA = 0.9

def _isfinite(*args):
    return all(numpy.isfinite(a) for a in args)

def _trace(monitor, event, **info):
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s: %s", event, ", ".join("%s = %s" % item for item in info.items()))
    if monitor is not None:
        monitor(event, info)

class HagerZhang(object):
    """ Parameters of the Hager-Zhang line search.

        The object is immutable; calling it runs a line search, see hagerzhang.

        Parameters
        ----------
        delta : float
            sufficient decrease coefficient (c_1 in the Wolfe conditions)
        sigma : float
            curvature coefficient (c_2 in the Wolfe conditions);
            0.1 is recommended for gradient descent.
        alphamax : float
            maximum step length.
        rho : float
            expansion factor of the initial bracketing.
        epsilon : float
            relative tolerance on the value at alpha=0 for the approximate
            Wolfe conditions.
        gamma : float
            a secant step that shrinks the bracket by less than gamma is followed
            by bisection.
        linesearchmax : int
            maximum number of bracketing and refinement iterations.
            With a finite alphamax, a ray still descending beyond alphamax
            halves the distance to alphamax once per iteration, and needs
            about -log2(eps) of them (52 in double precision) to stop there;
            raise linesearchmax above that for such problems, or the search
            ends in ConvergenceFailure.
        psi3 : float
            shrink factor of the step after a non-finite value.
    """
    linesearch_defaults = {
        'delta' : DEFAULTDELTA,
        'sigma' : DEFAULTSIGMA,
        'alphamax' : numpy.inf,
        'rho' : 5.0,
        'epsilon' : 1e-6,
        'gamma' : 0.66,
        'linesearchmax' : 50,
        'psi3' : 0.1,
    }

    def __init__(self, **kwargs):
        defaults = type(self).linesearch_defaults
        unknown = sorted(set(kwargs) - set(defaults))
        if unknown:
            raise TypeError("unknown parameters for %s: %s" % (type(self).__name__, ", ".join(unknown)))

        self.__dict__.update(defaults)
        self.__dict__.update(kwargs)
        self.check()

    def check(self):
        if not 0.0 < self.delta < 0.5:
            raise ValueError("delta must be in (0, 0.5), got %g" % self.delta)
        if not self.delta <= self.sigma < 1.0:
            raise ValueError("sigma must be in [delta, 1), got %g" % self.sigma)
        if not self.alphamax > 0:
            raise ValueError("alphamax must be positive, got %g" % self.alphamax)
        if not self.rho > 1.0:
            raise ValueError("rho is an expansion factor, must be > 1, got %g" % self.rho)
        if not self.epsilon >= 0:
            raise ValueError("epsilon must be non-negative, got %g" % self.epsilon)
        if not 0.0 < self.gamma < 1.0:
            raise ValueError("gamma must be in (0, 1), got %g" % self.gamma)
        if self.linesearchmax < 1:
            raise ValueError("linesearchmax must be >= 1, got %d" % self.linesearchmax)
        if not 0.0 < self.psi3 < 1.0:
            raise ValueError("psi3 is a shrink factor, must be in (0, 1), got %g" % self.psi3)

    def __setattr__(self, name, value):
        raise AttributeError("%s is immutable" % type(self).__name__)

    def __delattr__(self, name):
        raise AttributeError("%s is immutable" % type(self).__name__)

    def parameters(self):
        return dict((key, getattr(self, key)) for key in type(self).linesearch_defaults)

    def __call__(self, objective, x, s, xtmp, lsr, c, mayterminate, monitor=None):
        return hagerzhang(objective, x, s, xtmp, lsr, c, mayterminate,
                    monitor=monitor, **self.parameters())

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__,
            ", ".join("%s=%r" % item for item in sorted(self.parameters().items())))

def search(objective, x, s, scratch, history, initial_alpha, mayterminate, config=None, monitor=None):
    """ Finds a step along s from x that satisfies the (approximate) Wolfe conditions.

        history shall contain only the origin of the ray, with finite value and slope;
        see hagerzhang for the rest of the parameters.
    """
    if config is None:
        config = HagerZhang()
    return config(objective, x, s, scratch, history, initial_alpha, mayterminate, monitor=monitor)

def hagerzhang(objective, x, s, xtmp, lsr, c, mayterminate,
        delta=DEFAULTDELTA,
        sigma=DEFAULTSIGMA,
        alphamax=numpy.inf,
        rho=5.0,
        epsilon=1e-6,
        gamma=0.66,
        linesearchmax=50,
        psi3=0.1,
        monitor=None):
    """ The Hager-Zhang line search.

        Parameters
        ----------
        objective : Objective
            the objective function.
        x : vector
            origin of the ray.
        s : vector
            search direction; must be a descent direction.
        xtmp : vector
            scratch vector for the trial points, overwritten.
        lsr : LineSearchResults
            history of the search, holding only the origin of the ray.
            All evaluated points are appended.
        c : float
            initial step, 0 < c <= alphamax.
        mayterminate : bool
            True if c is from quadratic interpolation (see initial_alpha_I12);
            c is then accepted immediately if it satisfies the Wolfe conditions.
        monitor : callable monitor(event, info), optional
            called at the trace points of the search.

        Returns
        -------
        alpha : the step length. 0 if no finite value can be found along the ray.

        Raises
        ------
        ConvergenceFailure : no acceptable step after linesearchmax iterations.
        InvalidDescentDirection : s is not a direction of descent.
        ValueError : the history or c is invalid.
    """
    # Prevent values of xtmp that are likely to make the objective infinite
    nfinitemax = iterfinitemax(x)
    machine_eps = eps(x)

    _trace(monitor, 'linesearch', c=c, mayterminate=mayterminate)

    if len(lsr) != 1 or lsr.alpha[0] != 0:
        raise ValueError("the history must hold only the origin of the ray (alpha = 0), got %s" % repr(lsr))

    phi0 = lsr.value[0]
    dphi0 = lsr.slope[0]
    if not _isfinite(phi0, dphi0):
        raise ValueError("Initial value and slope must be finite")

    philim = phi0 + epsilon * abs(phi0)

    if not c > 0:
        raise ValueError("initial step must be positive, got c = %g" % c)
    if not (numpy.isfinite(c) and c <= alphamax):
        raise ValueError("initial step must be finite and no greater than alphamax = %g, got c = %g" % (alphamax, c))

    phic, dphic = linefunc(objective, x, s, c, xtmp)
    iterfinite = 1
    while not _isfinite(phic, dphic) and iterfinite < nfinitemax:
        mayterminate = False
        lsr.nfailures += 1
        iterfinite += 1
        c *= psi3
        phic, dphic = linefunc(objective, x, s, c, xtmp)

    if not _isfinite(phic, dphic):
        logger.warning("Failed to achieve finite new evaluation point, using alpha=0")
        return 0.0

    lsr.push(c, phic, dphic)

    # If c was generated by quadratic interpolation, check whether it
    # satisfies the Wolfe conditions
    if mayterminate and satisfies_wolfe(c, phic, dphic, phi0, dphi0, philim, delta, sigma):
        _trace(monitor, 'done', alpha=c, reason="Wolfe conditions satisfied on the initial step")
        return c

    # Initial bracketing step (HZ, stages B0-B3)
    isbracketed = False
    ia = 0
    ib = 1
    nit = 1
    cold = -1.0
    while not isbracketed and nit < linesearchmax:
        _trace(monitor, 'bracket', ia=ia, ib=ib, c=c, phic=phic, dphic=dphic)

        if dphic >= 0:
            # We've reached the upward slope, so we have b;
            # examine previous values to find a
            ib = lsr.last
            for i in range(ib - 1, -1, -1):
                if lsr.value[i] <= philim:
                    ia = i
                    break
            isbracketed = True

        elif lsr.value[-1] > philim:
            # The value is higher, but the slope is downward, so we must
            # have crested over the peak. Use bisection.
            ib = lsr.last
            ia = ib - 1
            assert lsr.alpha[ib] == c and lsr.slope[ib] < 0
            ia, ib = bisect(objective, x, s, xtmp, lsr, ia, ib, philim, monitor=monitor)
            isbracketed = True

        else:
            # We're still going downhill, expand the interval and try again
            cold = c
            c *= rho
            if c > alphamax:
                c = (alphamax + cold) / 2
                _trace(monitor, 'bracket', reason="exceeding alphamax, bisecting",
                        alphamax=alphamax, cold=cold, c=c)
                if c == cold or c + machine_eps >= alphamax:
                    _trace(monitor, 'done', alpha=cold, reason="no room below alphamax")
                    return cold

            phic, dphic = linefunc(objective, x, s, c, xtmp)
            iterfinite = 1
            while (not _isfinite(phic, dphic)
                    and c > cold + machine_eps
                    and iterfinite < nfinitemax):
                # the region beyond c is not admissible
                alphamax = c
                lsr.nfailures += 1
                iterfinite += 1
                _trace(monitor, 'bracket', reason="non-finite value, bisecting", cold=cold, c=c)
                c = (cold + c) / 2
                phic, dphic = linefunc(objective, x, s, c, xtmp)

            if not _isfinite(phic, dphic):
                _trace(monitor, 'done', alpha=cold, reason="no finite value beyond cold")
                return cold

            elif dphic < 0 and c == alphamax:
                # We're on the edge of the allowed region, and the
                # value is still decreasing. This can be due to
                # roundoff error in barrier penalties, a barrier
                # coefficient being so small that being eps() away
                # from it still doesn't turn the slope upward, or
                # mistakes in the user's function.
                if iterfinite >= nfinitemax:
                    logger.warning("failed to expand interval to bracket with finite values. "
                                   "If this happens frequently, check your function and gradient. "
                                   "c = %g, alphamax = %g, phic = %g, dphic = %g",
                                   c, alphamax, phic, dphic)
                _trace(monitor, 'done', alpha=c, reason="descending at alphamax")
                return c

            lsr.push(c, phic, dphic)

        nit += 1

    while nit < linesearchmax:
        a = lsr.alpha[ia]
        b = lsr.alpha[ib]
        assert b > a
        _trace(monitor, 'refine', ia=ia, ib=ib, a=a, b=b,
                phia=lsr.value[ia], phib=lsr.value[ib])

        if b - a <= numpy.spacing(b):
            _trace(monitor, 'done', alpha=a, reason="bracket collapsed")
            return a

        iswolfe, iA, iB = secant2(objective, x, s, xtmp, lsr, ia, ib, philim,
                delta=delta, sigma=sigma, monitor=monitor)
        if iswolfe:
            _trace(monitor, 'done', alpha=lsr.alpha[iA], reason="Wolfe conditions satisfied")
            return lsr.alpha[iA]

        A = lsr.alpha[iA]
        B = lsr.alpha[iB]
        assert B > A

        if B - A < gamma * (b - a):
            if (lsr.value[ia] + machine_eps >= lsr.value[ib]
                    and lsr.value[iA] + machine_eps >= lsr.value[iB]):
                # It's so flat, secant didn't do anything useful, time to quit
                _trace(monitor, 'done', alpha=A, reason="secant suggests it's flat")
                return A
            ia = iA
            ib = iB
        else:
            # Secant is converging too slowly, use bisection
            _trace(monitor, 'refine', reason="secant failed, using bisection", A=A, B=B)
            c = (A + B) / 2
            phic, dphic = linefunc(objective, x, s, c, xtmp)
            assert _isfinite(phic, dphic)
            ic = lsr.push(c, phic, dphic)
            ia, ib = update(objective, x, s, xtmp, lsr, iA, iB, ic, philim, monitor=monitor)

        nit += 1

    raise ConvergenceFailure("Linesearch failed to converge, reached maximum iterations %d." % linesearchmax,
            lsr.alpha[ia], lsr)

def secant(a, b, dphia, dphib):
    """ The zero of the secant through the slopes at a and b (HZ, stages S1-S4).

        nan if the two slopes are equal.
    """
    if dphib == dphia:
        return numpy.nan
    return (a * dphib - b * dphia) / (dphib - dphia)

def secant2(objective, x, s, xtmp, lsr, ia, ib, philim,
        delta=DEFAULTDELTA, sigma=DEFAULTSIGMA, monitor=None):
    """ Double secant step on the bracket (ia, ib) (HZ, stages S1-S4).

        Returns
        -------
        iswolfe : True if a point satisfying the Wolfe conditions is found;
                  then iA == iB is its index.
        iA, iB : the new bracket.
    """
    phi0 = lsr.value[0]
    dphi0 = lsr.slope[0]
    a = lsr.alpha[ia]
    b = lsr.alpha[ib]
    dphia = lsr.slope[ia]
    dphib = lsr.slope[ib]

    if not (dphia < 0 and dphib >= 0):
        raise InvalidDescentDirection(
            "Search direction is not a direction of descent; "
            "this error may indicate that user-provided derivatives are inaccurate. "
            "(dphia = %f; dphib = %f)" % (dphia, dphib), dphia, dphib)

    c = secant(a, b, dphia, dphib)
    _trace(monitor, 'secant2', a=a, b=b, c=c)
    assert numpy.isfinite(c)

    phic, dphic = linefunc(objective, x, s, c, xtmp)
    assert _isfinite(phic, dphic)
    ic = lsr.push(c, phic, dphic)

    if satisfies_wolfe(c, phic, dphic, phi0, dphi0, philim, delta, sigma):
        _trace(monitor, 'secant2', reason="first c satisfied Wolfe conditions", c=c)
        return True, ic, ic

    iA, iB = update(objective, x, s, xtmp, lsr, ia, ib, ic, philim, monitor=monitor)
    _trace(monitor, 'secant2', iA=iA, iB=iB, ic=ic)

    A = lsr.alpha[iA]
    B = lsr.alpha[iB]

    if iB == ic:
        # we updated b, make sure we also update a
        c = secant(lsr.alpha[ib], lsr.alpha[iB], lsr.slope[ib], lsr.slope[iB])
    elif iA == ic:
        # we updated a, do it for b too
        c = secant(lsr.alpha[ia], lsr.alpha[iA], lsr.slope[ia], lsr.slope[iA])
    else:
        c = numpy.nan

    if A <= c <= B:
        _trace(monitor, 'secant2', reason="second c", c=c)
        phic, dphic = linefunc(objective, x, s, c, xtmp)
        assert _isfinite(phic, dphic)
        ic = lsr.push(c, phic, dphic)

        if satisfies_wolfe(c, phic, dphic, phi0, dphi0, philim, delta, sigma):
            _trace(monitor, 'secant2', reason="second c satisfied Wolfe conditions", c=c)
            return True, ic, ic

        iA, iB = update(objective, x, s, xtmp, lsr, iA, iB, ic, philim, monitor=monitor)

    _trace(monitor, 'secant2', reason="output", a=lsr.alpha[iA], b=lsr.alpha[iB])
    return False, iA, iB

def update(objective, x, s, xtmp, lsr, ia, ib, ic, philim, monitor=None):
    """ Folds the point ic into the bracket (ia, ib) (HZ, stages U0-U3).

        Given a third point, pick the best two that retain the bracket
        around the minimum (as defined by HZ, eq. 29);
        b will be the upper bound, and a the lower bound.
    """
    a = lsr.alpha[ia]
    b = lsr.alpha[ib]
    # HZ, eq. 4.4
    assert lsr.slope[ia] < 0
    assert lsr.value[ia] <= philim
    assert lsr.slope[ib] >= 0
    assert b > a

    c, phic, dphic = lsr[ic]
    _trace(monitor, 'update', ia=ia, a=a, ib=ib, b=b, c=c, phic=phic, dphic=dphic)

    if c < a or c > b:
        # it's out of the bracketing interval
        return ia, ib

    if dphic >= 0:
        # replace b with a closer point
        return ia, ic

    # We know dphic < 0. However, phi may not be monotonic between a
    # and c, so check that the value is also smaller than phi0. (It's
    # more dangerous to replace a than b, since we're leaving the
    # secure environment of alpha=0; that's why we didn't check this
    # above.)
    if phic <= philim:
        return ic, ib

    # phic is bigger than phi0, which implies that the minimum
    # lies between a and c. Find it via bisection.
    return bisect(objective, x, s, xtmp, lsr, ia, ic, philim, monitor=monitor)

def bisect(objective, x, s, xtmp, lsr, ia, ib, philim, monitor=None):
    """ HZ, stage U3 (with theta=0.5).

        Shrinks the bracket (ia, ib), where the value at b is above philim while
        the slope is still negative, until an upward slope is found.
    """
    a = lsr.alpha[ia]
    b = lsr.alpha[ib]
    # HZ, conditions shown following U3
    assert lsr.slope[ia] < 0
    assert lsr.value[ia] <= philim
    assert lsr.slope[ib] < 0
    assert lsr.value[ib] > philim
    assert b > a

    while b - a > numpy.spacing(b):
        _trace(monitor, 'bisect', a=a, b=b, width=b - a)
        d = (a + b) / 2
        phid, dphid = linefunc(objective, x, s, d, xtmp)
        assert _isfinite(phid, dphid)
        inew = lsr.push(d, phid, dphid)

        if dphid >= 0:
            # replace b, return
            return ia, inew

        if phid <= philim:
            # replace a, but keep bisecting until dphib > 0
            a = d
            ia = inew
        else:
            b = d
            ib = inew

    return ia, ib
