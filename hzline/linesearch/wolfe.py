import numpy

def _float_type(x):
    dtype = getattr(x, 'dtype', None)
    if dtype is not None and numpy.issubdtype(dtype, numpy.floating):
        return dtype.type
    return numpy.float64

def eps(x):
    """ machine epsilon of the floating point type of x """
    return float(numpy.finfo(_float_type(x)).eps)

def iterfinitemax(x):
    """ number of retries after a non-finite evaluation along a ray from x.

        Shrinking the step further than this cannot change the trial point.
    """
    return int(numpy.ceil(-numpy.log2(eps(x))))

def linefunc(objective, x, s, alpha, xtmp, calc_grad=True):
    """ Evaluates the objective at x + alpha * s.

        The trial point is stored in the scratch vector xtmp.

        Returns
        -------
        value : objective at the trial point.
        slope : directional derivative along s; nan if value is not finite
                or calc_grad is False.
    """
    vs = objective.vs
    xtmp = vs.copyto(xtmp, vs.addmul(x, s, alpha))
    # a non-finite value carries no gradient

    slope = numpy.nan
    if calc_grad:
        value, g = objective.value_gradient(xtmp)
        if numpy.isfinite(value):
            slope = vs.dot(g, s)
    else:
        value = objective.value(xtmp)

    return value, slope

def satisfies_wolfe(c, phic, dphic, phi0, dphi0, philim, delta, sigma):
    """ Checks the Wolfe and the approximate Wolfe conditions (HZ, eq. 22-23)
        at step c with value phic and slope dphic.
    """
    wolfe1 = (delta * dphi0 >= (phic - phi0) / c
              and dphic >= sigma * dphi0)
    wolfe2 = ((2 * delta - 1) * dphi0 >= dphic >= sigma * dphi0
              and phic <= philim)
    return bool(wolfe1 or wolfe2)
