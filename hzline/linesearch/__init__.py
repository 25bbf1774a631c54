from hzline.history import LineSearchResults

# the Hager-Zhang line search:
from .hagerzhang import HagerZhang, hagerzhang, search
from .hagerzhang import secant, secant2, update, bisect
from .initial import InitialHagerZhang, LineSearchState, estimate_initial_alpha
from .initial import initial_alpha_I0, initial_alpha_I12
from .wolfe import satisfies_wolfe, linefunc

def origin(objective, x, s):
    """ Evaluates the objective at x and returns a history holding the origin of the ray along s,
        together with the gradient at x.
    """
    f_x, g = objective.value_gradient(x)
    return LineSearchResults.origin(f_x, objective.dot(g, s)), g
