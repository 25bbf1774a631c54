from .version import __version__

from .base import Objective, VectorSpace
from .base import LineSearchError, ConvergenceFailure, InvalidDescentDirection
from .vectorspace import real_vector_space
from .history import LineSearchResults

from .linesearch import HagerZhang, InitialHagerZhang, LineSearchState
from .linesearch import search, estimate_initial_alpha, satisfies_wolfe
