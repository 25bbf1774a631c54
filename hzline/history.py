class LineSearchResults(object):
    """ The history of a line search along one ray.

        Each entry is a step length alpha, and the value and the slope
        (the directional derivative) of the objective at x + alpha * s.
        Entries are only ever appended; the algorithms refer to them by index,
        and a bracket is a pair of indices (ia, ib) into the history.

        Entry 0 is the origin of the ray, alpha = 0.

        nfailures counts the non-finite evaluations met during the search.
    """
    def __init__(self, alpha=(), value=(), slope=(), nfailures=0):
        if not (len(alpha) == len(value) == len(slope)):
            raise ValueError("alpha, value and slope must have the same length")
        self.alpha = list(alpha)
        self.value = list(value)
        self.slope = list(slope)
        self.nfailures = nfailures

    @classmethod
    def origin(kls, phi0, dphi0):
        """ A history with only the origin of the ray. """
        return kls(alpha=[0.0], value=[phi0], slope=[dphi0])

    def push(self, alpha, value, slope):
        self.alpha.append(alpha)
        self.value.append(value)
        self.slope.append(slope)
        return len(self.alpha) - 1

    @property
    def last(self):
        """ index of the most recent entry """
        return len(self.alpha) - 1

    def __len__(self):
        return len(self.alpha)

    def __getitem__(self, i):
        return self.alpha[i], self.value[i], self.slope[i]

    def __repr__(self):
        return "LineSearchResults(alpha=%s, value=%s, slope=%s, nfailures=%d)" % (
            repr(self.alpha), repr(self.value), repr(self.slope), self.nfailures)
