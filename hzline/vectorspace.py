"""
    Vectors.

    define addmul, which moves a point along a ray;
       dot, which defines the inner product used for the slope;
       and copyto, which stores a trial point into the scratch vector.

"""
from hzline.base import VectorSpace

class RealVectorSpace(VectorSpace):
    def addmul(self, a, b, c):
        """ a + b * c, follow the type of b """
        return a + b * c

    def dot(self, a, b):
        """ einsum('i,i->', a, b) """
        if hasattr(a, 'dot'):
            return (a * b).sum()
        try:
            return sum(a * b)
        except TypeError:
            return float(a * b)

    def copyto(self, dst, src):
        if dst is None or not hasattr(dst, '__setitem__'):
            return src
        dst[...] = src
        return dst

real_vector_space = RealVectorSpace()
