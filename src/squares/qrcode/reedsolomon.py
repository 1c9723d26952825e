from functools import lru_cache

from .galoisfield import gf256


MIN_DEGREE = 1
MAX_DEGREE = 30


class ReedSolomonGenerator:
    """Computes Reed-Solomon error correction codewords over GF(256).

    The generator polynomial is the product of (x - 2^i) for i in
    0..degree-1. Its leading coefficient is always 1 and is not stored,
    ``coefficients`` holds the remaining ``degree`` terms highest degree
    first. Instances are immutable once built and can be shared.
    """
    def __init__(self, degree, gf=None):
        if not MIN_DEGREE <= degree <= MAX_DEGREE:
            raise ValueError(
                "Degree must be between {} and {}, got {!r}".format(
                    MIN_DEGREE, MAX_DEGREE, degree
                )
            )
        self.gf = gf or gf256
        self.degree = degree
        self.coefficients = self.compute_generator(degree)

    def compute_generator(self, degree):
        length = degree + 1
        res_poly = [0] * length
        res_poly[0] = 1
        root = 1
        for i in range(1, length):
            for j in range(i, 0, -1):
                m = self.gf.mul(res_poly[j - 1], root)
                res_poly[j] = self.gf.add(res_poly[j], m)
            root = self.gf.double(root)
        return tuple(res_poly[1:])

    def get_remainder(self, data):
        """Return the ``degree`` error correction bytes for ``data``"""
        remainder = [0] * self.degree
        for byte in data:
            factor = self.gf.add(byte, remainder[0])
            del remainder[0]
            remainder.append(0)
            if factor == 0:
                continue
            for i, coeff in enumerate(self.coefficients):
                remainder[i] = self.gf.add(remainder[i],
                                           self.gf.mul(coeff, factor))
        return bytes(remainder)

    def syndromes(self, codeword):
        """Evaluate ``codeword`` (data followed by its ecc) at every root.

        All syndromes are zero exactly when the codeword is divisible by
        the generator polynomial.
        """
        return [
            self.gf.poly_eval(codeword, self.gf.exp(i))
            for i in range(self.degree)
        ]


@lru_cache(maxsize=None)
def generator_for(degree):
    return ReedSolomonGenerator(degree)
