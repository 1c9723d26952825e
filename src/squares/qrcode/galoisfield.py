def modulo_gf2(a, mod):
    """Remainder of carry-less division of ``a`` by ``mod`` in GF(2)[x]"""
    mod_bitlen = mod.bit_length()
    a_bitlen = a.bit_length()
    if a_bitlen < mod_bitlen:
        return a
    m = mod << (a_bitlen - mod_bitlen)
    bit = 1 << (a_bitlen - 1)
    while m >= mod:
        if a & bit:
            a ^= m
        bit >>= 1
        m >>= 1
    return a


class GaloisField:
    """Arithmetic over GF(2^8) as used by QR codes.

    Elements are ints 0..255. Addition and subtraction are both XOR because
    the field has characteristic 2.
    """
    def __init__(self, primitive_poly=0x11D):
        if primitive_poly.bit_length() != 9:
            raise ValueError(
                "Primitive polynomial {!r} is not of degree 8".format(
                    primitive_poly
                )
            )
        self.primitive_poly = primitive_poly
        self.element_count = 255

    def double(self, a):
        a <<= 1
        if a >> 8:
            a ^= self.primitive_poly
        return a

    def mul(self, a, b):
        # Russian peasant multiplication, most significant bit of b first
        assert a >> 8 == 0 and b >> 8 == 0
        res = 0
        for shift in range(7, -1, -1):
            res = self.double(res)
            if (b >> shift) & 1:
                res ^= a
        return res

    def add(self, a, b):
        return a ^ b

    def exp(self, power):
        """Return 2 ** power computed by repeated doubling"""
        res = 1
        for _ in range(power % self.element_count):
            res = self.double(res)
        return res

    def poly_eval(self, polynomial, x):
        # Horner scheme polynomial evaluation, highest degree first
        y = 0
        for coeff in polynomial:
            y = self.add(self.mul(y, x), coeff)
        return y


gf256 = GaloisField()
