# module state:
# implemented:
#       - QR code model 2 symbols, versions 1 through 40, all four
#         error correction levels
#       - automatic or fixed mask selection
# not implemented (done by the caller):
#       - segmenting content into mode tagged bit streams
#       - choosing the smallest version that fits the data

import logging
from itertools import chain, zip_longest

from . import tables
from .galoisfield import modulo_gf2
from .reedsolomon import generator_for
from ..image.png import PngSymbolImage
from ..image.svg import SvgSymbolImage


logger = logging.getLogger(__name__)

AUTO_MASK = -1

# penalty weights used when evaluating which mask is best
PENALTY_N1 = 3
PENALTY_N2 = 3
PENALTY_N3 = 40
PENALTY_N4 = 10

# 1:1:3:1:1 finder-like pattern preceded or followed by four light modules
FINDER_LIKE_PATTERNS = (0b00001011101, 0b10111010000)

FORMAT_GENERATOR = 0b10100110111
FORMAT_XOR_MASK = 0b101010000010010
VERSION_GENERATOR = 0b1111100100101

mask_functions = (
    lambda x, y: (x + y) % 2 == 0,
    lambda x, y: y % 2 == 0,
    lambda x, y: x % 3 == 0,
    lambda x, y: (x + y) % 3 == 0,
    lambda x, y: (x // 3 + y // 2) % 2 == 0,
    lambda x, y: x * y % 2 + x * y % 3 == 0,
    lambda x, y: (x * y % 2 + x * y % 3) % 2 == 0,
    lambda x, y: ((x + y) % 2 + x * y % 3) % 2 == 0
)


def is_version_valid(version):
    return isinstance(version, int) and \
        tables.MIN_VERSION <= version <= tables.MAX_VERSION


def is_mask_valid(mask):
    return isinstance(mask, int) and 0 <= mask < len(mask_functions)


def is_data_length_valid(version, ec_level, length):
    return length == tables.data_codewords(ec_level, version)


def format_bits(ec_level, mask):
    """15 bit format information: level code, mask and BCH(15, 5) ecc"""
    data = (tables.ec_level_code[ec_level] << 3) | mask
    bits = data << 10
    bits |= modulo_gf2(bits, FORMAT_GENERATOR)
    bits ^= FORMAT_XOR_MASK
    assert bits >> 15 == 0, "Format information alignment error"
    return bits


def version_bits(version):
    """18 bit version information: version and BCH(18, 6) ecc"""
    bits = version << 12
    bits |= modulo_gf2(bits, VERSION_GENERATOR)
    assert bits >> 18 == 0, "Version information alignment error"
    return bits


def interleave_blocks(blocks):
    return bytes(
        val
        for vals in zip_longest(*blocks)
        for val in vals
        if val is not None
    )


def add_error_correction(data, version, ec_level):
    """Split data codewords into blocks, append ecc and interleave them.

    Returns the final codeword sequence of length
    ``raw_data_modules(version) // 8``.
    """
    if not is_data_length_valid(version, ec_level, len(data)):
        raise ValueError(
            "Version {} level {} holds {} data codewords, got {}".format(
                version,
                ec_level,
                tables.data_codewords(ec_level, version),
                len(data)
            )
        )
    num_blocks = tables.num_error_correction_blocks(ec_level, version)
    ecc_len = tables.ecc_codewords_per_block(ec_level, version)
    raw_codewords = tables.raw_data_modules(version) // 8
    num_short_blocks = num_blocks - raw_codewords % num_blocks
    short_block_len = raw_codewords // num_blocks

    rs = generator_for(ecc_len)
    data_blocks = []
    ecc_blocks = []
    k = 0
    for i in range(num_blocks):
        block_len = short_block_len - ecc_len
        if i >= num_short_blocks:
            block_len += 1
        block = bytes(data[k:k + block_len])
        k += block_len
        data_blocks.append(block)
        ecc_blocks.append(rs.get_remainder(block))
    # short blocks lack the last data byte, so data and ecc parts
    # are interleaved separately
    result = interleave_blocks(data_blocks) + interleave_blocks(ecc_blocks)
    assert len(result) == raw_codewords
    return result


def penalty_score(modules):
    """Penalty of a square grid of modules, lower is better.

    Sums runs of five or more equal modules in rows and columns,
    uniform 2x2 blocks, finder-like patterns and the imbalance
    between dark and light modules.
    """
    size = len(modules)
    result = 0
    for line in chain(modules, zip(*modules)):
        result += _line_penalty(line)

    for y in range(size - 1):
        row = modules[y]
        next_row = modules[y + 1]
        for x in range(size - 1):
            color = row[x]
            if color == row[x + 1] == next_row[x] == next_row[x + 1]:
                result += PENALTY_N2

    black = sum(sum(row) for row in modules)
    total = size * size
    # smallest k such that (45 - 5k)% <= dark / total <= (55 + 5k)%
    k = 0
    while black * 20 < (9 - k) * total or black * 20 > (11 + k) * total:
        k += 1
    result += PENALTY_N4 * k
    return result


def _line_penalty(line):
    result = 0
    run_color = None
    run_length = 0
    window = 0
    for i, color in enumerate(line):
        if color == run_color:
            run_length += 1
            if run_length == 5:
                result += PENALTY_N1
            elif run_length > 5:
                result += 1
        else:
            run_color = color
            run_length = 1
        window = ((window << 1) & 0x7FF) | int(color)
        # needs 11 bits accumulated
        if i >= 10 and window in FINDER_LIKE_PATTERNS:
            result += PENALTY_N3
    return result


class SymbolBuilder:
    """Mutable scratch grids used while a single symbol is constructed.

    ``modules`` holds colors (True is black) and ``is_function`` marks
    modules of the fixed patterns that data placement and masking
    never touch. Both are indexed ``[y][x]``.
    """
    def __init__(self, version, ec_level):
        self.version = version
        self.ec_level = ec_level
        self.size = version * 4 + 17
        self.modules = [[False] * self.size for _ in range(self.size)]
        self.is_function = [[False] * self.size for _ in range(self.size)]

    def set_function_module(self, x, y, is_black):
        self.modules[y][x] = is_black
        self.is_function[y][x] = True

    def draw_function_patterns(self):
        for i in range(self.size):
            self.set_function_module(6, i, i % 2 == 0)
            self.set_function_module(i, 6, i % 2 == 0)

        # finder patterns overwrite some timing modules
        self.draw_finder_pattern(3, 3)
        self.draw_finder_pattern(self.size - 4, 3)
        self.draw_finder_pattern(3, self.size - 4)

        positions = tables.alignment_pattern_positions(self.version)
        last = len(positions) - 1
        for i, y in enumerate(positions):
            for j, x in enumerate(positions):
                # skip the three corners occupied by finder patterns
                if (i, j) in ((0, 0), (0, last), (last, 0)):
                    continue
                self.draw_alignment_pattern(x, y)

        # placeholder, redrawn once the mask is known
        self.draw_format_bits(0)
        self.draw_version()

    def draw_finder_pattern(self, x, y):
        """9x9 finder pattern including separator, centered at (x, y)"""
        for dy in range(-4, 5):
            for dx in range(-4, 5):
                xx = x + dx
                yy = y + dy
                if 0 <= xx < self.size and 0 <= yy < self.size:
                    distance = max(abs(dx), abs(dy))
                    self.set_function_module(xx, yy, distance not in (2, 4))

    def draw_alignment_pattern(self, x, y):
        for dy in range(-2, 3):
            for dx in range(-2, 3):
                distance = max(abs(dx), abs(dy))
                self.set_function_module(x + dx, y + dy, distance != 1)

    def draw_format_bits(self, mask):
        format_s = format_bits(self.ec_level, mask)
        bit = lambda i: ((format_s >> i) & 1) != 0

        # first copy, around the top left finder pattern
        for i in range(6):
            self.set_function_module(8, i, bit(i))
        self.set_function_module(8, 7, bit(6))
        self.set_function_module(8, 8, bit(7))
        self.set_function_module(7, 8, bit(8))
        for i in range(9, 15):
            self.set_function_module(14 - i, 8, bit(i))

        # second copy, split between the other two finder patterns
        for i in range(8):
            self.set_function_module(self.size - 1 - i, 8, bit(i))
        for i in range(8, 15):
            self.set_function_module(8, self.size - 15 + i, bit(i))
        self.set_function_module(8, self.size - 8, True)

    def draw_version(self):
        if self.version < 7:
            return
        version_s = version_bits(self.version)
        for i in range(18):
            bit = ((version_s >> i) & 1) != 0
            a = self.size - 11 + i % 3
            b = i // 3
            self.set_function_module(a, b, bit)
            self.set_function_module(b, a, bit)

    def data_position_generator(self):
        """Yield (x, y) of every data module in zigzag placement order"""
        right = self.size - 1
        while right >= 1:
            # column pairs never include the vertical timing pattern
            if right == 6:
                right = 5
            upward = ((right + 1) & 2) == 0
            for vert in range(self.size):
                y = self.size - 1 - vert if upward else vert
                for x in (right, right - 1):
                    if not self.is_function[y][x]:
                        yield (x, y)
            right -= 2

    def draw_codewords(self, data):
        assert len(data) == tables.raw_data_modules(self.version) // 8, \
            "Invalid codeword count {}".format(len(data))
        bit_count = len(data) * 8
        i = 0
        for x, y in self.data_position_generator():
            # remaining 0 to 7 remainder modules stay white
            if i == bit_count:
                break
            self.modules[y][x] = ((data[i >> 3] >> (7 - (i & 7))) & 1) != 0
            i += 1
        assert i == bit_count, "Placed {} of {} bits".format(i, bit_count)

    def apply_mask(self, mask):
        """XOR the mask pattern into data modules, undone by reapplying it"""
        assert is_mask_valid(mask), "Invalid mask {!r}".format(mask)
        fn = mask_functions[mask]
        for y in range(self.size):
            row = self.modules[y]
            function_row = self.is_function[y]
            for x in range(self.size):
                if not function_row[x] and fn(x, y):
                    row[x] = not row[x]

    def penalty_score(self):
        return penalty_score(self.modules)

    def choose_mask(self, mask):
        """Apply the requested or the lowest penalty mask, return its index

        The grid must be unmasked when this is called.
        """
        if mask == AUTO_MASK:
            min_penalty = None
            for i in range(len(mask_functions)):
                self.draw_format_bits(i)
                self.apply_mask(i)
                penalty = self.penalty_score()
                logger.debug(
                    "Version %d level %s mask %d penalty %d",
                    self.version, self.ec_level, i, penalty
                )
                if min_penalty is None or penalty < min_penalty:
                    mask = i
                    min_penalty = penalty
                self.apply_mask(i)
            logger.debug(
                "Chose mask %d with penalty %d", mask, min_penalty
            )
        elif not is_mask_valid(mask):
            raise ValueError("Invalid mask {!r}".format(mask))
        self.draw_format_bits(mask)
        self.apply_mask(mask)
        return mask


class QRCode:
    """Immutable QR code model 2 symbol.

    Built from data codewords that already contain the segment headers,
    terminator and padding for the given version and error correction
    level. ``mask`` is ``AUTO_MASK`` or a fixed mask 0 to 7.
    """
    def __init__(self, version, ec_level, data_codewords, mask=AUTO_MASK):
        if not is_version_valid(version):
            raise ValueError(
                "Version must be between {} and {}, got {!r}".format(
                    tables.MIN_VERSION, tables.MAX_VERSION, version
                )
            )
        if ec_level not in tables.ec_level_code:
            raise ValueError(
                "Unknown error correction level {!r}".format(ec_level)
            )
        if mask != AUTO_MASK and not is_mask_valid(mask):
            raise ValueError("Invalid mask {!r}".format(mask))
        if not isinstance(data_codewords, (bytes, bytearray)):
            raise TypeError("Data codewords should be bytes type")

        self._version = version
        self._size = version * 4 + 17
        self._ec_level = ec_level
        builder = SymbolBuilder(version, ec_level)
        builder.draw_function_patterns()
        builder.draw_codewords(
            add_error_correction(data_codewords, version, ec_level)
        )
        self._mask = builder.choose_mask(mask)
        self._modules = tuple(tuple(row) for row in builder.modules)
        self._is_function = tuple(tuple(row) for row in builder.is_function)

    def __repr__(self):
        return "QRCode(version={}, ec_level={!r}, mask={})".format(
            self._version, self._ec_level, self._mask
        )

    @property
    def version(self):
        return self._version

    @property
    def size(self):
        """Width and height in modules, version * 4 + 17"""
        return self._size

    @property
    def ec_level(self):
        return self._ec_level

    @property
    def mask(self):
        """Mask actually applied, 0 to 7 even when chosen automatically"""
        return self._mask

    @property
    def modules(self):
        return self._modules

    def _in_bounds(self, x, y):
        return 0 <= x < self._size and 0 <= y < self._size

    def get_module(self, x, y):
        """Color at (x, y), True for black. Out of bounds is white."""
        return self._in_bounds(x, y) and self._modules[y][x]

    def is_function_module(self, x, y):
        return self._in_bounds(x, y) and self._is_function[y][x]

    def image_bits(self, border=4):
        """Rows of 0 and 1 with ``border`` white modules on every side"""
        if border < 0:
            raise ValueError("Border must be non-negative")
        width = self._size + 2 * border
        margin = [0] * border
        bits = [[0] * width for _ in range(border)]
        for line in self._modules:
            bits.append(margin + [int(bit) for bit in line] + margin)
        bits.extend([0] * width for _ in range(border))
        return bits

    def to_svg_str(self, border=4):
        return SvgSymbolImage(self, border=border).data()

    def to_png_bytes(self, scale=8, border=4):
        return PngSymbolImage(self, scale=scale, border=border).data()
