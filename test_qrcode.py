import pytest

from squares.qrcode import tables
from squares.qrcode.galoisfield import modulo_gf2
from squares.qrcode.qrcode import (
    AUTO_MASK,
    FORMAT_GENERATOR,
    FORMAT_XOR_MASK,
    QRCode,
    SymbolBuilder,
    _line_penalty,
    add_error_correction,
    format_bits,
    mask_functions,
    penalty_score,
    version_bits,
)


def data_for(version, ec_level, seed=0):
    length = tables.data_codewords(ec_level, version)
    return bytes((seed + 37 * i) & 0xFF for i in range(length))


def chebyshev(x, y, cx, cy):
    return max(abs(x - cx), abs(y - cy))


def read_format_copies(qr):
    size = qr.size
    first = [(8, i) for i in range(6)] + [(8, 7), (8, 8), (7, 8)] + \
        [(14 - i, 8) for i in range(9, 15)]
    second = [(size - 1 - i, 8) for i in range(8)] + \
        [(8, size - 15 + i) for i in range(8, 15)]
    return [
        sum(int(qr.get_module(x, y)) << i for i, (x, y) in enumerate(coords))
        for coords in (first, second)
    ]


def test_tables_are_consistent():
    for version in range(tables.MIN_VERSION, tables.MAX_VERSION + 1):
        raw_codewords = tables.raw_data_modules(version) // 8
        for ec_level in tables.ec_levels:
            blocks = tables.num_error_correction_blocks(ec_level, version)
            ecc_len = tables.ecc_codewords_per_block(ec_level, version)
            assert tables.data_codewords(ec_level, version) > 0
            assert raw_codewords // blocks > ecc_len
        assert tables.data_codewords("L", version) > \
            tables.data_codewords("M", version) > \
            tables.data_codewords("Q", version) > \
            tables.data_codewords("H", version)


def test_known_capacities():
    assert tables.raw_data_modules(1) == 208
    assert tables.raw_data_modules(2) == 359
    assert tables.raw_data_modules(7) == 1568
    assert tables.data_codewords("L", 1) == 19
    assert tables.data_codewords("H", 1) == 9
    assert tables.data_codewords("Q", 5) == 62
    assert tables.data_codewords("L", 40) == 2956
    assert tables.data_codewords("H", 40) == 1276
    assert tables.alignment_pattern_positions(1) == ()
    assert tables.alignment_pattern_positions(7) == (6, 22, 38)


def test_format_bits():
    assert format_bits("M", 0) == FORMAT_XOR_MASK
    assert format_bits("L", 0) == 0b111011111000100
    values = set()
    for ec_level in tables.ec_levels:
        for mask in range(8):
            bits = format_bits(ec_level, mask)
            values.add(bits)
            unmasked = bits ^ FORMAT_XOR_MASK
            data = unmasked >> 10
            assert data == (tables.ec_level_code[ec_level] << 3) | mask
            remainder = modulo_gf2(data << 10, FORMAT_GENERATOR)
            assert unmasked & 0x3FF == remainder
    assert len(values) == 32


def test_version_bits():
    assert version_bits(7) == 0b000111110010010100
    assert version_bits(40) >> 12 == 40


def test_add_error_correction_single_block():
    data = bytes([32, 91, 11, 120, 209, 114, 220, 77,
                  67, 64, 236, 17, 236, 17, 236, 17])
    expected = data + bytes([196, 35, 39, 119, 235, 215, 231, 226, 93, 23])
    assert add_error_correction(data, 1, "M") == expected


def test_add_error_correction_interleaves_blocks():
    data_blocks = [
        [67, 85, 70, 134, 87, 38, 85, 194, 119, 50, 6, 18, 6, 103, 38],
        [246, 246, 66, 7, 118, 134, 242, 7, 38, 86, 22, 198, 199, 146, 6],
        [182, 230, 247, 119, 50, 7, 118, 134, 87, 38, 82, 6, 134, 151,
         50, 7],
        [70, 247, 118, 86, 194, 6, 151, 50, 16, 236, 17, 236, 17, 236,
         17, 236]
    ]
    ecc_blocks = [
        [213, 199, 11, 45, 115, 247, 241, 223, 229, 248, 154, 117, 154,
         111, 86, 161, 111, 39],
        [87, 204, 96, 60, 202, 182, 124, 157, 200, 134, 27, 129, 209, 17,
         163, 163, 120, 133],
        [148, 116, 177, 212, 76, 133, 75, 242, 238, 76, 195, 230, 189, 10,
         108, 240, 192, 141],
        [235, 159, 5, 173, 24, 147, 59, 33, 106, 40, 255, 172, 82, 2, 131,
         32, 178, 236]
    ]
    interleaved_data = [
        67, 246, 182, 70, 85, 246, 230, 247, 70, 66, 247, 118,
        134, 7, 119, 86, 87, 118, 50, 194, 38, 134, 7, 6, 85,
        242, 118, 151, 194, 7, 134, 50, 119, 38, 87, 16, 50,
        86, 38, 236, 6, 22, 82, 17, 18, 198, 6, 236, 6, 199,
        134, 17, 103, 146, 151, 236, 38, 6, 50, 17, 7, 236
    ]
    interleaved_ecc = [val for vals in zip(*ecc_blocks) for val in vals]
    data = bytes(val for block in data_blocks for val in block)
    result = add_error_correction(data, 5, "Q")
    assert len(result) == tables.raw_data_modules(5) // 8
    assert result == bytes(interleaved_data + interleaved_ecc)


def test_add_error_correction_rejects_wrong_length():
    with pytest.raises(ValueError):
        add_error_correction(bytes(18), 1, "L")


@pytest.mark.parametrize("version", range(1, 41))
def test_placement_fills_every_data_module(version):
    builder = SymbolBuilder(version, "L")
    builder.draw_function_patterns()
    data_modules = list(builder.data_position_generator())
    assert len(data_modules) == tables.raw_data_modules(version)
    assert len(set(data_modules)) == len(data_modules)

    raw = bytes([0xFF]) * (tables.raw_data_modules(version) // 8)
    builder.draw_codewords(raw)
    black = sum(builder.modules[y][x] for x, y in data_modules)
    assert black == len(raw) * 8
    # remainder bits stay white
    for x, y in data_modules[len(raw) * 8:]:
        assert not builder.modules[y][x]


def test_placement_order_starts_bottom_right():
    builder = SymbolBuilder(1, "L")
    builder.draw_function_patterns()
    positions = builder.data_position_generator()
    assert [next(positions) for _ in range(4)] == \
        [(20, 20), (19, 20), (20, 19), (19, 19)]
    assert all(x != 6 for x, y in builder.data_position_generator())


def test_placement_rejects_wrong_length():
    builder = SymbolBuilder(1, "L")
    builder.draw_function_patterns()
    with pytest.raises(AssertionError):
        builder.draw_codewords(bytes(25))


@pytest.mark.parametrize("mask", range(8))
def test_mask_is_self_inverse(mask):
    builder = SymbolBuilder(7, "M")
    builder.draw_function_patterns()
    builder.draw_codewords(add_error_correction(data_for(7, "M"), 7, "M"))
    original = [list(row) for row in builder.modules]
    builder.apply_mask(mask)
    assert builder.modules != original
    for y in range(builder.size):
        for x in range(builder.size):
            if builder.is_function[y][x]:
                assert builder.modules[y][x] == original[y][x]
            else:
                inverted = mask_functions[mask](x, y)
                assert builder.modules[y][x] == (original[y][x] != inverted)
    builder.apply_mask(mask)
    assert builder.modules == original


def test_apply_mask_rejects_auto():
    builder = SymbolBuilder(1, "L")
    with pytest.raises(AssertionError):
        builder.apply_mask(AUTO_MASK)


def test_penalty_all_white():
    modules = [[False] * 21 for _ in range(21)]
    # 42 lines with a run of 21, 400 uniform 2x2 blocks, no black at all
    assert penalty_score(modules) == 42 * (3 + 16) + 400 * 3 + 90


def test_penalty_checkerboard():
    modules = [[(x + y) % 2 == 0 for x in range(4)] for y in range(4)]
    assert penalty_score(modules) == 0


def test_line_penalty_finder_like_patterns():
    pattern = [c == "1" for c in "00001011101"]
    assert _line_penalty(pattern) == 40
    assert _line_penalty(list(reversed(pattern))) == 40
    # reversed pattern followed by a fifth light module
    assert _line_penalty([c == "1" for c in "101110100000"]) == 40 + 3
    assert _line_penalty([c == "1" for c in "1111111"]) == 3 + 2


@pytest.mark.parametrize("version", [1, 40])
def test_size(version):
    qr = QRCode(version, "L", data_for(version, "L"), mask=0)
    assert qr.size == version * 4 + 17
    assert len(qr.modules) == qr.size
    assert all(len(row) == qr.size for row in qr.modules)
    assert qr.size == {1: 21, 40: 177}[version]


def test_minimal_symbol():
    qr = QRCode(1, "L", bytes(tables.data_codewords("L", 1)), mask=0)
    assert qr.version == 1
    assert qr.ec_level == "L"
    assert qr.mask == 0
    assert qr.size == 21
    assert qr.get_module(0, 0)
    assert not qr.get_module(-1, -1)
    assert not qr.get_module(21, 0)
    assert not qr.get_module(0, 21)
    assert not qr.is_function_module(-1, 3)
    assert qr.is_function_module(0, 0)
    # dark module
    assert qr.get_module(8, qr.size - 8)

    centers = ((3, 3), (qr.size - 4, 3), (3, qr.size - 4))
    for cx, cy in centers:
        for y in range(cy - 4, cy + 5):
            for x in range(cx - 4, cx + 5):
                if not 0 <= x < qr.size or not 0 <= y < qr.size:
                    continue
                distance = chebyshev(x, y, cx, cy)
                assert qr.get_module(x, y) == (distance in (0, 1, 3))
                assert qr.is_function_module(x, y)

    for i in range(8, qr.size - 8):
        assert qr.get_module(i, 6) == (i % 2 == 0)
        assert qr.get_module(6, i) == (i % 2 == 0)

    expected = format_bits("L", 0)
    assert read_format_copies(qr) == [expected, expected]


def test_alignment_patterns():
    qr = QRCode(7, "H", data_for(7, "H"), mask=3)
    positions = tables.alignment_pattern_positions(7)
    skipped = {(6, 6), (6, 38), (38, 6)}
    for cy in positions:
        for cx in positions:
            if (cx, cy) in skipped:
                continue
            for y in range(cy - 2, cy + 3):
                for x in range(cx - 2, cx + 3):
                    distance = chebyshev(x, y, cx, cy)
                    assert qr.get_module(x, y) == (distance != 1)
                    assert qr.is_function_module(x, y)


def test_version_information():
    qr = QRCode(7, "Q", data_for(7, "Q"), mask=5)
    expected = version_bits(7)
    size = qr.size
    for i in range(18):
        bit = ((expected >> i) & 1) == 1
        a = size - 11 + i % 3
        b = i // 3
        assert qr.get_module(a, b) == bit
        assert qr.get_module(b, a) == bit


@pytest.mark.parametrize("ec_level", ["L", "M", "Q", "H"])
def test_fixed_mask_format_information(ec_level):
    for mask in range(8):
        qr = QRCode(2, ec_level, data_for(2, ec_level), mask=mask)
        assert qr.mask == mask
        expected = format_bits(ec_level, mask)
        assert read_format_copies(qr) == [expected, expected]


@pytest.mark.parametrize("version, ec_level", [(1, "L"), (3, "Q"), (8, "H")])
def test_auto_mask_picks_first_lowest_penalty(version, ec_level):
    data = data_for(version, ec_level, seed=5)
    penalties = [
        penalty_score(QRCode(version, ec_level, data, mask=mask).modules)
        for mask in range(8)
    ]
    qr = QRCode(version, ec_level, data)
    assert qr.mask == penalties.index(min(penalties))
    assert QRCode(version, ec_level, data, AUTO_MASK).mask == qr.mask
    fixed = QRCode(version, ec_level, data, mask=qr.mask)
    assert fixed.modules == qr.modules


def test_image_bits():
    qr = QRCode(1, "M", data_for(1, "M"))
    bits = qr.image_bits(2)
    assert len(bits) == 25
    assert all(len(line) == 25 for line in bits)
    assert bits[0] == [0] * 25
    assert bits[-1] == [0] * 25
    assert bits[2][:2] == [0, 0]
    assert bits[2][2] == 1
    for y in range(qr.size):
        for x in range(qr.size):
            assert bits[y + 2][x + 2] == int(qr.get_module(x, y))
    assert qr.image_bits(0)[0][0] == 1
    with pytest.raises(ValueError):
        qr.image_bits(-1)


def test_modules_are_immutable():
    qr = QRCode(1, "L", data_for(1, "L"))
    with pytest.raises(TypeError):
        qr.modules[0][0] = False
    with pytest.raises(AttributeError):
        qr.mask = 3


def test_accepts_bytearray():
    qr = QRCode(1, "L", bytearray(data_for(1, "L")), mask=1)
    assert qr.mask == 1
    assert repr(qr) == "QRCode(version=1, ec_level='L', mask=1)"


@pytest.mark.parametrize("version", [0, 41, -1, "1", 1.0])
def test_invalid_version(version):
    with pytest.raises(ValueError):
        QRCode(version, "L", bytes(19))


@pytest.mark.parametrize("mask", [8, -2, 100])
def test_invalid_mask(mask):
    with pytest.raises(ValueError):
        QRCode(1, "L", bytes(19), mask=mask)


def test_invalid_level():
    with pytest.raises(ValueError):
        QRCode(1, "X", bytes(19))


def test_invalid_data():
    with pytest.raises(ValueError):
        QRCode(1, "L", bytes(18))
    with pytest.raises(ValueError):
        QRCode(1, "L", bytes(20))
    with pytest.raises(TypeError):
        QRCode(1, "L", "0" * 19)
