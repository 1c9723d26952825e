# Static ISO/IEC 18004 data for QR code model 2, versions 1 through 40.
# Tables are indexed [ec level index][version], index 0 of every version
# row is unused padding so versions can be used directly as indices.

MIN_VERSION = 1
MAX_VERSION = 40

ec_levels = ("L", "M", "Q", "H")

ec_level_code = {
    "L": 0b01,
    "M": 0b00,
    "Q": 0b11,
    "H": 0b10
}

ec_level_index = {
    "L": 0,
    "M": 1,
    "Q": 2,
    "H": 3
}

_ecc_codewords_per_block = (
    # 0,  1,  2,  3,  4,  5,  6,  7,  8,  9, 10, 11, 12, 13, 14, 15, 16, 17,
    # 18, 19, 20, 21, 22, 23, 24, 25, 26, 27, 28, 29, 30, 31, 32, 33, 34,
    # 35, 36, 37, 38, 39, 40
    (None, 7, 10, 15, 20, 26, 18, 20, 24, 30, 18, 20, 24, 26, 30, 22, 24, 28,
     30, 28, 28, 28, 28, 30, 30, 26, 28, 30, 30, 30, 30, 30, 30, 30, 30,
     30, 30, 30, 30, 30, 30),    # L
    (None, 10, 16, 26, 18, 24, 16, 18, 22, 22, 26, 30, 22, 22, 24, 24, 28,
     28, 26, 26, 26, 26, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28,
     28, 28, 28, 28, 28, 28),    # M
    (None, 13, 22, 18, 26, 18, 24, 18, 22, 20, 24, 28, 26, 24, 20, 30, 24,
     28, 28, 26, 30, 28, 30, 30, 30, 30, 28, 30, 30, 30, 30, 30, 30, 30, 30,
     30, 30, 30, 30, 30, 30),    # Q
    (None, 17, 28, 22, 16, 22, 28, 26, 26, 24, 28, 24, 28, 22, 24, 24, 30,
     28, 28, 26, 28, 30, 24, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30,
     30, 30, 30, 30, 30, 30)     # H
)

_num_error_correction_blocks = (
    (None, 1, 1, 1, 1, 1, 2, 2, 2, 2, 4, 4, 4, 4, 4, 6, 6, 6, 6, 7, 8, 8,
     9, 9, 10, 12, 12, 12, 13, 14, 15, 16, 17, 18, 19, 19, 20, 21, 22, 24,
     25),                        # L
    (None, 1, 1, 1, 2, 2, 4, 4, 4, 5, 5, 5, 8, 9, 9, 10, 10, 11, 13, 14, 16,
     17, 17, 18, 20, 21, 23, 25, 26, 28, 29, 31, 33, 35, 37, 38, 40, 43, 45,
     47, 49),                    # M
    (None, 1, 1, 2, 2, 4, 4, 6, 6, 8, 8, 8, 10, 12, 16, 12, 17, 16, 18, 21,
     20, 23, 23, 25, 27, 29, 34, 34, 35, 38, 40, 43, 45, 48, 51, 53, 56, 59,
     62, 65, 68),                # Q
    (None, 1, 1, 2, 4, 4, 4, 5, 6, 8, 8, 11, 11, 16, 16, 18, 16, 19, 21, 25,
     25, 25, 34, 30, 32, 35, 37, 40, 42, 45, 48, 51, 54, 57, 60, 63, 66, 70,
     74, 77, 81)                 # H
)

alignments = (
    (6, 18),          # 2
    (6, 22),          # 3
    (6, 26),          # 4
    (6, 30),          # 5
    (6, 34),          # 6
    (6, 22, 38),      # 7
    (6, 24, 42),      # 8
    (6, 26, 46),      # 9
    (6, 28, 50),      # 10
    (6, 30, 54),      # 11
    (6, 32, 58),      # 12
    (6, 34, 62),      # 13
    (6, 26, 46, 66),  # 14
    (6, 26, 48, 70),  # 15
    (6, 26, 50, 74),  # 16
    (6, 30, 54, 78),  # 17
    (6, 30, 56, 82),  # 18
    (6, 30, 58, 86),  # 19
    (6, 34, 62, 90),  # 20
    (6, 28, 50, 72, 94),              # 21
    (6, 26, 50, 74, 98),              # 22
    (6, 30, 54, 78, 102),             # 23
    (6, 28, 54, 80, 106),             # 24
    (6, 32, 58, 84, 110),             # 25
    (6, 30, 58, 86, 114),             # 26
    (6, 34, 62, 90, 118),             # 27
    (6, 26, 50, 74, 98, 122),         # 28
    (6, 30, 54, 78, 102, 126),        # 29
    (6, 26, 52, 78, 104, 130),        # 30
    (6, 30, 56, 82, 108, 134),        # 31
    (6, 34, 60, 86, 112, 138),        # 32
    (6, 30, 58, 86, 114, 142),        # 33
    (6, 34, 62, 90, 118, 146),        # 34
    (6, 30, 54, 78, 102, 126, 150),   # 35
    (6, 24, 50, 76, 102, 128, 154),   # 36
    (6, 28, 54, 80, 106, 132, 158),   # 37
    (6, 32, 58, 84, 110, 136, 162),   # 38
    (6, 26, 54, 82, 110, 138, 166),   # 39
    (6, 30, 58, 86, 114, 142, 170)    # 40
)


def _check_version(version):
    assert MIN_VERSION <= version <= MAX_VERSION, \
        "Version out of range: {!r}".format(version)


def ecc_codewords_per_block(ec_level, version):
    _check_version(version)
    return _ecc_codewords_per_block[ec_level_index[ec_level]][version]


def num_error_correction_blocks(ec_level, version):
    _check_version(version)
    return _num_error_correction_blocks[ec_level_index[ec_level]][version]


def alignment_pattern_positions(version):
    """Ascending alignment pattern center coordinates, empty for version 1"""
    _check_version(version)
    if version == 1:
        return ()
    return alignments[version - 2]


def raw_data_modules(version):
    """Number of modules available for data and ecc codewords.

    Includes the 0 to 7 remainder bits, so the result is not always
    a multiple of 8.
    """
    _check_version(version)
    result = (16 * version + 128) * version + 64
    if version >= 2:
        num_align = version // 7 + 2
        result -= (25 * num_align - 10) * num_align - 55
        if version >= 7:
            # two version information blocks
            result -= 36
    return result


def data_codewords(ec_level, version):
    """Number of data codewords a symbol of given version and level holds"""
    return raw_data_modules(version) // 8 \
        - ecc_codewords_per_block(ec_level, version) \
        * num_error_correction_blocks(ec_level, version)
