from .qrcode import (
    AUTO_MASK,
    QRCode,
    add_error_correction,
    format_bits,
    is_data_length_valid,
    is_mask_valid,
    is_version_valid,
    penalty_score,
    version_bits,
)
from .reedsolomon import ReedSolomonGenerator, generator_for
from .tables import data_codewords, ec_levels
