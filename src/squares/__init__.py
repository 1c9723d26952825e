from .qrcode import AUTO_MASK, QRCode, data_codewords, ec_levels
from .image import PngSymbolImage, SvgSymbolImage

__version__ = "0.1.0"
