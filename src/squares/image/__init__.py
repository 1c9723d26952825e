from .png import PngSymbolImage
from .svg import SvgSymbolImage
