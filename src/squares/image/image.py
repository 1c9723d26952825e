from abc import ABC, abstractmethod
from io import BytesIO, StringIO


# largest width and height a PNG header can express
MAX_DIMENSION = 2 ** 31 - 1


class SymbolImage(ABC):
    """Abstract class representing image of a 2D symbol

    The symbol is any object with a ``size`` and an ``image_bits(border)``
    method returning rows of 0 (white) and 1 (black) modules, such as
    ``squares.qrcode.qrcode.QRCode``. Every module is drawn as
    a ``scale`` by ``scale`` square and the symbol is surrounded by
    ``border`` white modules.
    """
    file_open_mode = "wb"
    open_kwargs = {}
    default_scale = 8
    default_border = 4

    def __init__(self, symbol, scale=None, border=None):
        if scale is None:
            scale = self.default_scale
        if border is None:
            border = self.default_border
        if not isinstance(scale, int) or scale <= 0:
            raise ValueError("Scale must be positive, got {!r}".format(scale))
        if not isinstance(border, int) or border < 0:
            raise ValueError(
                "Border must be non-negative, got {!r}".format(border)
            )
        modules = symbol.size + 2 * border
        if modules * scale > MAX_DIMENSION:
            raise ValueError("Scale or border too large")
        self.scale = scale
        self.border = border
        self.data_bits = symbol.image_bits(border)

    @property
    def image_height(self):
        """Total image height in pixels"""
        return len(self.data_bits) * self.scale

    @property
    def image_width(self):
        """Total image width in pixels"""
        return len(self.data_bits[0]) * self.scale

    @abstractmethod
    def _write_header(self, image_file):
        pass

    @abstractmethod
    def _write_squares(self, image_file):
        pass

    @abstractmethod
    def _write_finish(self, image_file):
        pass

    def write(self, image_file):
        self._write_header(image_file)
        self._write_squares(image_file)
        self._write_finish(image_file)

    def data(self):
        """Whole image as bytes, or str for text based formats"""
        buffer = StringIO() if self.file_open_mode == "w" else BytesIO()
        self.write(buffer)
        return buffer.getvalue()

    def save(self, image_filename):
        with open(image_filename, self.file_open_mode,
                  **self.open_kwargs) as image_file:
            self.write(image_file)
