from .image import SymbolImage


class SvgSymbolImage(SymbolImage):
    """Class for saving a symbol as .svg file

    Every module is one unit of the view box, so ``scale`` is fixed to 1.
    Black modules become subpaths of a single path in row-major order
    and lines always end with "\\n", making the output reproducible.
    """
    file_open_mode = "w"
    open_kwargs = {"encoding": "ascii", "newline": "\n"}

    SVG_OPEN = '<?xml version="1.0" encoding="UTF-8"?>\n'\
        '<svg xmlns="http://www.w3.org/2000/svg" version="1.1"'\
        ' viewBox="0 0 {width} {height}" stroke="none">\n'
    SVG_CLOSE = "</svg>\n"
    BACKGROUND = '<rect width="100%" height="100%" fill="#FFFFFF"/>\n'
    PATH_OPEN = '<path d="'
    PATH_CLOSE = '" fill="#000000"/>\n'
    SQUARE = "M{x},{y}h1v1h-1z"

    def __init__(self, symbol, border=None):
        super().__init__(symbol, scale=1, border=border)

    def _write_header(self, image_file):
        image_file.write(
            self.SVG_OPEN.format(
                width=self.image_width,
                height=self.image_height
            )
        )
        image_file.write(self.BACKGROUND)

    def _write_squares(self, image_file):
        image_file.write(self.PATH_OPEN)
        image_file.write(" ".join(
            self.SQUARE.format(x=x, y=y)
            for y, line in enumerate(self.data_bits)
            for x, bit in enumerate(line)
            if bit
        ))
        image_file.write(self.PATH_CLOSE)

    def _write_finish(self, image_file):
        image_file.write(self.SVG_CLOSE)
