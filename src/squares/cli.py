import argparse
import binascii
import logging

from .qrcode import AUTO_MASK, QRCode, ec_levels
from .image import PngSymbolImage, SvgSymbolImage


logger = logging.getLogger(__name__)


def positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(
            "{!r} is not a positive integer".format(value)
        )
    return number


def non_negative_int(value):
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(
            "{!r} is not a non-negative integer".format(value)
        )
    return number


def mask_type(value):
    if value == "auto":
        return AUTO_MASK
    mask = int(value)
    if not 0 <= mask <= 7:
        raise argparse.ArgumentTypeError(
            "Mask must be 'auto' or 0 to 7, got {!r}".format(value)
        )
    return mask


def hex_bytes(value):
    try:
        return binascii.unhexlify("".join(value.split()))
    except (binascii.Error, ValueError):
        raise argparse.ArgumentTypeError(
            "{!r} is not a hexadecimal byte string".format(value)
        )


parser = argparse.ArgumentParser(
    prog="squares",
    description="Generate an image of a QR code symbol from data codewords "
                "that already contain segment headers and padding.",
)
parser.add_argument(
    "--file-type",
    type=str,
    default="png",
    choices=["svg", "png"],
    help="Generated image filetype."
)
parser.add_argument(
    "--mask",
    type=mask_type,
    default=AUTO_MASK,
    help="Mask pattern 0 to 7, or 'auto' to pick the one with "
         "the lowest penalty."
)
parser.add_argument(
    "--scale",
    type=positive_int,
    default=None,
    help="Module size in pixels. Ignored for svg images."
)
parser.add_argument(
    "--border",
    type=non_negative_int,
    default=4,
    help="Width of the white border in modules."
)
parser.add_argument(
    "-v", "--verbose",
    action="store_true",
    help="Log mask penalties and other details."
)
parser.add_argument(
    "version",
    type=int,
    help="Symbol version, 1 to 40."
)
parser.add_argument(
    "ec_level",
    type=str.upper,
    choices=ec_levels,
    help="Error correction level."
)
parser.add_argument(
    "data",
    type=hex_bytes,
    help="Data codewords as a hexadecimal string."
)
parser.add_argument(
    "out",
    type=str,
    help="Output path."
)


def main(cmd_args=None):
    image_classes = {
        "svg": SvgSymbolImage,
        "png": PngSymbolImage
    }
    args = parser.parse_args(cmd_args)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        qr = QRCode(args.version, args.ec_level, args.data, args.mask)
    except ValueError as error:
        parser.error(str(error))
    logger.info("Built %r", qr)

    image_class = image_classes[args.file_type]
    image_args = {"border": args.border}
    if image_class is PngSymbolImage:
        image_args["scale"] = args.scale
    try:
        image = image_class(qr, **image_args)
    except ValueError as error:
        parser.error(str(error))
    image.save(args.out)
    logger.info("Saved %s image to %s", args.file_type, args.out)
    return 0


if __name__ == "__main__":
    main()
