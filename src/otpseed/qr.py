"""
QR rendering for provisioning URIs.

The URI is produced by :func:`otpseed.utils.build_uri`; everything here only
turns that text into something an authenticator app can scan.
"""

import base64
import io
import logging

import qrcode
from PIL import Image
from qrcode.image.pil import PilImage

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 200
DEFAULT_HEIGHT = 200


def _qr(uri: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, border=4)
    qr.add_data(uri)
    qr.make(fit=True)
    return qr


def make_qr_image(uri: str, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> Image.Image:
    """
    Encodes ``uri`` as a QR code scaled to ``width`` x ``height`` pixels.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")
    qr = _qr(uri)
    img = qr.make_image(image_factory=PilImage).get_image()
    logger.debug("rendered QR version %d at %dx%d", qr.version, width, height)
    # nearest keeps the modules sharp
    return img.convert("RGB").resize((width, height), Image.NEAREST)


def qr_png_bytes(uri: str, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> bytes:
    buffered = io.BytesIO()
    make_qr_image(uri, width, height).save(buffered, format="PNG")
    return buffered.getvalue()


def qr_data_uri(uri: str, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> str:
    """
    The QR code as a ``data:image/png;base64,...`` string, ready for an
    ``<img src>`` attribute.
    """
    return "data:image/png;base64," + base64.b64encode(qr_png_bytes(uri, width, height)).decode("ascii")


def qr_ascii(uri: str, invert: bool = False) -> str:
    """Terminal rendering of the QR code."""
    out = io.StringIO()
    _qr(uri).print_ascii(out=out, invert=invert)
    return out.getvalue()
