import base64
import io
import logging
import os
from typing import Tuple, Union

from pylametric.exceptions import ImageEncodingFailed

try:
    from PIL import Image
except ImportError:
    Image = None

log = logging.getLogger(__name__)

# Largest icon the display renders (pixels per side)
ICON_SIZE = 8

# Image icons need Pillow; without it StaticImageIcon fails to encode
IMAGE_SUPPORT = Image is not None


def scaled_size(size: Tuple[int, int], limit: int = ICON_SIZE) -> Tuple[int, int]:
    """
    Return the (width, height) an image of the given size is rescaled to so that
    neither side exceeds limit. Aspect ratio is kept and images that are already
    smaller than limit in both dimensions are returned unchanged.
    """
    width, height = size
    if width < limit and height < limit:
        return width, height
    factor = min(limit / width, limit / height)
    return max(1, round(width * factor)), max(1, round(height * factor))


def _open(source):
    if isinstance(source, (bytes, bytearray)):
        return Image.open(io.BytesIO(source))
    if isinstance(source, (str, os.PathLike)):
        return Image.open(source)
    return source


def to_png(source: Union["Image.Image", bytes, str, os.PathLike]) -> bytes:
    """Downscale source to fit the icon size and return it encoded as PNG."""
    if not IMAGE_SUPPORT:
        raise ImageEncodingFailed("Image icons require Pillow (pip install pylametric[image])")
    try:
        img = _open(source)
        size = scaled_size(img.size)
        if size != img.size:
            img = img.resize(size, resample=Image.Resampling.NEAREST)
        buf = io.BytesIO()
        img.save(buf, "PNG")
    except Exception as exc:
        log.debug(f"Unable to rescale image icon: {exc}")
        raise ImageEncodingFailed(f"Unable to rescale image icon: {exc}") from exc
    data = buf.getvalue()
    if not data:
        raise ImageEncodingFailed("Image icon produced no PNG data")
    return data


def to_data_uri(source) -> str:
    """Return the image as a data:image/png;base64 URI suitable for the icon field."""
    return "data:image/png;base64," + base64.b64encode(to_png(source)).decode("ascii")
