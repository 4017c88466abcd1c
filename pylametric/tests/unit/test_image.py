import base64
import io

import pytest

from pylametric.exceptions import ImageEncodingFailed
from pylametric.image import scaled_size
from pylametric.model import SimpleFrame, StaticImageIcon, encode_frame, encode_icon

PNG_PREFIX = "data:image/png;base64,"


@pytest.mark.parametrize("size,expected", [
    ((16, 16), (8, 8)),
    ((32, 16), (8, 4)),
    ((10, 40), (2, 8)),
    ((8, 8), (8, 8)),
    ((4, 4), (4, 4)),
    ((2, 8), (2, 8)),
    ((1000, 1), (8, 1)),
])
def test_scaled_size(size, expected):
    assert scaled_size(size) == expected


def _decode(uri):
    from PIL import Image
    assert uri.startswith(PNG_PREFIX)
    return Image.open(io.BytesIO(base64.b64decode(uri[len(PNG_PREFIX):])))


def test_image_icon_is_downscaled():
    Image = pytest.importorskip("PIL.Image")
    uri = encode_icon(StaticImageIcon(Image.new("RGB", (32, 16), "red")))
    img = _decode(uri)
    assert img.format == "PNG"
    assert img.size == (8, 4)


def test_small_image_not_upscaled():
    Image = pytest.importorskip("PIL.Image")
    img = _decode(encode_icon(StaticImageIcon(Image.new("RGBA", (3, 5)))))
    assert img.size == (3, 5)


def test_image_icon_from_bytes_and_path(tmp_path):
    Image = pytest.importorskip("PIL.Image")
    path = tmp_path / "icon.gif"
    Image.new("RGB", (24, 24), "blue").save(path)
    assert _decode(encode_icon(StaticImageIcon(str(path)))).size == (8, 8)
    assert _decode(encode_icon(StaticImageIcon(path.read_bytes()))).size == (8, 8)


def test_image_icon_in_frame():
    Image = pytest.importorskip("PIL.Image")
    out = encode_frame(SimpleFrame("pic", StaticImageIcon(Image.new("RGB", (8, 8)))))
    assert out["icon"].startswith(PNG_PREFIX)
    assert out["text"] == "pic"


def test_bad_image_data_fails():
    pytest.importorskip("PIL")
    with pytest.raises(ImageEncodingFailed):
        encode_icon(StaticImageIcon(b"definitely not an image"))


def test_missing_pillow_fails(monkeypatch):
    import pylametric.image
    monkeypatch.setattr(pylametric.image, "IMAGE_SUPPORT", False)
    with pytest.raises(ImageEncodingFailed):
        encode_icon(StaticImageIcon(b"\x89PNG"))


def test_capability_flag():
    import pylametric.image
    assert StaticImageIcon.supported() is pylametric.image.IMAGE_SUPPORT


def test_capability_flag_follows_image_module(monkeypatch):
    import pylametric.image
    monkeypatch.setattr(pylametric.image, "IMAGE_SUPPORT", False)
    assert StaticImageIcon.supported() is False
    monkeypatch.setattr(pylametric.image, "IMAGE_SUPPORT", True)
    assert StaticImageIcon.supported() is True
