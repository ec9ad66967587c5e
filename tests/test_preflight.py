import pytest

from editorial.core.errors import ErrorKind, GenerationError
from editorial.schemas.generate import GenerateIn
from editorial.services.preflight import (
    build_request,
    check_inline_images,
    detect_url_mode,
    is_direct_image_url,
    sanitize_preferences,
)
from tests.fixtures import INLINE_IMAGE, URL_IMAGES


def _rejects(variant, **body):
    with pytest.raises(GenerationError) as exc:
        build_request(variant, GenerateIn(**body))
    assert exc.value.kind == ErrorKind.INVALID_INPUT
    return exc.value.message


def test_url_mode_detection():
    assert detect_url_mode(["https://x/y.jpg"], False)
    assert detect_url_mode([INLINE_IMAGE], True)
    assert not detect_url_mode([INLINE_IMAGE], False)
    assert not detect_url_mode([], False)


@pytest.mark.parametrize(
    "url, ok",
    [
        ("https://images.unsplash.com/photo-123", True),
        ("https://images.pexels.com/photos/1/p.jpeg?auto=compress", True),
        ("https://cdn.example.com/a/b.JPG", True),
        ("https://cdn.example.com/a/b.webp?w=1", True),
        ("https://example.com/gallery", False),
        ("https://example.com/image.gif", False),
    ],
)
def test_direct_image_urls(url, ok):
    assert is_direct_image_url(url) is ok


def test_url_request_is_trimmed():
    req = build_request("editorial", GenerateIn(images=[f"  {u}" for u in URL_IMAGES]))
    assert req.is_urls
    assert req.visual == URL_IMAGES
    assert req.mode == "visual-only"


def test_pinterest_pin_page_rejected():
    urls = URL_IMAGES[:2] + ["https://br.pinterest.com/pin/123456/"]
    message = _rejects("editorial", images=urls, isUrls=True)
    assert "Pinterest" in message


def test_not_direct_rejected():
    message = _rejects("global-editorial", images=URL_IMAGES[:2] + ["https://example.com/page"])
    assert "direct image links" in message


def test_image_count():
    _rejects("editorial", images=[INLINE_IMAGE] * 2)
    _rejects("pro-editorial")


def test_inline_must_be_data_uri():
    _rejects("editorial", images=[INLINE_IMAGE, INLINE_IMAGE, "not-an-image"])


def test_inline_size_limit():
    big = "data:image/png;base64," + "A" * 200
    with pytest.raises(GenerationError):
        check_inline_images([big] * 3, max_bytes=100)
    assert check_inline_images([INLINE_IMAGE] * 3, max_bytes=1000) == [INLINE_IMAGE] * 3


def test_studio_brand_rules():
    req = build_request("studio", GenerateIn(brandRefs=[" Khaite ", "Toteme", ""], category="beauty", note=" hi "))
    assert req.brand_names == ["Khaite", "Toteme"]
    assert req.mode == "brands-only"
    assert req.category == "beauty"
    assert req.note == "hi"
    _rejects("studio", brandRefs=["Khaite"])
    _rejects("studio", brandRefs=["a1", "b2", "c3", "d4"])
    assert "at least 2" in _rejects("studio")


def test_brands_ignored_outside_studio():
    req = build_request("editorial", GenerateIn(images=[INLINE_IMAGE] * 3, brandRefs=["Khaite", "Toteme"]))
    assert req.brand_names == []


def test_preferences_fall_back_to_defaults():
    prefs = sanitize_preferences({"occasion": "noite", "priceRange": "caro", "region": 3, "fragranceIntensity": "suave"})
    assert prefs.occasion == "noite"
    assert prefs.priceRange == "misturar"
    assert prefs.region == "brasil"
    assert prefs.fragranceIntensity == "suave"
    assert sanitize_preferences(None).occasion == "casual"


def test_brand_info_for_pro():
    req = build_request("pro-editorial", GenerateIn(images=[INLINE_IMAGE] * 3, brandInfo={"name": "Sol", "objective": None}))
    assert req.brand_info.name == "Sol"
    assert req.brand_info.objective == ""


def test_unknown_variant():
    _rejects("nope", images=[INLINE_IMAGE] * 3)
