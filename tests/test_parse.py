import pytest

from imagor.params import TRIM_BY_BOTTOM_RIGHT, Filter, Params
from imagor.parse import apply, parse, parse_filters
from imagor.signer import HMACSigner, default_signer

IMG_URL = "img.example.com/es/ge/f/original/2011/03/29/sample_60.jpg"
NESTED = "img.example.com/filters:label(abc):watermark(aaa.example.com/fit-in/filters:aaa(bbb))/aaa.jpg,0,0,0"
MAN = "https://foobar/en/latest/_images/man_before_sharpen.png"
BEACH = "http://images.example.com/static/img/beach.jpg"


def _full(uri, **extra):
    base = dict(
        path=uri, image="img", trim=True, trim_by="top-left",
        crop_left=10, crop_top=11, crop_right=12, crop_bottom=13,
        width=300, height=200, meta=True, h_flip=True, v_flip=True,
        h_align="left", v_align="top", smart=True, fit_in=True,
        filters=[Filter("some_filter")],
    )
    base.update(extra)
    return Params(**base)


U1 = "meta/trim/10x11:12x13/fit-in/-300x-200/left/top/smart/filters:some_filter()/img"
U2 = f"meta/trim:bottom-right:100/10x11:12x13/fit-in/-300x-200/left/top/smart/filters:some_filter()/{IMG_URL}"
U3 = f"filters:watermark({IMG_URL},0,0,0)/img"
U4 = f"filters:watermark({IMG_URL},0,0,0):brightness(-50):grayscale()/img"
U5 = f"filters:watermark({NESTED}):brightness(-50):grayscale()/img"
U6 = "filters:label(哈哈,1,2,3):brightness(-50):grayscale()/img"
U7 = "meta/trim/0.2x0.15:0.45x0.67/fit-in/-300x-200/left/top/smart/filters:some_filter()/img"
QUERY = "https%3A%2F%2Ffoobar%2Fen%2Flatest%2F_images%2Fman_before_sharpen.png%3Ffoo%3Dbar"
SIGNED = "meta/10x11:12x13/fit-in/-300x-200/5x6/left/top/smart/filters:some_filter()/img"
TAIL = [Filter("brightness", "-50"), Filter("grayscale")]

CASES = [
    pytest.param(U1, _full(U1), id="non url image"),
    pytest.param(U2, _full(U2, image=IMG_URL, trim_by=TRIM_BY_BOTTOM_RIGHT, trim_tolerance=100), id="url image"),
    pytest.param(U3, Params(path=U3, image="img", filters=[Filter("watermark", f"{IMG_URL},0,0,0")]), id="url in filter"),
    pytest.param(U4, Params(path=U4, image="img", filters=[Filter("watermark", f"{IMG_URL},0,0,0"), *TAIL]), id="multiple"),
    pytest.param(U5, Params(path=U5, image="img", filters=[Filter("watermark", NESTED), *TAIL]), id="nested"),
    pytest.param(U6, Params(path=U6, image="img", filters=[Filter("label", "哈哈,1,2,3"), *TAIL]), id="unicode"),
    pytest.param(f"unsafe/{MAN}", Params(path=MAN, image=MAN, unsafe=True), id="no params"),
    pytest.param(f"unsafe/{QUERY}", Params(path=QUERY, image=MAN + "?foo=bar", unsafe=True), id="query"),
    pytest.param(
        f"unsafe/fit-in/0x0/5x6:7x8/{MAN}",
        Params(path=f"fit-in/0x0/5x6:7x8/{MAN}", image=MAN, unsafe=True, fit_in=True,
               padding_left=5, padding_top=6, padding_right=7, padding_bottom=8),
        id="padding without dimensions",
    ),
    pytest.param(
        f"unsafe/stretch/500x350/filters:watermark({BEACH},100,100,50)/{BEACH}",
        Params(path=f"stretch/500x350/filters:watermark({BEACH},100,100,50)/{BEACH}", image=BEACH,
               width=500, height=350, unsafe=True, stretch=True,
               filters=[Filter("watermark", f"{BEACH},100,100,50")]),
        id="url in filters",
    ),
    pytest.param(
        f"VTAq7YIRbEXgtwAcsTMhAjvBuT8=/{SIGNED}",
        _full(SIGNED, trim=False, trim_by="", hash="VTAq7YIRbEXgtwAcsTMhAjvBuT8=",
              padding_left=5, padding_top=6, padding_right=5, padding_bottom=6),
        id="hash",
    ),
    pytest.param(
        f"XBCO7esuLsNQuSF2v9ie36pESRGx2rzLjhUxXWnV/{SIGNED}",
        _full(SIGNED, trim=False, trim_by="", hash="XBCO7esuLsNQuSF2v9ie36pESRGx2rzLjhUxXWnV",
              padding_left=5, padding_top=6, padding_right=5, padding_bottom=6),
        id="hash custom signer",
    ),
    pytest.param(U7, _full(U7, crop_left=0.2, crop_top=0.15, crop_right=0.45, crop_bottom=0.67), id="crop percentage"),
]


@pytest.mark.parametrize("uri, expected", CASES)
def test_parse(uri, expected):
    assert parse(uri) == expected


@pytest.mark.parametrize(
    "keyword", ["trim", "meta", "center", "smart", "fit-in", "stretch", "top", "left", "right", "bottom"]
)
def test_image_contains_keyword(keyword):
    assert parse(f"unsafe/{keyword}%2Fimg") == Params(
        path=f"{keyword}%2Fimg", image=f"{keyword}/img", unsafe=True
    )


def test_parse_signatures_match():
    p = parse(f"VTAq7YIRbEXgtwAcsTMhAjvBuT8=/{SIGNED}")
    assert default_signer("1234").sign(p.path) == p.hash
    p = parse(f"XBCO7esuLsNQuSF2v9ie36pESRGx2rzLjhUxXWnV/{SIGNED}")
    assert HMACSigner("1234", 40, "sha256").sign(p.path) == p.hash


def test_parse_params_endpoint():
    p = parse("/params/_-19cQt1szHeUV0WyWFntvTImDI=/foo.jpg")
    assert p.params is True
    assert p.hash == "_-19cQt1szHeUV0WyWFntvTImDI="
    assert p.image == "foo.jpg"
    assert parse("/params/foo.jpg") == Params(params=True, path="foo.jpg", image="foo.jpg")


def test_parse_removes_line_breaks():
    assert parse("unsafe/fo\no.jpg").image == "foo.jpg"


def test_parse_keeps_invalid_escape():
    assert parse("unsafe/100%zz").image == "100%zz"


def test_apply_base_params():
    base = parse("fit-in/200x0/filters:format(jpg)/abc.png")
    p = apply(base, "filters:watermark(example.jpg)/")
    assert p.filters == [Filter("format", "jpg"), Filter("watermark", "example.jpg")]
    assert p.image == "abc.png"
    assert p.fit_in is True and p.width == 200
    assert base.filters == [Filter("format", "jpg")]


EXPECTED_FILTERS = [
    Filter("watermark", "s.example.com/filters:label(abc):watermark(aaa.example.com/fit-in/filters:aaa(bbb))/aaa.jpg,0,0,0"),
    Filter("brightness", "-50"),
    Filter("grayscale", ""),
]
FILTER_TEXT = (
    "filters:watermark(s.example.com/filters:label(abc):watermark(aaa.example.com/fit-in/"
    "filters:aaa(bbb))/aaa.jpg,0,0,0):brightness(-50):grayscale()"
)


def test_parse_filters_with_image():
    assert parse_filters(FILTER_TEXT + "/some/example/img") == (EXPECTED_FILTERS, "some/example/img")


def test_parse_filters_without_image():
    assert parse_filters(FILTER_TEXT) == (EXPECTED_FILTERS, "")
    assert parse_filters(FILTER_TEXT + "/") == (EXPECTED_FILTERS, "")


def test_parse_filters_plain_path():
    assert parse_filters("some/example/img") == ([], "some/example/img")


def test_parse_filters_drops_trailing_garbage():
    text = (
        "filters:watermark(s.example.com/filters:label(abc):watermark(aaa.example.com/fit-in/"
        "filters:aaa(bbb))/aaa.jpg,0,0,0):format()jpg:brightness(-50):grayscale()"
    )
    filters, image = parse_filters(text)
    assert filters == [EXPECTED_FILTERS[0], Filter("format", ""), *EXPECTED_FILTERS[1:]]
    assert image == ""