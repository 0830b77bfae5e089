import pytest

from imagor.generate import generate, generate_path, generate_unsafe
from imagor.params import Filter, Params
from imagor.parse import apply, parse
from imagor.signer import HMACSigner, default_signer

IMG_URL = "img.example.com/es/ge/f/original/2011/03/29/sample_60.jpg"
MAN = "https://foobar/en/latest/_images/man_before_sharpen.png"
BEACH = "http://images.example.com/static/img/beach.jpg"
SIGNED = "meta/10x11:12x13/fit-in/-300x-200/5x6/left/top/smart/filters:some_filter()/img"

PLAIN_URIS = [
    "meta/trim/10x11:12x13/fit-in/-300x-200/left/top/smart/filters:some_filter()/img",
    f"meta/trim:bottom-right:100/10x11:12x13/fit-in/-300x-200/left/top/smart/filters:some_filter()/{IMG_URL}",
    f"filters:watermark({IMG_URL},0,0,0)/img",
    f"filters:watermark({IMG_URL},0,0,0):brightness(-50):grayscale()/img",
    "filters:watermark(img.example.com/filters:label(abc):watermark(aaa.example.com/fit-in/"
    "filters:aaa(bbb))/aaa.jpg,0,0,0):brightness(-50):grayscale()/img",
    "filters:label(哈哈,1,2,3):brightness(-50):grayscale()/img",
    "meta/trim/0.2x0.15:0.45x0.67/fit-in/-300x-200/left/top/smart/filters:some_filter()/img",
]

UNSAFE_URIS = [
    f"unsafe/{MAN}",
    "unsafe/https%3A%2F%2Ffoobar%2Fen%2Flatest%2F_images%2Fman_before_sharpen.png%3Ffoo%3Dbar",
    f"unsafe/fit-in/0x0/5x6:7x8/{MAN}",
    f"unsafe/stretch/500x350/filters:watermark({BEACH},100,100,50)/{BEACH}",
] + [
    f"unsafe/{kw}%2Fimg"
    for kw in ["trim", "meta", "center", "smart", "fit-in", "stretch", "top", "left", "right", "bottom"]
]


@pytest.mark.parametrize("uri", PLAIN_URIS)
def test_generate_path_round_trip(uri):
    assert generate_path(parse(uri)) == uri


@pytest.mark.parametrize("uri", UNSAFE_URIS)
def test_generate_unsafe_round_trip(uri):
    assert generate_unsafe(parse(uri)) == uri


@pytest.mark.parametrize(
    "uri, signer",
    [
        (f"VTAq7YIRbEXgtwAcsTMhAjvBuT8=/{SIGNED}", default_signer("1234")),
        (f"XBCO7esuLsNQuSF2v9ie36pESRGx2rzLjhUxXWnV/{SIGNED}", HMACSigner("1234", 40, "sha256")),
    ],
)
def test_generate_signed_round_trip(uri, signer):
    assert generate(parse(uri), signer) == uri


def test_generate_signed_explicit():
    p = Params(
        image="img", crop_left=10, crop_top=11, crop_right=12, crop_bottom=13,
        width=300, height=200, meta=True, h_flip=True, v_flip=True, h_align="left",
        v_align="top", smart=True, fit_in=True, padding_left=5, padding_top=6,
        padding_right=5, padding_bottom=6, filters=[Filter("some_filter")],
    )
    assert generate(p, default_signer("1234")) == f"VTAq7YIRbEXgtwAcsTMhAjvBuT8=/{SIGNED}"
    assert generate(Params(image="foo.jpg"), default_signer("1234")) == "_-19cQt1szHeUV0WyWFntvTImDI=/foo.jpg"


def test_negative_dimension_flip():
    assert generate_unsafe(Params(width=-167, height=-169, image="foobar")) == "unsafe/-167x-169/foobar"


def test_flip_with_negative_cancels():
    assert generate_path(Params(width=-10, h_flip=True, image="a")) == "10x0/a"


def test_asymmetric_padding_and_tolerance():
    p = Params(trim_by="top-left", trim_tolerance=5, width=10, height=20,
               padding_left=1, padding_top=2, padding_right=3, padding_bottom=4, image="a.jpg")
    assert generate_path(p) == "trim:5/10x20/1x2:3x4/a.jpg"


def test_center_and_middle_are_omitted():
    assert generate_path(Params(h_align="center", v_align="middle", image="a")) == "a"


def test_query_image_is_escaped():
    assert generate_unsafe(Params(image="a b?c=d")) == "unsafe/a+b%3Fc%3Dd"


def test_base_params_generation():
    p = apply(parse("fit-in/200x0/filters:format(jpg)/abc.png"), "filters:watermark(example.jpg)/")
    assert generate_path(p) == "fit-in/200x0/filters:format(jpg):watermark(example.jpg)/abc.png"