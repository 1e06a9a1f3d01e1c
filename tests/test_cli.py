import pytest

from imagepro import geometry, pixel, region, warp
from imagepro.cli import build_parser, main
from imagepro.image import Image, load_image, save_image


def _gradient(width, height, depth=1):
    data = bytearray((x * 9 + y * 5 + c * 13) % 256
                     for y in range(height) for x in range(width) for c in range(depth))
    return Image(width, height, depth, data)


@pytest.fixture
def gray_file(tmp_path):
    path = tmp_path / "in.pgm"
    save_image(_gradient(12, 9), path)
    return path


@pytest.fixture
def colour_file(tmp_path):
    path = tmp_path / "in.ppm"
    save_image(_gradient(12, 9, 3), path)
    return path


def test_parser_defaults_follow_source():
    parser = build_parser()
    assert parser.parse_args(["rotate", "a.pgm", "b.pgm"]).angle == 30
    assert parser.parse_args(["binarize", "a.pgm", "b.pgm"]).threshold == 140
    assert parser.parse_args(["add", "a.pgm", "b.pgm"]).amount == 40


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_sobel_matches_library(gray_file, tmp_path):
    out = tmp_path / "out.pgm"
    assert main(["sobel", str(gray_file), str(out)]) == 0
    assert load_image(out).data == region.sobel(load_image(gray_file)).data


def test_rotate_with_angle(colour_file, tmp_path):
    out = tmp_path / "out.ppm"
    assert main(["rotate", str(colour_file), str(out), "--angle", "45"]) == 0
    expected = geometry.rotate(load_image(colour_file), 45)
    result = load_image(out)
    assert (result.width, result.height) == (expected.width, expected.height)
    assert result.data == expected.data


def test_blend_with_second_image(gray_file, tmp_path):
    second = tmp_path / "second.pgm"
    save_image(geometry.flip(load_image(gray_file)), second)
    out = tmp_path / "out.pgm"
    assert main(["blend", str(gray_file), str(out), "--second", str(second)]) == 0
    expected = pixel.blend_images(load_image(gray_file), load_image(second))
    assert load_image(out).data == expected.data


def test_warp_with_drag(gray_file, tmp_path):
    out = tmp_path / "out.pgm"
    assert main(["warp", str(gray_file), str(out), "--drag", "3", "3", "6", "5"]) == 0
    source, dest = warp.control_lines_from_drag((3, 3), (6, 5))
    expected = warp.warp(load_image(gray_file), source, dest)
    assert load_image(out).data == expected.data


def test_histeq_on_colour_fails(colour_file, tmp_path, capsys):
    out = tmp_path / "out.ppm"
    assert main(["histeq", str(colour_file), str(out)]) == 1
    assert "error" in capsys.readouterr().err
    assert not out.exists()


def test_missing_input_fails(tmp_path):
    assert main(["mirror", str(tmp_path / "nope.pgm"), str(tmp_path / "o.pgm")]) == 1


def test_mismatched_second_image_fails(gray_file, tmp_path):
    second = tmp_path / "small.pgm"
    save_image(_gradient(5, 5), second)
    out = tmp_path / "out.pgm"
    assert main(["diff", str(gray_file), str(out), "--second", str(second)]) == 1