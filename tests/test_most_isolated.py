import math

import PIL.Image
import pytest

import most_isolated
from features import MalformedRecordError
from isolation import NoIsolatedPointError


@pytest.fixture
def features_file(tmp_path):
    path = tmp_path / "problem.txt"
    path.write_text("A 0 0\nB 1 0\nC 10 10\n")
    return path


def test_run(features_file):
    store, result = most_isolated.run(features_file)
    assert len(store) == 3
    assert result.feature.label == "C"
    assert result.distance == pytest.approx(math.sqrt(181))


def test_run_with_scipy(features_file):
    _, result = most_isolated.run(features_file, 'scipy-kdtree')
    assert result.feature.label == "C"


def test_describe(features_file):
    _, result = most_isolated.run(features_file)
    text = most_isolated.describe(result)
    assert text.splitlines()[0] == "most isolated feature - C"
    assert "(10, 10)" in text
    assert "13.4536" in text


def test_run_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        most_isolated.run(tmp_path / "nope.txt")
    bad = tmp_path / "bad.txt"
    bad.write_text("A 0 0\nB one 0\n")
    with pytest.raises(MalformedRecordError):
        most_isolated.run(bad)
    single = tmp_path / "single.txt"
    single.write_text("A 0 0\n")
    with pytest.raises(NoIsolatedPointError):
        most_isolated.run(single)


def test_render(features_file, tmp_path):
    store, result = most_isolated.run(features_file)
    output = tmp_path / "out.png"
    most_isolated.render(store, result, output, size=200)
    with PIL.Image.open(output) as image:
        assert image.size == (200, 200)
        # C is the top right corner of the drawing
        assert image.getpixel((200 - most_isolated.MARGIN, most_isolated.MARGIN)) == (255, 0, 0)
