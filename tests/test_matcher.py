import pytest

from logtailer.matcher import ContainsMatcher, Matcher


def test_match():
    data = b"2020-12-25 14:54:38.523  ERROR exception occurs"

    assert ContainsMatcher("ERROR", True).match(data) is True
    assert ContainsMatcher("exception", True).match(data) is True

    assert ContainsMatcher("ERROR", False).match(data) is False
    assert ContainsMatcher("exception", False).match(data) is False
    assert ContainsMatcher("WARN", True).match(data) is False


def test_match_multibyte():
    data = "2020-12-25 14:54:38.523  错误 error 异常 exception 数据找不到信息".encode("utf-8")

    assert ContainsMatcher("error", True).match(data) is True
    assert ContainsMatcher("exception", True).match(data) is True
    assert ContainsMatcher("错误", True).match(data) is True
    assert ContainsMatcher("异常", True).match(data) is True

    assert ContainsMatcher("error", False).match(data) is False
    assert ContainsMatcher("exception", False).match(data) is False
    assert ContainsMatcher("错误", False).match(data) is False
    assert ContainsMatcher("异常", False).match(data) is False
    assert ContainsMatcher("找不到", False).match(data) is False

    assert ContainsMatcher("没问题", False).match(data) is True


def test_empty_pattern_rejected():
    with pytest.raises(ValueError):
        ContainsMatcher("", True)


@pytest.mark.parametrize("contains", [True, False])
def test_empty_data_never_matches(contains):
    assert ContainsMatcher("x", contains).match(b"") is False


def test_repeated_prefix_pattern():
    assert ContainsMatcher("aab", True).match(b"aaab") is True
    assert ContainsMatcher("abab", True).match(b"abaabab") is True
    assert ContainsMatcher("abab", True).match(b"abaaba") is False


def test_matcher_is_abstract():
    with pytest.raises(TypeError):
        Matcher()