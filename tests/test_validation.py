import pytest

from gamedev_hub.services.validation import (
    contains_script_tag, is_valid_bio, is_valid_link, sanitize_title,
)


@pytest.mark.parametrize(
    "link",
    [
        "https://example.com/file.zip",
        "http://itch.io/game",
        "https://www.example.co.uk",
        "https://my-game.dev/download?v=2",
    ],
)
def test_valid_links(link):
    assert is_valid_link(link)


@pytest.mark.parametrize(
    "link",
    [
        "not-a-url",
        "ftp://example.com/file.zip",
        "https://localhost/file",
        "javascript:alert(1)//https://a.com",
        "https://example.com/ has spaces",
    ],
)
def test_invalid_links(link):
    assert not is_valid_link(link)


def test_script_tag_check_is_case_insensitive_substring():
    assert contains_script_tag("a<SCRIPT>b")
    assert not contains_script_tag("<scr ipt>")
    # the filter is a blocklist only; attribute payloads pass and rely on escaping
    assert not contains_script_tag('<img src=x onerror="alert(1)">')


def test_bio_limits():
    assert is_valid_bio("")
    assert is_valid_bio("x" * 900)
    assert not is_valid_bio("x" * 901)


def test_sanitize_title():
    assert sanitize_title("<b>Bold</b>") == "bBold/b"
    assert sanitize_title("Tom &amp; Jerry &lt;3") == "Tom  Jerry 3"
    assert sanitize_title(" plain ") == "plain"
