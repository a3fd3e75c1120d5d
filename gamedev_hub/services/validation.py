"""
Write-time checks for user supplied text.

These are length and shape limits, not an HTML sanitizer. The `<script>`
filter only catches the literal tag; pages rely on Jinja2 autoescaping to
keep stored markup inert.
"""
import re

MAX_BIO_LENGTH = 900
MAX_TITLE_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 900
MAX_LINK_LENGTH = 50

_SCRIPT_TAG = re.compile(r"<script>", re.IGNORECASE)
_LINK_SHAPE = re.compile(r"https?://[\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,}(?:[/?#]\S*)?", re.IGNORECASE)
_TITLE_MARKUP = re.compile(r"[<>]|&\w*;")


def contains_script_tag(text: str) -> bool:
    return bool(_SCRIPT_TAG.search(text))


def is_valid_bio(bio: str) -> bool:
    return len(bio) <= MAX_BIO_LENGTH and not contains_script_tag(bio)


def is_valid_link(link: str) -> bool:
    return len(link) <= MAX_LINK_LENGTH and _LINK_SHAPE.fullmatch(link) is not None


def is_valid_post(title: str, description: str, link: str) -> bool:
    if len(title) > MAX_TITLE_LENGTH:
        return False
    if len(description) > MAX_DESCRIPTION_LENGTH or contains_script_tag(description):
        return False
    return is_valid_link(link)


def sanitize_title(title: str) -> str:
    """Drop angle brackets and entity sequences such as `&amp;`."""
    return _TITLE_MARKUP.sub("", title).strip()
