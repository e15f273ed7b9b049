"""Cover URL normalization.

Covers are often pasted as Google Drive share links, which serve an HTML
viewer rather than the image. Those links are rewritten to the direct image
host; anything else is stored as given.
"""

import re

# drive.google.com/file/d/<ID>, drive.google.com/open?id=<ID>, docs.google.com/file/d/<ID>
DRIVE_LINK_PATTERN = re.compile(
    r"(?:https?://)?"
    r"(?:drive\.google\.com/(?:file/d/|open\?id=)|docs\.google\.com/file/d/)"
    r"([a-zA-Z0-9_-]+)"
)

DIRECT_IMAGE_TEMPLATE = "https://lh3.googleusercontent.com/u/0/d/{file_id}"


def normalize_cover_url(url: str | None) -> str:
    """Return a direct-fetch image URL for ``url``.

    >>> normalize_cover_url("https://drive.google.com/file/d/ABC123/view")
    'https://lh3.googleusercontent.com/u/0/d/ABC123'
    >>> normalize_cover_url("https://example.com/cover.png")
    'https://example.com/cover.png'
    """
    if not url:
        return ""
    url = url.strip()
    match = DRIVE_LINK_PATTERN.search(url)
    if match:
        return DIRECT_IMAGE_TEMPLATE.format(file_id=match.group(1))
    return url
