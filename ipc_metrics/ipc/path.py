"""
Endpoint path extraction for the ``ipc.endpoint`` tag.
"""

import re

_PATH_END = re.compile(r"[?#;]")


def path_from_url(url: str) -> str:
    """
    Extract a low-cardinality endpoint path from a URL.

    Scheme and authority are dropped, as are query strings, matrix parameters
    and fragments. Inputs that don't look like ``scheme://...`` are returned
    as they are. Never raises.

    Positions count characters, not encoded bytes: the three characters after
    the first colon are skipped before looking for the path, so a non-ASCII
    character there counts once.

    Args:
        url: Absolute, relative or malformed URL

    Returns:
        Path string, ``"/"`` when there is none

    Example:
        ```python
        path_from_url("http://host/foo/bar?x=1")  # "/foo/bar"
        path_from_url("http://host")              # "/"
        path_from_url("/already/a/path")          # "/already/a/path"
        ```
    """
    if not url:
        return "/"

    proto_end = url.find(":")
    if proto_end < 0:
        return url

    # Too short to hold "://"
    if len(url) - proto_end < 3:
        return url

    path_begin = url.find("/", proto_end + 3)
    if path_begin < 0:
        return "/"

    match = _PATH_END.search(url, path_begin + 1)
    if match is None:
        return url[path_begin:]

    return url[path_begin:match.start()]
