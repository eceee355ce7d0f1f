"""
Thumbnail — blob URL parsing and destination naming.

Source URLs look like ``https://<account-host>/<container>/<path...>``, or
``http://<ip>:<port>/<account>/<container>/<path...>`` for local emulators. The
destination key is ``<path...>``: the thumbnail keeps the source blob's name
inside the destination container, so re-processing the same upload always
overwrites the same key.
"""
from __future__ import annotations

import ipaddress
import posixpath
import urllib.parse

from thumbnailer.exceptions import InvalidEventError


def split_blob_url(url: str) -> tuple[str, str]:
    """Return ``(container, blob_name)`` for a fully qualified blob URL."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidEventError("Blob URL is missing.")
    try:
        parsed = urllib.parse.urlsplit(url.strip())
    except ValueError:
        raise InvalidEventError(f"Blob URL is not a valid URL: {url!r}.")

    if not parsed.scheme or not parsed.netloc:
        raise InvalidEventError(f"Blob URL is not absolute: {url!r}.")

    path = parsed.path.lstrip("/")
    if _is_ip_host(parsed.hostname):
        # Emulator URLs (Azurite) put the account name before the container
        _, _, path = path.partition("/")
    container, _, name = path.partition("/")
    if not container or not name or name.endswith("/"):
        raise InvalidEventError(f"Blob URL has no blob name after the container: {url!r}.")
    return urllib.parse.unquote(container), urllib.parse.unquote(name)


def _is_ip_host(hostname: str | None) -> bool:
    try:
        ipaddress.ip_address(hostname or "")
    except ValueError:
        return False
    return True


def derive_blob_name(url: str) -> str:
    """Destination key for a source blob URL (everything after the container)."""
    _, name = split_blob_url(url)
    return name


def url_extension(url: str) -> str:
    """Extension of the URL's last path segment, including the leading dot.

    Query string and fragment are ignored. Returns ``""`` when there is none.
    """
    try:
        path = urllib.parse.urlsplit(url).path
    except ValueError:
        return ""
    _, ext = posixpath.splitext(urllib.parse.unquote(path))
    return ext
