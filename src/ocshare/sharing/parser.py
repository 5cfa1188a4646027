"""Reply parsing — OCS envelopes into Share and LinkShare entities.

Servers from several protocol generations are supported, so the parsers
resolve a few representation differences:

- link URLs: an explicit ``url`` field (8.2+), the ``index.php/s/<token>``
  scheme (8.0+), or the legacy ``public.php?service=files&t=<token>`` one
- ``id``: emitted as an integer by old servers, as a string by newer ones
- ``expiration``: a ``"yyyy-MM-dd 00:00:00"`` string, or absent/null

Missing optional fields become empty values.  A missing ``id`` or
``path``, or a ``data`` section that is not an object, raises
:class:`ParseError`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode, urlsplit, urlunsplit

from ocshare.account import make_server_version

from .entities import LinkShare, Share
from .exceptions import ParseError
from .permissions import SharePermission
from .types import Sharee, ShareType, coerce_share_type

if TYPE_CHECKING:
    from ocshare.account import Account

    from .manager import ShareManager

logger = logging.getLogger(__name__)

EXPIRE_DATE_FORMAT = "%Y-%m-%d 00:00:00"
"""Fixed pattern of the ``expiration`` field."""

LINK_SCHEME_VERSION = make_server_version(8, 0, 0)
"""First server version serving links under ``index.php/s/``."""


# =============================================================================
# Envelope helpers
# =============================================================================


def _section(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, Mapping) else None


def ocs_data(reply: Mapping[str, Any]) -> Any:
    """Return the ``ocs.data`` section of a reply, or ``None``."""
    return _section(_section(reply, "ocs"), "data")


def ocs_status(reply: Mapping[str, Any]) -> tuple[int, str]:
    """Return ``(statuscode, message)`` from the ``ocs.meta`` section."""
    meta = _section(_section(reply, "ocs"), "meta")
    if not isinstance(meta, Mapping):
        meta = {}
    return _to_int(meta.get("statuscode")), str(meta.get("message") or "")


# =============================================================================
# Field helpers
# =============================================================================


def _to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _to_str(value: Any) -> str:
    return "" if value is None else str(value)


def normalize_id(value: Any) -> str:
    """Canonical string form of a share id sent as an int or a string."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_expire_date(value: Any) -> date | None:
    """Parse an ``expiration`` field; anything but a well-formed string is unset."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value, EXPIRE_DATE_FORMAT).date()
    except ValueError:
        logger.debug("Ignoring malformed expiration %r", value)
        return None


def concat_url_path(base_url: str, path: str, query: list[tuple[str, str]] | None = None) -> str:
    """Append *path* to the path of *base_url*, with exactly one ``/`` between them."""
    parts = urlsplit(base_url)
    base_path = parts.path if parts.path.endswith("/") else parts.path + "/"
    new_query = urlencode(query) if query else parts.query
    return urlunsplit(parts._replace(path=base_path + path.lstrip("/"), query=new_query))


def resolve_link_url(data: Mapping[str, Any], server_version: int, base_url: str) -> str:
    """Public URL of a link share.

    An explicit ``url`` wins; otherwise the URL is derived from the
    token using the scheme of *server_version*.
    """
    if "url" in data:
        return _to_str(data["url"])
    token = _to_str(data.get("token"))
    if server_version >= LINK_SCHEME_VERSION:
        return concat_url_path(base_url, "index.php/s/" + token)
    return concat_url_path(base_url, "public.php", [("service", "files"), ("t", token)])


def _share_object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ParseError("data")
    return data


def _required(data: Mapping[str, Any], field: str) -> Any:
    value = data.get(field)
    if value is None or value == "":
        raise ParseError(field)
    return value


# =============================================================================
# Entity parsers
# =============================================================================


def parse_link_share(
    data: Mapping[str, Any],
    account: Account,
    *,
    manager: ShareManager | None = None,
) -> LinkShare:
    """Build a :class:`LinkShare` from one ``data`` object."""
    data = _share_object(data)
    share_id = normalize_id(_required(data, "id"))
    path = _to_str(_required(data, "path"))
    return LinkShare(
        account,
        share_id,
        path,
        name=_to_str(data.get("name")),
        token=_to_str(data.get("token")),
        permissions=SharePermission(_to_int(data.get("permissions"))),
        # Servers report a password as a string in share_with
        password_set=isinstance(data.get("share_with"), str),
        url=resolve_link_url(data, account.server_version_int, account.url),
        expire_date=parse_expire_date(data.get("expiration")),
        manager=manager,
    )


def parse_share(
    data: Mapping[str, Any],
    account: Account,
    *,
    manager: ShareManager | None = None,
) -> Share:
    """Build a user/group/remote :class:`Share` and its :class:`Sharee`."""
    data = _share_object(data)
    share_id = normalize_id(_required(data, "id"))
    path = _to_str(_required(data, "path"))
    share_type = coerce_share_type(data.get("share_type"))
    sharee = Sharee(
        share_with=_to_str(data.get("share_with")),
        display_name=_to_str(data.get("share_with_displayname")),
        type=share_type,
    )
    return Share(
        account,
        share_id,
        path,
        share_type,
        SharePermission(_to_int(data.get("permissions"))),
        sharee,
        manager=manager,
    )


def parse_any_share(
    data: Mapping[str, Any],
    account: Account,
    *,
    manager: ShareManager | None = None,
) -> Share:
    """Dispatch on ``share_type``: link shares get the link parser."""
    data = _share_object(data)
    if coerce_share_type(data.get("share_type")) == ShareType.LINK:
        return parse_link_share(data, account, manager=manager)
    return parse_share(data, account, manager=manager)
