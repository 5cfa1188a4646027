"""Share entities, reply parsing, permission negotiation and the ShareManager."""

from ocshare.sharing.entities import LinkShare, Share
from ocshare.sharing.exceptions import (
    ParseError,
    PasswordRequiredError,
    PasswordUpdateError,
    ShareError,
    TransportError,
)
from ocshare.sharing.manager import ShareManager
from ocshare.sharing.parser import (
    parse_any_share,
    parse_expire_date,
    parse_link_share,
    parse_share,
    resolve_link_url,
)
from ocshare.sharing.permissions import (
    SharePermission,
    find_existing_permissions,
    negotiate_permissions,
)
from ocshare.sharing.protocol import ShareJobs
from ocshare.sharing.types import Sharee, ShareType

__all__ = [
    "LinkShare",
    "ParseError",
    "PasswordRequiredError",
    "PasswordUpdateError",
    "Share",
    "ShareError",
    "ShareJobs",
    "ShareManager",
    "SharePermission",
    "ShareType",
    "Sharee",
    "TransportError",
    "find_existing_permissions",
    "negotiate_permissions",
    "parse_any_share",
    "parse_expire_date",
    "parse_link_share",
    "parse_share",
    "resolve_link_url",
]
