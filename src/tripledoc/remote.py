"""
Interpretation of remote responses.

Auxiliary resources of a document are advertised through response headers
rather than graph statements:
- ``Link: <doc.acl>; rel="acl"`` names the access control list, resolved
  against the document reference
- ``Updates-Via: wss://...`` names the live-update channel, used verbatim
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Union
from urllib.parse import urljoin

import httpx

from tripledoc.terms import Reference

logger = logging.getLogger(__name__)

HeadersLike = Union[httpx.Headers, Mapping[str, str], None]


@dataclass
class RemoteResponse:
    """What a transport hands back from a read or a create."""
    status_code: int = 200
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""

    def __post_init__(self):
        # Header lookups are case-insensitive regardless of what was passed in
        if not isinstance(self.headers, httpx.Headers):
            self.headers = httpx.Headers(self.headers or {})

    @property
    def content_type(self) -> Optional[str]:
        value = self.headers.get("Content-Type")
        if not value:
            return None
        return value.split(";", 1)[0].strip().lower()

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "RemoteResponse":
        return cls(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
        )


@dataclass
class Link:
    """One entry of a Link header."""
    uri: str
    params: dict[str, str] = field(default_factory=dict)

    @property
    def rels(self) -> list[str]:
        return self.params.get("rel", "").split()


class LinkHeaderParser:
    """Parser for RFC 8288 Link header values."""

    # <uri> followed by any number of ;-separated parameters
    LINK_PATTERN = re.compile(r'<([^>]*)>((?:\s*;\s*[^;,]+)*)')

    # name, name=token or name="quoted"
    PARAM_PATTERN = re.compile(r';\s*([^=;,\s]+)\s*(?:=\s*(?:"([^"]*)"|([^;,\s]*)))?')

    @classmethod
    def parse(cls, value: str) -> list[Link]:
        links = []
        for match in cls.LINK_PATTERN.finditer(value):
            params = {}
            for name, quoted, token in cls.PARAM_PATTERN.findall(match.group(2)):
                name = name.lower()
                # First occurrence of a parameter wins
                if name not in params:
                    params[name] = quoted or token
            links.append(Link(uri=match.group(1), params=params))
        return links


def parse_link_header(value: Optional[str]) -> list[Link]:
    if not value:
        return []
    return LinkHeaderParser.parse(value)


def _as_headers(headers: HeadersLike) -> httpx.Headers:
    if isinstance(headers, httpx.Headers):
        return headers
    return httpx.Headers(headers or {})


def extract_acl_ref(headers: HeadersLike, document_ref: Reference) -> Optional[Reference]:
    """
    The ACL reference advertised by a ``Link`` header, resolved against ``document_ref``.

    Returns None unless exactly one link carries ``rel="acl"``.
    """
    headers = _as_headers(headers)
    acl_links = []
    for value in headers.get_list("Link"):
        acl_links.extend(link for link in parse_link_header(value) if "acl" in link.rels)

    if len(acl_links) != 1:
        if acl_links:
            logger.warning(f"Ignoring {len(acl_links)} ambiguous ACL links for {document_ref}")
        return None
    return urljoin(document_ref, acl_links[0].uri)


def extract_live_update_ref(headers: HeadersLike) -> Optional[Reference]:
    """The live-update channel from ``Updates-Via``, without URL resolution."""
    value = _as_headers(headers).get("Updates-Via")
    return value.strip() if value else None
