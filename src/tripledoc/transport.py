"""
Transport layer between documents and the remote server.

Documents only talk to a Transport; HttpTransport is the default one, which
reads with GET, creates with a conditional PUT and writes diffs with a
SPARQL Update PATCH. Transports never retry.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence, runtime_checkable

import httpx

from tripledoc.config import ClientConfig
from tripledoc.errors import ConflictError, HttpError, NetworkError
from tripledoc.formats import parse_statements, serialize_statements, sparql_update_body
from tripledoc.remote import RemoteResponse
from tripledoc.terms import Reference, Statement

logger = logging.getLogger(__name__)

SPARQL_UPDATE = "application/sparql-update"


@runtime_checkable
class Transport(Protocol):
    """What a document needs from the outside world."""

    async def get(self, ref: Reference) -> RemoteResponse:
        ...

    async def create(self, ref: Reference, additions: Sequence[Statement]) -> RemoteResponse:
        ...

    async def update(
        self,
        ref: Reference,
        deletions: Sequence[Statement],
        additions: Sequence[Statement],
    ) -> None:
        ...

    def parse(self, body: bytes, base_ref: Reference, content_type: Optional[str] = None) -> list[Statement]:
        ...


class HttpTransport:
    """
    Transport over HTTP using httpx.

    Args:
        config: Client settings (timeouts, headers)
        client: An existing AsyncClient to reuse; when omitted a client is
            opened per request
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or ClientConfig()
        self._client = client

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {"User-Agent": self.config.user_agent}
        headers.update(self.config.headers)
        headers.update(extra)
        return headers

    async def _send(self, method: str, ref: Reference, **kwargs) -> httpx.Response:
        try:
            if self._client is not None:
                return await self._client.request(method, ref, **kwargs)
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                follow_redirects=self.config.follow_redirects,
            ) as client:
                return await client.request(method, ref, **kwargs)
        except httpx.RequestError as e:
            raise NetworkError(ref, e) from e

    async def get(self, ref: Reference) -> RemoteResponse:
        response = await self._send("GET", ref, headers=self._headers(Accept=self.config.accept))
        if not response.is_success:
            raise HttpError(ref, response.status_code, response.text)
        logger.info(f"Fetched {ref} ({len(response.content)} bytes)")
        return RemoteResponse.from_httpx(response)

    async def create(self, ref: Reference, additions: Sequence[Statement]) -> RemoteResponse:
        response = await self._send(
            "PUT",
            ref,
            content=serialize_statements(additions).encode("utf-8"),
            headers=self._headers(**{
                "Content-Type": self.config.content_type,
                "If-None-Match": "*",
            }),
        )
        # 412 is the answer to If-None-Match on an existing resource
        if response.status_code in (409, 412):
            raise ConflictError(ref, response.status_code, response.text)
        if not response.is_success:
            raise HttpError(ref, response.status_code, response.text)
        logger.info(f"Created {ref} with {len(additions)} statements")
        return RemoteResponse.from_httpx(response)

    async def update(
        self,
        ref: Reference,
        deletions: Sequence[Statement],
        additions: Sequence[Statement],
    ) -> None:
        body = sparql_update_body(deletions, additions)
        if not body:
            logger.debug(f"Nothing to update for {ref}")
            return
        response = await self._send(
            "PATCH",
            ref,
            content=body.encode("utf-8"),
            headers=self._headers(**{"Content-Type": SPARQL_UPDATE}),
        )
        if not response.is_success:
            raise HttpError(ref, response.status_code, response.text)
        logger.info(f"Updated {ref}: -{len(deletions)} +{len(additions)} statements")

    def parse(self, body: bytes, base_ref: Reference, content_type: Optional[str] = None) -> list[Statement]:
        return parse_statements(body, base_ref, content_type)
