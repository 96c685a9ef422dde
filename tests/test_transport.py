"""
Tests for the HTTP transport, against httpx.MockTransport.
"""

import asyncio

import httpx
import pytest

from tripledoc.config import ClientConfig
from tripledoc.document import create_document, fetch_document
from tripledoc.errors import ConflictError, HttpError, NetworkError
from tripledoc.terms import Statement, TypedLiteral
from tripledoc.transport import HttpTransport, Transport

DOC = "https://pod.example/doc"
NAME = "http://xmlns.com/foaf/0.1/name"


def run(coro):
    return asyncio.run(coro)


def make_transport(handler, config=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(config=config, client=client)


class TestGet:

    def test_get_sends_accept_and_returns_body(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=b"<#a> <#b> <#c> .", headers={"Content-Type": "text/turtle"})

        response = run(make_transport(handler).get(DOC))

        assert seen[0].method == "GET"
        assert seen[0].headers["Accept"] == "text/turtle"
        assert seen[0].headers["User-Agent"] == "tripledoc"
        assert response.body == b"<#a> <#b> <#c> ."
        assert response.content_type == "text/turtle"

    def test_http_error(self):
        transport = make_transport(lambda request: httpx.Response(404, text="Not found"))
        with pytest.raises(HttpError) as excinfo:
            run(transport.get(DOC))
        assert excinfo.value.status_code == 404
        assert excinfo.value.message == "Not found"

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError):
            run(make_transport(handler).get(DOC))

    def test_custom_headers_from_config(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200)

        config = ClientConfig(headers={"Authorization": "Bearer token"}, user_agent="notes-app")
        run(make_transport(handler, config).get(DOC))
        assert seen[0].headers["Authorization"] == "Bearer token"
        assert seen[0].headers["User-Agent"] == "notes-app"


class TestCreate:

    def test_conditional_put(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, headers={"Link": '<doc.acl>; rel="acl"'})

        statement = Statement(DOC + "#me", NAME, TypedLiteral("Alice"), DOC)
        response = run(make_transport(handler).create(DOC, [statement]))

        request = seen[0]
        assert request.method == "PUT"
        assert request.headers["If-None-Match"] == "*"
        assert request.headers["Content-Type"] == "text/turtle"
        assert request.content == f'<{DOC}#me> <{NAME}> "Alice" .\n'.encode()
        assert response.status_code == 201

    @pytest.mark.parametrize("status", [409, 412])
    def test_existing_resource_is_conflict(self, status):
        transport = make_transport(lambda request: httpx.Response(status))
        with pytest.raises(ConflictError):
            run(transport.create(DOC, []))

    def test_other_failure(self):
        transport = make_transport(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(HttpError) as excinfo:
            run(transport.create(DOC, []))
        assert not isinstance(excinfo.value, ConflictError)


class TestUpdate:

    def test_sparql_patch(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(205)

        old = Statement(DOC + "#me", NAME, TypedLiteral("A"), DOC)
        new = Statement(DOC + "#me", NAME, TypedLiteral("B"), DOC)
        run(make_transport(handler).update(DOC, [old], [new]))

        request = seen[0]
        assert request.method == "PATCH"
        assert request.headers["Content-Type"] == "application/sparql-update"
        body = request.content.decode()
        assert body.startswith("DELETE DATA {")
        assert "INSERT DATA {" in body

    def test_empty_diff_sends_nothing(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200)

        run(make_transport(handler).update(DOC, [], []))
        assert seen == []

    def test_server_diagnostic_in_error(self):
        transport = make_transport(lambda request: httpx.Response(409, text="Patch conflict"))
        new = Statement(DOC + "#me", NAME, TypedLiteral("B"), DOC)
        with pytest.raises(HttpError, match="Patch conflict"):
            run(transport.update(DOC, [], [new]))


class TestEndToEnd:

    def test_satisfies_protocol(self):
        assert isinstance(HttpTransport(), Transport)

    def test_fetch_edit_save(self):
        requests = []

        def handler(request):
            requests.append(request)
            if request.method == "GET":
                return httpx.Response(
                    200,
                    content=f'<#me> <{NAME}> "Alice" .'.encode(),
                    headers={"Content-Type": "text/turtle", "Link": '<doc.acl>; rel="acl"'},
                )
            return httpx.Response(200)

        transport = make_transport(handler)
        document = run(fetch_document(DOC + "#me", transport=transport))
        assert document.get_acl_ref() == "https://pod.example/doc.acl"

        document.get_subject(DOC + "#me").set_literal(NAME, "Alicia")
        saved = run(document.save())

        assert requests[-1].method == "PATCH"
        assert saved.get_subject(DOC + "#me").get_string(NAME) == "Alicia"

    def test_create_then_conflict(self):
        transport = make_transport(lambda request: httpx.Response(412))
        document = create_document(DOC, transport=transport)
        document.add_subject(identifier="me").add_literal(NAME, "Alice")
        with pytest.raises(ConflictError):
            run(document.save())
        assert not document.exists_remotely
