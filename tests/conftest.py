"""Shared fixtures: a sample document graph and an in-memory transport."""

import pytest

from tripledoc.formats import parse_statements
from tripledoc.remote import RemoteResponse
from tripledoc.terms import RDF_TYPE, Statement, TypedLiteral, XSD_DATETIME, XSD_DECIMAL, XSD_INTEGER

DOC = "https://document.com/"
PRED = "https://mock-predicate.com/"
NODE = "https://mock-object.com/"
NODE2 = "https://mock-object-2.com/"
TYPE = "https://mock-type-object.com/"

LITERAL_THEN_NODE = "https://subject1.com/"
NODE_THEN_LITERAL = "https://subject2.com/"
WITH_LITERAL = "https://subject3.com/"
WITH_NODE = "https://subject4.com/"
TWO_LITERALS = "https://subject5.com/"
TWO_NODES = "https://subject6.com/"
WITH_DATE = "https://subject7.com/"
WITH_INTEGER = "https://subject8.com/"
WITH_DECIMAL = "https://subject9.com/"
TYPED = "https://subject10.com/"
EMPTY = "https://empty-subject.com/"

VALUE = "Arbitrary literal value"
VALUE2 = "Another arbitrary literal value"


def st(subject, obj, predicate=PRED, graph=DOC):
    return Statement(subject, predicate, obj, graph)


SAMPLE_STATEMENTS = [
    st(LITERAL_THEN_NODE, TypedLiteral(VALUE)),
    st(LITERAL_THEN_NODE, NODE),
    st(NODE_THEN_LITERAL, NODE),
    st(NODE_THEN_LITERAL, TypedLiteral(VALUE)),
    st(WITH_LITERAL, TypedLiteral(VALUE)),
    st(WITH_NODE, NODE),
    st(TWO_LITERALS, TypedLiteral(VALUE)),
    st(TWO_LITERALS, TypedLiteral(VALUE2)),
    st(TWO_LITERALS, NODE),
    st(TWO_NODES, NODE),
    st(TWO_NODES, NODE2),
    st(TWO_NODES, TypedLiteral(VALUE)),
    st(TYPED, TYPE, predicate=RDF_TYPE),
    st(WITH_DATE, TypedLiteral("1970-01-01T00:00:00Z", XSD_DATETIME)),
    st(WITH_DECIMAL, TypedLiteral("4.2", XSD_DECIMAL)),
    st(WITH_INTEGER, TypedLiteral("1337", XSD_INTEGER)),
]


class FakeTransport:
    """Records calls; fails with ``error`` when it is set."""

    def __init__(self, body=b"", headers=None, content_type="text/turtle"):
        self.body = body
        self.headers = dict(headers or {})
        self.headers.setdefault("Content-Type", content_type)
        self.error = None
        self.calls = []

    async def get(self, ref):
        self.calls.append(("get", ref))
        if self.error:
            raise self.error
        return RemoteResponse(200, self.headers, self.body)

    async def create(self, ref, additions):
        self.calls.append(("create", ref, list(additions)))
        if self.error:
            raise self.error
        return RemoteResponse(201, self.headers)

    async def update(self, ref, deletions, additions):
        self.calls.append(("update", ref, list(deletions), list(additions)))
        if self.error:
            raise self.error

    def parse(self, body, base_ref, content_type=None):
        return parse_statements(body, base_ref, content_type)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def sample_statements():
    return list(SAMPLE_STATEMENTS)
