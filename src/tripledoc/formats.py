"""
Serialized graph formats.

Parsing goes through pyoxigraph's Rust parsers; every parsed statement is
placed in the document's context. Serialization produces N-Triples lines,
which are also valid Turtle and valid SPARQL ``DATA`` blocks.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from pyoxigraph import BlankNode as OxBlankNode
from pyoxigraph import Literal as OxLiteral
from pyoxigraph import NamedNode, RdfFormat
from pyoxigraph import parse as oxigraph_parse

from tripledoc.errors import ParseError
from tripledoc.terms import (
    BlankNode,
    ObjectValue,
    RDF_LANGSTRING,
    Reference,
    Statement,
    TypedLiteral,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "text/turtle"

FORMAT_MAP = {
    "text/turtle": RdfFormat.TURTLE,
    "application/x-turtle": RdfFormat.TURTLE,
    "application/n-triples": RdfFormat.N_TRIPLES,
    "text/plain": RdfFormat.N_TRIPLES,
    "application/n-quads": RdfFormat.N_QUADS,
    "application/trig": RdfFormat.TRIG,
    "text/n3": RdfFormat.N3,
    "application/rdf+xml": RdfFormat.RDF_XML,
}


# =============================================================================
# Parsing
# =============================================================================

def _from_oxigraph(term) -> ObjectValue:
    if isinstance(term, NamedNode):
        return term.value
    if isinstance(term, OxBlankNode):
        return BlankNode(term.value)
    if isinstance(term, OxLiteral):
        if term.language:
            return TypedLiteral(term.value, RDF_LANGSTRING, term.language)
        return TypedLiteral(term.value, term.datatype.value)
    raise ParseError(f"Unsupported term in document: {term}")


def parse_statements(
    body: Union[bytes, str],
    base_ref: Reference,
    content_type: Optional[str] = None,
) -> list[Statement]:
    """
    Parse a serialized graph into statements belonging to ``base_ref``.

    Args:
        body: Serialized graph
        base_ref: Canonical document reference, used as base IRI and context
        content_type: Media type of ``body``; Turtle when unknown

    Raises:
        ParseError: if the body is not valid in the given format
    """
    media_type = (content_type or DEFAULT_CONTENT_TYPE).split(";", 1)[0].strip().lower()
    rdf_format = FORMAT_MAP.get(media_type)
    if rdf_format is None:
        logger.debug(f"Unknown content type {media_type!r}, parsing {base_ref} as Turtle")
        rdf_format = RdfFormat.TURTLE

    statements = []
    try:
        for quad in oxigraph_parse(body, rdf_format, base_iri=base_ref):
            statements.append(Statement(
                subject=_from_oxigraph(quad.subject),
                predicate=quad.predicate.value,
                object=_from_oxigraph(quad.object),
                graph=base_ref,
            ))
    except (SyntaxError, ValueError) as e:
        raise ParseError(str(e), base_ref=base_ref) from e
    return statements


# =============================================================================
# Serialization
# =============================================================================

def _to_oxigraph(value: ObjectValue):
    if isinstance(value, str):
        return NamedNode(value)
    if isinstance(value, BlankNode):
        return OxBlankNode(value.label)
    if value.language is not None:
        return OxLiteral(value.lexical, language=value.language)
    return OxLiteral(value.lexical, datatype=NamedNode(value.datatype))


def to_ntriples_line(statement: Statement) -> str:
    """One N-Triples line (without newline) for a statement; the graph is dropped."""
    return " ".join((
        str(_to_oxigraph(statement.subject)),
        str(NamedNode(statement.predicate)),
        str(_to_oxigraph(statement.object)),
        ".",
    ))


def serialize_statements(statements: Iterable[Statement]) -> str:
    return "".join(to_ntriples_line(st) + "\n" for st in statements)


def sparql_update_body(deletions: Iterable[Statement], additions: Iterable[Statement]) -> str:
    """
    A SPARQL Update request applying a diff.

    Empty halves are left out; a diff with neither yields an empty string.
    """
    parts = []
    deleted = serialize_statements(deletions)
    added = serialize_statements(additions)
    if deleted:
        parts.append(f"DELETE DATA {{\n{deleted}}}")
    if added:
        parts.append(f"INSERT DATA {{\n{added}}}")
    return " ;\n".join(parts)
