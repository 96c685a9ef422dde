"""
RDF terms and statements.

Statements are immutable (subject, predicate, object, graph) quads. Objects
form a closed tagged union of three variants:
- Reference: an absolute IRI, represented as a plain ``str``
- TypedLiteral: lexical form plus datatype IRI (and language tag)
- BlankNode: a document-local node label

Two references denote the same node iff they are string-equal.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union
from urllib.parse import urldefrag


# =============================================================================
# Vocabulary
# =============================================================================

RDF_TYPE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"
RDF_LANGSTRING = "http://www.w3.org/1999/02/22-rdf-syntax-ns#langString"
XSD_STRING = "http://www.w3.org/2001/XMLSchema#string"
XSD_INTEGER = "http://www.w3.org/2001/XMLSchema#integer"
XSD_DECIMAL = "http://www.w3.org/2001/XMLSchema#decimal"
XSD_DATETIME = "http://www.w3.org/2001/XMLSchema#dateTime"


# Type alias for node identifiers (absolute IRIs)
Reference = str


class TermKind(IntEnum):
    """Kind of an RDF term appearing in object position."""
    REFERENCE = 0
    LITERAL = 1
    BLANK_NODE = 2


class LiteralKind(IntEnum):
    """Datatypes the literal codec understands; everything else is OTHER."""
    STRING = 0
    INTEGER = 1
    DECIMAL = 2
    DATETIME = 3
    OTHER = 4


_KIND_BY_DATATYPE = {
    XSD_STRING: LiteralKind.STRING,
    XSD_INTEGER: LiteralKind.INTEGER,
    XSD_DECIMAL: LiteralKind.DECIMAL,
    XSD_DATETIME: LiteralKind.DATETIME,
}


# =============================================================================
# Term Representation
# =============================================================================

@dataclass(frozen=True, slots=True)
class TypedLiteral:
    """
    A literal value attached as a statement's object.

    Attributes:
        lexical: Lexical form as it appears in the serialized graph
        datatype: Datatype IRI (plain literals carry xsd:string)
        language: Language tag for rdf:langString literals
    """
    lexical: str
    datatype: str = XSD_STRING
    language: Optional[str] = None

    @property
    def kind(self) -> LiteralKind:
        """Codec kind of this literal. Language-tagged strings are OTHER."""
        if self.language is not None:
            return LiteralKind.OTHER
        return _KIND_BY_DATATYPE.get(self.datatype, LiteralKind.OTHER)

    @classmethod
    def string(cls, value: str) -> "TypedLiteral":
        return cls(lexical=value, datatype=XSD_STRING)

    @classmethod
    def lang_string(cls, value: str, language: str) -> "TypedLiteral":
        return cls(lexical=value, datatype=RDF_LANGSTRING, language=language)

    def __str__(self) -> str:
        if self.language is not None:
            return f'"{self.lexical}"@{self.language}'
        if self.datatype == XSD_STRING:
            return f'"{self.lexical}"'
        return f'"{self.lexical}"^^<{self.datatype}>'


@dataclass(frozen=True, slots=True)
class BlankNode:
    """A blank node, identified only within the document it appears in."""
    label: str

    def __str__(self) -> str:
        return f"_:{self.label}"


Node = Union[Reference, BlankNode]
ObjectValue = Union[Reference, TypedLiteral, BlankNode]


@dataclass(frozen=True, slots=True)
class Statement:
    """
    One fact in the graph.

    Equality is structural over all four components, so two statements with
    the same subject, predicate, object and graph are interchangeable.
    """
    subject: Node
    predicate: Reference
    object: ObjectValue
    graph: Reference

    def __str__(self) -> str:
        return f"{_node_str(self.subject)} <{self.predicate}> {_node_str(self.object)} <{self.graph}> ."


def _node_str(value: ObjectValue) -> str:
    if isinstance(value, str):
        return f"<{value}>"
    return str(value)


# =============================================================================
# Kind detection
# =============================================================================

def term_kind(value: ObjectValue) -> TermKind:
    """Classify an object value. Raises TypeError for anything outside the union."""
    if isinstance(value, str):
        return TermKind.REFERENCE
    if isinstance(value, TypedLiteral):
        return TermKind.LITERAL
    if isinstance(value, BlankNode):
        return TermKind.BLANK_NODE
    raise TypeError(f"Not an RDF term: {value!r}")


def is_reference(value: ObjectValue) -> bool:
    return isinstance(value, str)


def is_literal(value: ObjectValue) -> bool:
    return isinstance(value, TypedLiteral)


def is_blank_node(value: ObjectValue) -> bool:
    return isinstance(value, BlankNode)


def strip_fragment(ref: Reference) -> Reference:
    """Return the document part of an IRI, e.g. ``https://x.com/doc#me`` -> ``https://x.com/doc``."""
    return urldefrag(ref).url
