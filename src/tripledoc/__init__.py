"""
tripledoc: typed, document-scoped access to Linked Data.

Read and edit the statements of a remote RDF document through subjects and
native Python values, then save the minimal diff back to the server.
"""

__version__ = "0.1.0"

from tripledoc.terms import (
    BlankNode,
    LiteralKind,
    Reference,
    Statement,
    TermKind,
    TypedLiteral,
    RDF_TYPE,
)
from tripledoc.literals import decode, encode
from tripledoc.index import TripleIndex
from tripledoc.subject import TripleSubject
from tripledoc.document import (
    TripleDocument,
    create_document,
    fetch_document,
)
from tripledoc.identifiers import generate_identifier
from tripledoc.transport import HttpTransport, Transport
from tripledoc.remote import RemoteResponse
from tripledoc.config import ClientConfig, load_config
from tripledoc.errors import (
    TripledocError,
    ParseError,
    DecodeError,
    RemoteError,
    NetworkError,
    HttpError,
    ConflictError,
)

__all__ = [
    # Data model
    "BlankNode",
    "LiteralKind",
    "Reference",
    "Statement",
    "TermKind",
    "TypedLiteral",
    "RDF_TYPE",
    # Codec
    "decode",
    "encode",
    # Documents and subjects
    "TripleIndex",
    "TripleSubject",
    "TripleDocument",
    "create_document",
    "fetch_document",
    "generate_identifier",
    # Remote access
    "HttpTransport",
    "Transport",
    "RemoteResponse",
    "ClientConfig",
    "load_config",
    # Errors
    "TripledocError",
    "ParseError",
    "DecodeError",
    "RemoteError",
    "NetworkError",
    "HttpError",
    "ConflictError",
]
