"""
Triple documents: immutable snapshots of one remote resource.

A document holds the statements of one resource, identified by its
canonical (fragment-free) reference. Documents never change after
construction. Subjects stage their edits, and save() writes the aggregated
diff to the remote server and returns the next snapshot:

    doc = create_document("https://pod.example/notes.ttl")
    note = doc.add_subject(identifier_prefix="note-")
    note.add_literal(SCHEMA_TEXT, "Hello")
    doc = await doc.save()

A document is either unsaved (never written, save() creates it) or saved
(save() patches it). A failed save changes nothing: the caller keeps the
old snapshot, staged changes are kept and save() can simply be retried.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Optional, Sequence
from urllib.parse import urlparse

import polars as pl

from tripledoc.config import load_config
from tripledoc.identifiers import generate_identifier
from tripledoc.index import TripleIndex
from tripledoc.remote import extract_acl_ref, extract_live_update_ref
from tripledoc.subject import TripleSubject
from tripledoc.terms import (
    RDF_TYPE,
    Reference,
    Statement,
    TermKind,
    strip_fragment,
    term_kind,
)
from tripledoc.transport import HttpTransport, Transport

logger = logging.getLogger(__name__)

Diff = tuple[list[Statement], list[Statement]]


def canonical_ref(ref: Reference) -> Reference:
    """
    Validate an absolute IRI and strip its fragment.

    Raises:
        ValueError: if ``ref`` is not an absolute IRI
    """
    parsed = urlparse(ref)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Not an absolute IRI: {ref!r}")
    return strip_fragment(ref)


def apply_diff(
    statements: Sequence[Statement],
    deletions: Iterable[Statement],
    additions: Iterable[Statement],
) -> tuple[Statement, ...]:
    """
    ``statements ++ additions`` minus ``deletions``, as a multiset.

    Each deletion removes at most one equal statement, the earliest one;
    survivors keep their relative order. Deleting a statement that is not
    present does nothing.
    """
    to_delete = Counter(deletions)
    result = []
    for st in (*statements, *additions):
        if to_delete[st] > 0:
            to_delete[st] -= 1
            continue
        result.append(st)
    return tuple(result)


class TripleDocument:
    """
    Immutable snapshot of a remote document.

    Attributes:
        ref: Canonical reference, never containing a fragment
        statements: The document's statements, in source order
        exists_remotely: Whether the document has been written to the server
        acl_ref: Reference of the document's access control list, if known
        live_update_ref: Reference of the live-update channel, if known
    """

    def __init__(
        self,
        ref: Reference,
        statements: Iterable[Statement] = (),
        *,
        exists_remotely: bool = False,
        acl_ref: Optional[Reference] = None,
        live_update_ref: Optional[Reference] = None,
        transport: Optional[Transport] = None,
    ):
        self._ref = canonical_ref(ref)
        self._statements: tuple[Statement, ...] = tuple(statements)
        self._exists_remotely = exists_remotely
        self._acl_ref = acl_ref
        self._live_update_ref = live_update_ref
        self._transport = transport
        self._index = TripleIndex(self._statements, self._ref)
        # Subjects accessed through this snapshot, in order of first access
        self._subjects: dict[Reference, TripleSubject] = {}

    def __repr__(self) -> str:
        state = "saved" if self._exists_remotely else "unsaved"
        return f"TripleDocument({self._ref!r}, {len(self._statements)} statements, {state})"

    @property
    def ref(self) -> Reference:
        return self._ref

    @property
    def statements(self) -> tuple[Statement, ...]:
        return self._statements

    @property
    def exists_remotely(self) -> bool:
        return self._exists_remotely

    @property
    def acl_ref(self) -> Optional[Reference]:
        return self._acl_ref

    @property
    def live_update_ref(self) -> Optional[Reference]:
        return self._live_update_ref

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    @property
    def index(self) -> TripleIndex:
        return self._index

    def as_ref(self) -> Reference:
        return self._ref

    def get_acl_ref(self) -> Optional[Reference]:
        return self._acl_ref

    def get_live_update_ref(self) -> Optional[Reference]:
        return self._live_update_ref

    def get_statements(self) -> list[Statement]:
        return list(self._index.statements)

    # =========================================================================
    # Subjects
    # =========================================================================

    def get_subject(self, ref: Reference) -> TripleSubject:
        """The subject for ``ref``; the same instance every time for this snapshot."""
        subject = self._subjects.get(ref)
        if subject is None:
            subject = TripleSubject(self, ref)
            self._subjects[ref] = subject
        return subject

    def add_subject(
        self,
        identifier: Optional[str] = None,
        identifier_prefix: str = "",
    ) -> TripleSubject:
        """
        A new subject within this document, at ``<ref>#<prefix><identifier>``.

        Nothing is written until save(). Without an explicit ``identifier``
        one is generated that sorts after previously generated ones.
        """
        if identifier is None:
            identifier = generate_identifier()
        return self.get_subject(f"{self._ref}#{identifier_prefix}{identifier}")

    def find_subject(self, predicate: Reference, object_ref: Reference) -> Optional[TripleSubject]:
        """
        A subject with ``predicate`` pointing at ``object_ref``, or None.

        If several subjects match, which one is returned is arbitrary.
        """
        ref = self._index.find_subject_where(predicate, object_ref)
        if ref is None:
            return None
        return self.get_subject(ref)

    def find_subjects(self, predicate: Reference, object_ref: Reference) -> list[TripleSubject]:
        return [self.get_subject(ref) for ref in self._index.find_subjects_where(predicate, object_ref)]

    def get_subjects_of_type(self, type_ref: Reference) -> list[TripleSubject]:
        return self.find_subjects(RDF_TYPE, type_ref)

    def remove_subject(self, ref: Reference) -> TripleSubject:
        """Stage deletion of the statements about ``ref``; see TripleSubject.remove_all."""
        subject = self.get_subject(ref)
        subject.remove_all()
        return subject

    # =========================================================================
    # Diff and save
    # =========================================================================

    def _relevant(self, subjects: Optional[Iterable[TripleSubject]]) -> list[TripleSubject]:
        if subjects is None:
            return list(self._subjects.values())
        relevant = []
        for subject in subjects:
            if subject.get_document() is self:
                relevant.append(subject)
            else:
                logger.debug(f"Skipping {subject.as_ref()}: belongs to another document")
        return relevant

    def pending_diff(self, subjects: Optional[Iterable[TripleSubject]] = None) -> Diff:
        """Aggregated (deletions, additions), in subject order then call order."""
        deletions: list[Statement] = []
        additions: list[Statement] = []
        for subject in self._relevant(subjects):
            subject_deletions, subject_additions = subject.pending_diff()
            deletions.extend(subject_deletions)
            additions.extend(subject_additions)
        return deletions, additions

    async def save(self, subjects: Optional[Iterable[TripleSubject]] = None) -> "TripleDocument":
        """
        Write staged changes and return the resulting snapshot.

        Args:
            subjects: Subjects to save; defaults to every subject accessed
                through this snapshot. Subjects of other documents are ignored.

        Returns:
            A new document holding ``statements ++ additions - deletions``.
            This document is left untouched.

        Raises:
            ConflictError: if an unsaved document already exists remotely
            RemoteError: for any other transport failure; staged changes are kept
        """
        relevant = self._relevant(subjects)
        deletions, additions = self.pending_diff(relevant)
        transport = self._transport or default_transport()

        acl_ref = self._acl_ref
        live_update_ref = self._live_update_ref
        if not self._exists_remotely:
            response = await transport.create(self._ref, additions)
            acl_ref = extract_acl_ref(response.headers, self._ref) or acl_ref
            live_update_ref = extract_live_update_ref(response.headers) or live_update_ref
        else:
            await transport.update(self._ref, deletions, additions)

        saved = TripleDocument(
            self._ref,
            apply_diff(self._statements, deletions, additions),
            exists_remotely=True,
            acl_ref=acl_ref,
            live_update_ref=live_update_ref,
            transport=transport,
        )
        for subject in relevant:
            subject.on_committed()

        logger.info(
            f"Saved {self._ref}: {len(relevant)} subjects, "
            f"-{len(deletions)} +{len(additions)} statements"
        )
        return saved

    # =========================================================================
    # Export
    # =========================================================================

    def to_dataframe(self) -> pl.DataFrame:
        """
        Export the snapshot to a Polars DataFrame.

        Columns: subject, predicate, object, object_kind, datatype, language,
        graph. Literal objects hold their lexical form; blank nodes are
        written as ``_:label``.
        """
        if not self._statements:
            return pl.DataFrame({
                "subject": pl.Series([], dtype=pl.Utf8),
                "predicate": pl.Series([], dtype=pl.Utf8),
                "object": pl.Series([], dtype=pl.Utf8),
                "object_kind": pl.Series([], dtype=pl.Utf8),
                "datatype": pl.Series([], dtype=pl.Utf8),
                "language": pl.Series([], dtype=pl.Utf8),
                "graph": pl.Series([], dtype=pl.Utf8),
            })

        rows = []
        for st in self._statements:
            kind = term_kind(st.object)
            if kind == TermKind.LITERAL:
                obj, datatype, language = st.object.lexical, st.object.datatype, st.object.language
            else:
                obj, datatype, language = str(st.object), None, None
            rows.append({
                "subject": str(st.subject),
                "predicate": st.predicate,
                "object": obj,
                "object_kind": kind.name.lower(),
                "datatype": datatype,
                "language": language,
                "graph": st.graph,
            })
        return pl.DataFrame(rows, schema={
            "subject": pl.Utf8,
            "predicate": pl.Utf8,
            "object": pl.Utf8,
            "object_kind": pl.Utf8,
            "datatype": pl.Utf8,
            "language": pl.Utf8,
            "graph": pl.Utf8,
        })


# =============================================================================
# Entry points
# =============================================================================

def default_transport() -> Transport:
    """An HttpTransport configured from the environment."""
    return HttpTransport(load_config())


def create_document(ref: Reference, transport: Optional[Transport] = None) -> TripleDocument:
    """
    Start a new, empty document at ``ref`` (fragment stripped).

    The document is only created remotely when it is first saved.
    """
    return TripleDocument(ref, (), exists_remotely=False, transport=transport)


async def fetch_document(ref: Reference, transport: Optional[Transport] = None) -> TripleDocument:
    """
    Retrieve and parse the document at ``ref``.

    Raises:
        ParseError: if the response body is not a valid graph
        RemoteError: if the document could not be retrieved
    """
    document_ref = canonical_ref(ref)
    transport = transport or default_transport()
    response = await transport.get(document_ref)
    statements = transport.parse(response.body, document_ref, response.content_type)
    logger.info(f"Parsed {len(statements)} statements from {document_ref}")
    return TripleDocument(
        document_ref,
        statements,
        exists_remotely=True,
        acl_ref=extract_acl_ref(response.headers, document_ref),
        live_update_ref=extract_live_update_ref(response.headers),
        transport=transport,
    )
