"""
Indexed lookups over a document's statements.

The index is built once from an immutable statement sequence and is never
updated; a saved document gets a fresh index. Every lookup preserves the
order statements have in the source sequence.

Only statements whose graph is the document reference are indexed, so
lookups are always scoped to one document.
"""

from __future__ import annotations

import random
from typing import Iterator, Optional, Sequence

from tripledoc.terms import (
    ObjectValue,
    RDF_TYPE,
    Reference,
    Statement,
    TypedLiteral,
    is_literal,
    is_reference,
)


class TripleIndex:
    """
    Predicate- and type-indexed view over one document's statements.

    Example:
        idx = TripleIndex(statements, "https://example.com/profile")

        idx.objects_of("https://example.com/profile#me", FOAF_NAME)
        idx.find_subjects_where(RDF_TYPE, "http://xmlns.com/foaf/0.1/Person")
    """

    def __init__(self, statements: Sequence[Statement], document_ref: Reference):
        self.document_ref = document_ref
        self._statements: tuple[Statement, ...] = tuple(
            st for st in statements if st.graph == document_ref
        )

        # (subject, predicate) -> row positions
        self._by_subject_predicate: dict[tuple, list[int]] = {}
        # subject -> row positions
        self._by_subject: dict[object, list[int]] = {}
        # (predicate, object reference) -> reference subjects, as an ordered set
        self._subjects_by_object: dict[tuple[str, str], dict[Reference, None]] = {}

        self._build()

    def _build(self) -> None:
        for row, st in enumerate(self._statements):
            self._by_subject_predicate.setdefault((st.subject, st.predicate), []).append(row)
            self._by_subject.setdefault(st.subject, []).append(row)

            # Literal objects and blank-node subjects are not reverse-indexed
            if is_reference(st.object) and is_reference(st.subject):
                self._subjects_by_object.setdefault((st.predicate, st.object), {})[st.subject] = None

    def __len__(self) -> int:
        return len(self._statements)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self._statements)

    def __contains__(self, statement: object) -> bool:
        if not isinstance(statement, Statement):
            return False
        rows = self._by_subject_predicate.get((statement.subject, statement.predicate), ())
        return any(self._statements[row] == statement for row in rows)

    @property
    def statements(self) -> tuple[Statement, ...]:
        return self._statements

    # =========================================================================
    # Object lookups
    # =========================================================================

    def objects_of(self, subject: Reference, predicate: Reference) -> list[ObjectValue]:
        """All objects for ``subject`` and ``predicate``, in source order."""
        rows = self._by_subject_predicate.get((subject, predicate), ())
        return [self._statements[row].object for row in rows]

    def statements_about(self, subject: Reference) -> list[Statement]:
        """All statements with ``subject`` in subject position."""
        return [self._statements[row] for row in self._by_subject.get(subject, ())]

    def literals_of(self, subject: Reference, predicate: Reference) -> list[TypedLiteral]:
        return [obj for obj in self.objects_of(subject, predicate) if is_literal(obj)]

    def references_of(self, subject: Reference, predicate: Reference) -> list[Reference]:
        return [obj for obj in self.objects_of(subject, predicate) if is_reference(obj)]

    def first_literal(self, subject: Reference, predicate: Reference) -> Optional[TypedLiteral]:
        """
        The first literal among the matching objects.

        Non-literal objects are skipped, so a reference that precedes the
        literal does not hide it.
        """
        for obj in self.objects_of(subject, predicate):
            if is_literal(obj):
                return obj
        return None

    def first_reference(self, subject: Reference, predicate: Reference) -> Optional[Reference]:
        """The first object that is a reference (not a literal or blank node)."""
        for obj in self.objects_of(subject, predicate):
            if is_reference(obj):
                return obj
        return None

    def type_of(self, subject: Reference) -> Optional[Reference]:
        return self.first_reference(subject, RDF_TYPE)

    # =========================================================================
    # Subject lookups
    # =========================================================================

    def subjects(self) -> list[Reference]:
        """Distinct reference subjects, in order of first appearance."""
        return [s for s in self._by_subject if is_reference(s)]

    def find_subjects_where(self, predicate: Reference, object_ref: Reference) -> list[Reference]:
        """
        Every distinct subject with a ``predicate`` statement pointing at ``object_ref``.

        Matching is by reference only: a literal whose lexical form equals
        ``object_ref`` does not match.
        """
        return list(self._subjects_by_object.get((predicate, object_ref), ()))

    def find_subject_where(self, predicate: Reference, object_ref: Reference) -> Optional[Reference]:
        """
        One subject matching ``predicate`` and ``object_ref``, or None.

        When several subjects qualify the choice is arbitrary and may differ
        between calls. Use find_subjects_where() when order matters.
        """
        candidates = self._subjects_by_object.get((predicate, object_ref))
        if not candidates:
            return None
        return random.choice(list(candidates))
