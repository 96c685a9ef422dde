"""
Subjects: a node seen through the statements it is the subject of.

A TripleSubject reads from its document's immutable snapshot and stages
changes in two buffers (pending deletions, pending additions). Nothing in
the snapshot changes until the owning document is saved; the getters never
see staged changes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Iterator, Optional

from tripledoc.literals import NativeValue, encode, try_decode
from tripledoc.terms import (
    LiteralKind,
    ObjectValue,
    Reference,
    Statement,
    is_blank_node,
    is_literal,
)

if TYPE_CHECKING:
    from tripledoc.document import TripleDocument

logger = logging.getLogger(__name__)

_READABLE_KINDS = frozenset({
    LiteralKind.STRING,
    LiteralKind.INTEGER,
    LiteralKind.DECIMAL,
    LiteralKind.DATETIME,
})


class TripleSubject:
    """
    Typed access to one subject of a document, plus its pending diff.

    Obtain instances through TripleDocument.get_subject() (or
    add_subject/find_subject) so repeated lookups share one buffer.

    Usage:
        profile = doc.get_subject("https://example.com/profile#me")
        profile.get_string(FOAF_NAME)
        profile.set_literal(FOAF_NAME, "Alice")
        new_doc = await doc.save()
    """

    def __init__(self, document: "TripleDocument", ref: Reference):
        if not isinstance(ref, str):
            raise ValueError(f"Only identified subjects can be edited, got {ref!r}")
        self._document = document
        self._ref = ref
        self._pending_deletions: list[Statement] = []
        self._pending_additions: list[Statement] = []

    def __repr__(self) -> str:
        return (
            f"TripleSubject({self._ref!r}, -{len(self._pending_deletions)}"
            f" +{len(self._pending_additions)})"
        )

    def as_ref(self) -> Reference:
        return self._ref

    def get_document(self) -> "TripleDocument":
        return self._document

    def get_statements(self) -> list[Statement]:
        """Statements about this subject in the document snapshot."""
        return self._document.index.statements_about(self._ref)

    # =========================================================================
    # Getters
    # =========================================================================

    def _objects(self, predicate: Reference) -> list[ObjectValue]:
        return self._document.index.objects_of(self._ref, predicate)

    def _decoded(self, predicate: Reference, kind: Optional[LiteralKind] = None) -> Iterator[NativeValue]:
        """Decoded literal values in document order; unreadable literals are skipped."""
        for obj in self._objects(predicate):
            if not is_literal(obj) or obj.kind not in _READABLE_KINDS:
                continue
            if kind is not None and obj.kind != kind:
                continue
            value = try_decode(obj)
            if value is not None:
                yield value

    def get_literal(self, predicate: Reference) -> Optional[NativeValue]:
        """
        The first readable literal value of ``predicate``, or None.

        References and blank nodes among the values are skipped. Literals in
        other datatypes, language-tagged strings and literals whose lexical
        form does not match their datatype count as absent.
        """
        return next(self._decoded(predicate), None)

    def get_all_literals(self, predicate: Reference) -> list[NativeValue]:
        return list(self._decoded(predicate))

    def get_string(self, predicate: Reference) -> Optional[str]:
        return next(self._decoded(predicate, LiteralKind.STRING), None)

    def get_all_strings(self, predicate: Reference) -> list[str]:
        return list(self._decoded(predicate, LiteralKind.STRING))

    def get_integer(self, predicate: Reference) -> Optional[int]:
        return next(self._decoded(predicate, LiteralKind.INTEGER), None)

    def get_all_integers(self, predicate: Reference) -> list[int]:
        return list(self._decoded(predicate, LiteralKind.INTEGER))

    def get_decimal(self, predicate: Reference) -> Optional[float]:
        return next(self._decoded(predicate, LiteralKind.DECIMAL), None)

    def get_all_decimals(self, predicate: Reference) -> list[float]:
        return list(self._decoded(predicate, LiteralKind.DECIMAL))

    def get_datetime(self, predicate: Reference) -> Optional[datetime]:
        return next(self._decoded(predicate, LiteralKind.DATETIME), None)

    def get_all_datetimes(self, predicate: Reference) -> list[datetime]:
        return list(self._decoded(predicate, LiteralKind.DATETIME))

    def get_ref(self, predicate: Reference) -> Optional[Reference]:
        """The first reference value of ``predicate``; literals are skipped."""
        return self._document.index.first_reference(self._ref, predicate)

    def get_all_refs(self, predicate: Reference) -> list[Reference]:
        return self._document.index.references_of(self._ref, predicate)

    def get_type(self) -> Optional[Reference]:
        return self._document.index.type_of(self._ref)

    # =========================================================================
    # Mutators (staged until the document is saved)
    # =========================================================================

    def _statement(self, predicate: Reference, obj: ObjectValue) -> Statement:
        return Statement(self._ref, predicate, obj, self._document.ref)

    def add_literal(self, predicate: Reference, value: NativeValue) -> None:
        self._pending_additions.append(self._statement(predicate, encode(value)))

    def add_ref(self, predicate: Reference, ref: Reference) -> None:
        if not isinstance(ref, str):
            raise TypeError(f"Expected a reference, got {ref!r}")
        self._pending_additions.append(self._statement(predicate, ref))

    def remove_literal(self, predicate: Reference, value: NativeValue) -> None:
        """
        Stage deletion of the statement holding ``value``.

        The statement is not checked against the document; deleting a value
        that is not there has no effect when saved.
        """
        self._pending_deletions.append(self._statement(predicate, encode(value)))

    def remove_ref(self, predicate: Reference, ref: Reference) -> None:
        if not isinstance(ref, str):
            raise TypeError(f"Expected a reference, got {ref!r}")
        self._pending_deletions.append(self._statement(predicate, ref))

    def clear(self, predicate: Reference) -> None:
        """
        Stage deletion of every literal and reference value of ``predicate``.

        Blank-node values stay: a SPARQL DELETE DATA request cannot name them.
        """
        for obj in self._objects(predicate):
            if is_blank_node(obj):
                continue
            self._pending_deletions.append(self._statement(predicate, obj))

    def set_literal(self, predicate: Reference, value: NativeValue) -> None:
        """Replace the literal and reference values of ``predicate`` with ``value``."""
        literal = encode(value)
        self.clear(predicate)
        self._pending_additions.append(self._statement(predicate, literal))

    def set_ref(self, predicate: Reference, ref: Reference) -> None:
        """Replace the literal and reference values of ``predicate`` with ``ref``."""
        if not isinstance(ref, str):
            raise TypeError(f"Expected a reference, got {ref!r}")
        self.clear(predicate)
        self._pending_additions.append(self._statement(predicate, ref))

    def remove_all(self) -> None:
        """Stage deletion of every statement about this subject not pointing at a blank node."""
        self._pending_deletions.extend(
            st for st in self.get_statements() if not is_blank_node(st.object)
        )

    # =========================================================================
    # Save protocol (used by the owning document)
    # =========================================================================

    def pending_diff(self) -> tuple[tuple[Statement, ...], tuple[Statement, ...]]:
        """Staged (deletions, additions), in call order."""
        return tuple(self._pending_deletions), tuple(self._pending_additions)

    def has_pending_changes(self) -> bool:
        return bool(self._pending_deletions or self._pending_additions)

    def on_committed(self) -> None:
        """Forget staged changes once the document has written them."""
        logger.debug(
            f"Committed {len(self._pending_deletions)} deletions and "
            f"{len(self._pending_additions)} additions for {self._ref}"
        )
        self._pending_deletions = []
        self._pending_additions = []
