"""Predicate groups: the shared compiler behind WHERE and HAVING.

A :class:`PredicateGroup` is an ordered list of entries, each joined to the
previous one by its own combinator. The same class serves both clauses; the
leading keyword is the only thing that differs.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from fluentsql.builder._expressions import AND, Atom, render_atom

if TYPE_CHECKING:
    from typing_extensions import Self

    from fluentsql.builder._binder import ParameterBinder
    from fluentsql.protocols import SubqueryProtocol

__all__ = (
    "Entry",
    "ExistsClause",
    "NestedGroup",
    "PredicateGroup",
    "RawFragment",
)


@dataclass(frozen=True)
class RawFragment:
    """Opaque SQL condition, emitted parenthesized and never bound."""

    text: str


@dataclass(frozen=True)
class NestedGroup:
    """A child group compiled in group mode and parenthesized."""

    group: "PredicateGroup"


@dataclass(frozen=True)
class ExistsClause:
    """``EXISTS (SELECT ...)`` over a sub-builder."""

    subquery: "SubqueryProtocol"


@dataclass(frozen=True)
class Entry:
    combinator: str
    payload: "Union[Atom, RawFragment, NestedGroup, ExistsClause]"


class PredicateGroup:
    """Ordered, combinator-joined conditions compiled into one clause."""

    __slots__ = ("_entries", "keyword")

    def __init__(self, keyword: str) -> None:
        self.keyword = keyword
        self._entries: list[Entry] = []

    def add_atom(
        self, subject: str, operator: str, value: Any = None, *, combinator: str = AND, is_raw: bool = False
    ) -> "Self":
        self._entries.append(Entry(combinator, Atom(subject, operator, value, is_raw)))
        return self

    def add_raw(self, text: str, *, combinator: str = AND) -> "Self":
        self._entries.append(Entry(combinator, RawFragment(text)))
        return self

    def add_group(self, group: "PredicateGroup", *, combinator: str = AND) -> "Self":
        self._entries.append(Entry(combinator, NestedGroup(group)))
        return self

    def add_exists(self, subquery: "SubqueryProtocol", *, combinator: str = AND) -> "Self":
        self._entries.append(Entry(combinator, ExistsClause(subquery)))
        return self

    def __len__(self) -> int:
        return len(self._entries)

    def compile(self, binder: "ParameterBinder", *, as_group: bool = False) -> str:
        """Compile the group, binding values into ``binder``.

        Entries are emitted in insertion order. An entry that renders to
        nothing (an empty nested group) is dropped together with its
        combinator, so no dangling ``AND``/``OR`` can appear.

        Args:
            binder: Receives bound values in placeholder order.
            as_group: Omit the leading keyword, for use inside parentheses.

        Returns:
            The clause text, or an empty string when nothing was emitted.
        """
        fragments: list[tuple[str, str]] = []
        for entry in self._entries:
            text = self._compile_entry(entry, binder)
            if text:
                fragments.append((entry.combinator, text))

        if not fragments:
            return ""

        parts: list[str] = []
        for index, (combinator, text) in enumerate(fragments):
            if index > 0:
                parts.append(combinator)
            parts.append(text)
        body = " ".join(parts)
        return body if as_group else f"{self.keyword} {body}"

    def _compile_entry(self, entry: Entry, binder: "ParameterBinder") -> str:
        payload = entry.payload
        if isinstance(payload, Atom):
            return render_atom(payload, binder)
        if isinstance(payload, RawFragment):
            return f"({payload.text})"
        if isinstance(payload, NestedGroup):
            inner = payload.group.compile(binder, as_group=True)
            return f"({inner})" if inner else ""
        return f"EXISTS ({binder.splice(payload.subquery.build_select())})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keyword={self.keyword!r}, entries={len(self._entries)})"
