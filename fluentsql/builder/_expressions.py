"""Expression atoms and identifier rendering.

An :class:`Atom` is one ``subject operator value`` comparison. Rendering an
atom appends the values it binds to a :class:`~fluentsql.builder._binder.ParameterBinder`
in the same order the ``?`` markers appear in the returned text.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlglot import exp

from fluentsql.config import DIALECT
from fluentsql.exceptions import SQLBuilderError
from fluentsql.protocols import SubqueryProtocol
from fluentsql.utils.text import split_trimmed

if TYPE_CHECKING:
    from fluentsql.builder._binder import ParameterBinder

__all__ = (
    "AND",
    "OR",
    "Atom",
    "ColumnRef",
    "normalize_operator",
    "quote_identifier",
    "render_atom",
)

AND = "AND"
OR = "OR"

IN_OPERATORS = frozenset({"IN", "NOT IN"})
NULL_OPERATORS = frozenset({"IS NULL", "IS NOT NULL"})
BETWEEN_OPERATORS = frozenset({"BETWEEN", "NOT BETWEEN"})
IN_RAW_OPERATOR = "INRAW"


@dataclass(frozen=True)
class ColumnRef:
    """Right-hand side of a column-to-column comparison, rendered as an identifier."""

    name: str


@dataclass(frozen=True)
class Atom:
    """A single comparison.

    Attributes:
        subject: Column name, or a raw SQL fragment when ``is_raw`` is set.
        operator: Comparison operator as given by the caller.
        value: Bound value, ``(start, end)`` pair for BETWEEN, a subquery for IN,
            a :class:`ColumnRef`, or ``None`` for the NULL tests.
        is_raw: Emit ``subject`` verbatim instead of quoting it as an identifier.
    """

    subject: str
    operator: str
    value: Any = None
    is_raw: bool = False


def quote_identifier(name: str) -> str:
    """Quote a name as a MySQL (backtick) identifier."""
    return exp.to_identifier(name, quoted=True).sql(dialect=DIALECT)


def normalize_operator(operator: str) -> str:
    """Collapse whitespace and upper-case an operator for keyword matching."""
    return " ".join(operator.split()).upper()


def _in_values(value: Any) -> "list[Any]":
    if isinstance(value, str):
        return split_trimmed(value)
    if isinstance(value, Iterable) and not isinstance(value, (bytes, Mapping)):
        return list(value)
    return [value]


def render_atom(atom: Atom, binder: "ParameterBinder") -> str:
    """Render an atom to SQL text, binding its values.

    Args:
        atom: The comparison to render.
        binder: Receives the bound values in placeholder order.

    Raises:
        SQLBuilderError: If an IN list is empty or a BETWEEN value is not a pair.

    Returns:
        The rendered condition.
    """
    operator = normalize_operator(atom.operator)
    subject = atom.subject if atom.is_raw else quote_identifier(atom.subject)

    if operator in IN_OPERATORS:
        if isinstance(atom.value, SubqueryProtocol):
            return f"{subject} {operator} ({binder.splice(atom.value.build_select())})"
        values = _in_values(atom.value)
        if not values:
            msg = f"{operator} condition on {atom.subject!r} needs at least one value"
            raise SQLBuilderError(msg, operation=operator.lower().replace(" ", "_"), column=atom.subject)
        return f"{subject} {operator} ({binder.bind_many(values)})"

    if operator in NULL_OPERATORS:
        return f"{subject} {operator}"

    if operator == IN_RAW_OPERATOR:
        return f"{quote_identifier(atom.subject)} IN ({atom.value})"

    if operator in BETWEEN_OPERATORS:
        try:
            start, end = atom.value
        except (TypeError, ValueError) as e:
            msg = f"{operator} condition on {atom.subject!r} needs a (start, end) pair"
            raise SQLBuilderError(msg, operation="between", column=atom.subject, value=atom.value) from e
        return f"({subject} {operator} {start} AND {end})"

    if isinstance(atom.value, ColumnRef):
        return f"{quote_identifier(atom.subject)} {atom.operator.strip()} {quote_identifier(atom.value.name)}"

    return f"{subject} {atom.operator.strip()} {binder.bind(atom.value)}"
