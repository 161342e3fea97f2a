"""Positional parameter binding and literal substitution.

Builders emit a private marker while rendering and append the matching
values to one :class:`ParameterBinder` in the same order, so the parameter
list of a :class:`CompiledQuery` always lines up with its markers. The
marker only becomes ``?`` when the SQL text is read, which keeps a literal
``?`` inside raw fragments apart from a bound parameter.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from sqlglot import exp

from fluentsql.config import DIALECT, PLACEHOLDER
from fluentsql.protocols import GeneratesSQL, QuotesValues

if TYPE_CHECKING:
    from fluentsql.typing import StatementParameters

__all__ = (
    "PARAMETER_MARKER",
    "CompiledQuery",
    "ParameterBinder",
    "render_literal",
    "substitute_parameters",
)

PARAMETER_MARKER = "\x00"
"""Stands in for a bound parameter until the SQL text is read."""


@dataclass(frozen=True)
class CompiledQuery:
    """A compiled SQL skeleton with its positional parameters.

    ``template`` holds one :data:`PARAMETER_MARKER` per bound value; ``sql``
    is the same text with each marker rendered as ``?``.
    """

    template: str
    parameters: "tuple[Any, ...]" = ()

    @property
    def sql(self) -> str:
        return self.template.replace(PARAMETER_MARKER, PLACEHOLDER)

    @property
    def parameter_list(self) -> "StatementParameters":
        """Parameters as the mutable list connectors receive."""
        return list(self.parameters)

    @property
    def placeholder_count(self) -> int:
        """Number of bound-parameter markers, ignoring any ``?`` in raw text."""
        return self.template.count(PARAMETER_MARKER)

    def __str__(self) -> str:
        return self.sql


class ParameterBinder:
    """Ordered sequence of bound values shared by every clause of one statement."""

    __slots__ = ("_values",)

    def __init__(self) -> None:
        self._values: list[Any] = []

    def bind(self, value: Any) -> str:
        """Bind one value and return its marker."""
        self._values.append(value)
        return PARAMETER_MARKER

    def bind_many(self, values: "Iterable[Any]") -> str:
        """Bind several values and return their comma-joined markers."""
        return ",".join(self.bind(value) for value in values)

    def extend(self, values: "Iterable[Any]") -> None:
        """Append values already bound by a sub-statement."""
        self._values.extend(values)

    def splice(self, compiled: CompiledQuery) -> str:
        """Adopt a sub-statement's parameters and return its template for embedding."""
        self.extend(compiled.parameters)
        return compiled.template

    @property
    def values(self) -> "tuple[Any, ...]":
        return tuple(self._values)

    def compiled(self, template: str) -> CompiledQuery:
        """Pair rendered text with the values bound so far."""
        return CompiledQuery(template=template, parameters=self.values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> "Iterator[Any]":
        return iter(self._values)


def render_literal(value: Any, connector: Optional[Any] = None) -> str:
    """Render a parameter as a SQL literal for compile-mode output.

    ``None`` always renders as ``NULL``. With a quoting connector the value is
    stringified and quoted by the connector; otherwise sqlglot renders a
    MySQL literal (numbers bare, strings quoted and escaped).

    Args:
        value: The bound value.
        connector: Optional connector providing ``quote``.

    Returns:
        The literal SQL text.
    """
    if value is None:
        return "NULL"
    if isinstance(connector, QuotesValues):
        return connector.quote(str(value))
    try:
        literal = exp.convert(value)
    except ValueError:
        literal = exp.Literal.string(str(value))
    return literal.sql(dialect=DIALECT)


def substitute_parameters(compiled: CompiledQuery, connector: Optional[Any] = None) -> str:
    """Inline parameters into a compiled skeleton.

    The connector's ``generate`` hook runs first so template tokens such as
    ``#{TABLE}`` are resolved, then each bound-parameter marker is replaced
    in order. A ``?`` that is part of raw SQL text is never touched, and
    markers beyond the parameter list are rendered as ``?``.

    Args:
        compiled: The skeleton and its parameters.
        connector: Optional connector providing ``generate`` and ``quote``.

    Returns:
        Literal SQL text.
    """
    pieces = compiled.template.split(PARAMETER_MARKER)
    if isinstance(connector, GeneratesSQL):
        pieces = [connector.generate(piece) for piece in pieces]

    literals = [render_literal(value, connector) for value in compiled.parameters]
    parts = [pieces[0]]
    for index, piece in enumerate(pieces[1:]):
        parts.append(literals[index] if index < len(literals) else PLACEHOLDER)
        parts.append(piece)
    return "".join(parts)
