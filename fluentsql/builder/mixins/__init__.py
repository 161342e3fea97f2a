"""SQL statement builder mixins."""

from fluentsql.builder.mixins._having import HavingClauseMixin
from fluentsql.builder.mixins._order_limit import GroupByClauseMixin, LimitOffsetClauseMixin, OrderByClauseMixin
from fluentsql.builder.mixins._select_columns import SelectColumnsMixin
from fluentsql.builder.mixins._where import WhereClauseMixin

__all__ = (
    "GroupByClauseMixin",
    "HavingClauseMixin",
    "LimitOffsetClauseMixin",
    "OrderByClauseMixin",
    "SelectColumnsMixin",
    "WhereClauseMixin",
)
