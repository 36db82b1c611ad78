from go_order.core.comments import attach_root_comments
from go_order.core.frontend import parse_go_source, parse_source
from go_order.core.ordering import (
    DEFAULT_PRIORITIES,
    DeclarationComparator,
    KindPriority,
    OrderingConfig,
    sort_declarations,
)
from go_order.core.sort_file import sort_parsed, sort_source
from go_order.core.writer import write_sorted

__all__ = [
    "DEFAULT_PRIORITIES",
    "DeclarationComparator",
    "KindPriority",
    "OrderingConfig",
    "attach_root_comments",
    "parse_go_source",
    "parse_source",
    "sort_declarations",
    "sort_parsed",
    "sort_source",
    "write_sorted",
]
