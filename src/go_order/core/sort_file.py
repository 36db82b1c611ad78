import logging

from go_order.core.comments import attach_root_comments
from go_order.core.frontend import parse_source
from go_order.core.ordering import OrderingConfig, sort_declarations
from go_order.core.writer import write_sorted
from go_order.models import ParsedFile

logger = logging.getLogger(__name__)


def sort_parsed(parsed: ParsedFile, config: OrderingConfig) -> bytes:
    attachments = attach_root_comments(parsed)
    ordered = sort_declarations(parsed.declarations, config)
    return write_sorted(parsed, ordered, attachments)


def sort_source(source_bytes: bytes, config: OrderingConfig | None = None, language: str = "go") -> bytes:
    """Reorder the top-level declarations of ``source_bytes``.

    Raises a ``GoOrderError`` subclass when the source cannot be parsed or a
    declaration cannot be placed; nothing is written in that case.
    """
    config = config or OrderingConfig()
    parsed = parse_source(source_bytes, language)
    result = sort_parsed(parsed, config)
    logger.debug("Reordered %d declarations in package %s", len(parsed.declarations), parsed.package_name)
    return result
