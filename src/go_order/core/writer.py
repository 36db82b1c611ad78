from go_order.errors import MalformedSpanError
from go_order.models import TRAILING, AttachmentMap, Declaration, ParsedFile

_SEPARATOR = b"\n\n"
_TERMINATOR = b"\n"


def _check_spans(declarations: list[Declaration], parsed: ParsedFile) -> None:
    previous_end = parsed.package_start
    for decl in sorted(declarations, key=lambda d: d.start_byte):
        if decl.start_byte < previous_end:
            raise MalformedSpanError(f"Declaration at byte {decl.start_byte} overlaps the previous span")
        if decl.end_byte > len(parsed.source):
            raise MalformedSpanError(f"Declaration span [{decl.start_byte}, {decl.end_byte}) exceeds the source")
        previous_end = decl.end_byte


def write_sorted(parsed: ParsedFile, declarations: list[Declaration], attachments: AttachmentMap) -> bytes:
    """Emit the file with ``declarations`` in the given order.

    Each declaration is preceded by its attached comments and copied byte for
    byte. Only the package line and the blank lines between declarations are
    generated.
    """
    _check_spans(declarations, parsed)

    source = parsed.source
    parts = [source[: parsed.package_start], f"package {parsed.package_name}\n\n".encode()]

    for i, decl in enumerate(declarations):
        parts.append(attachments.get(decl, b""))
        parts.append(source[decl.start_byte : decl.end_byte])
        parts.append(_SEPARATOR if i < len(declarations) - 1 else _TERMINATOR)

    parts.append(attachments.get(TRAILING, b""))
    return b"".join(parts)
