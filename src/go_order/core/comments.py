"""Attach root-level comments to the declaration they document.

A root comment belongs to the first declaration that starts after it ends, so
moving the declaration moves its documentation too. Comments that live inside
a declaration travel with the declaration's own span and are left alone, as
is the file header above the package clause. Whatever follows the last
declaration goes to the ``TRAILING`` bucket and is written at the very end.
"""

from go_order.models import TRAILING, AttachmentMap, Comment, Declaration, ParsedFile

_LINE_TERMINATORS = b"\r\n"


def _is_internal(comment: Comment, declarations: list[Declaration]) -> bool:
    return any(d.start_byte <= comment.start_byte and comment.end_byte <= d.end_byte for d in declarations)


def _comment_bytes(comment: Comment, source: bytes) -> bytes:
    """Return the comment together with the line breaks and blank lines right after it."""
    end = comment.end_byte
    while end < len(source) and source[end] in _LINE_TERMINATORS:
        end += 1
    return source[comment.start_byte : end]


def attach_root_comments(parsed: ParsedFile) -> AttachmentMap:
    attachments: AttachmentMap = {TRAILING: b""}

    for comment in parsed.comments:
        if comment.start_byte < parsed.package_start:
            continue
        if _is_internal(comment, parsed.declarations):
            continue

        owner = next((d for d in parsed.declarations if d.start_byte >= comment.end_byte), None)
        key = TRAILING if owner is None else owner
        attachments[key] = attachments.get(key, b"") + _comment_bytes(comment, parsed.source)

    return attachments
