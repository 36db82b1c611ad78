import logging
from collections.abc import Callable
from pathlib import Path
from typing import cast

from tree_sitter import Node, Query, QueryCursor
from tree_sitter_language_pack import SupportedLanguage, get_language, get_parser

from go_order.core.languages import normalize_language
from go_order.errors import SourceParseError, UnknownDeclarationKindError
from go_order.models import Comment, Declaration, DeclKind, ParsedFile, Receiver, ReceiverShape

logger = logging.getLogger(__name__)

_GO_DECLARATION_KINDS = {
    "import_declaration": DeclKind.IMPORT,
    "const_declaration": DeclKind.CONST,
    "var_declaration": DeclKind.VAR,
    "type_declaration": DeclKind.TYPE,
    "function_declaration": DeclKind.FUNC,
    "method_declaration": DeclKind.FUNC,
}

_GO_MEMBER_SPECS = frozenset({"const_spec", "var_spec", "type_spec", "type_alias"})
# Newer grammars wrap parenthesized var specs in a list node.
_GO_MEMBER_LISTS = frozenset({"var_spec_list"})


def _load_query(language: str, query_type: str) -> Query:
    queries_dir = Path(__file__).parent.parent / "queries"
    query_path = queries_dir / f"{language}_{query_type}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language(cast(SupportedLanguage, language)), query_text)


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _first_error_offset(node: Node) -> int:
    if node.is_error or node.is_missing:
        return node.start_byte
    for child in node.children:
        if child.has_error or child.is_missing:
            return _first_error_offset(child)
    return node.start_byte


def _base_type_name(node: Node, source: bytes) -> str | None:
    if node.type == "type_identifier":
        return _text(node, source)
    if node.type == "generic_type":
        inner = node.child_by_field_name("type")
        if inner is not None and inner.type == "type_identifier":
            return _text(inner, source)
    return None


def _receiver(node: Node, source: bytes) -> Receiver:
    receiver_list = node.child_by_field_name("receiver")
    params = [] if receiver_list is None else [c for c in receiver_list.named_children if c.type != "comment"]
    text = "" if receiver_list is None else _text(receiver_list, source)
    if len(params) != 1 or params[0].type != "parameter_declaration":
        return Receiver(shape=ReceiverShape.UNRECOGNIZED, text=text)

    type_node = params[0].child_by_field_name("type")
    if type_node is None:
        return Receiver(shape=ReceiverShape.UNRECOGNIZED, text=text)

    shape = ReceiverShape.IDENTIFIER
    if type_node.type == "pointer_type":
        shape = ReceiverShape.POINTER
        pointee = [c for c in type_node.named_children if c.type != "comment"]
        name = _base_type_name(pointee[0], source) if len(pointee) == 1 else None
    else:
        name = _base_type_name(type_node, source)

    if name is None:
        return Receiver(shape=ReceiverShape.UNRECOGNIZED, text=_text(type_node, source))
    return Receiver(shape=shape, type_name=name, text=_text(type_node, source))


def _member_names(node: Node, source: bytes) -> tuple[str, ...]:
    names: list[str] = []
    for child in node.named_children:
        if child.type in _GO_MEMBER_LISTS:
            names.extend(_member_names(child, source))
        elif child.type in _GO_MEMBER_SPECS:
            name = child.child_by_field_name("name")
            names.append("" if name is None else _text(name, source))
    return tuple(names)


def _declaration(node: Node, kind: DeclKind, source: bytes) -> Declaration:
    if kind is DeclKind.FUNC:
        name = node.child_by_field_name("name")
        return Declaration(
            kind=kind,
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            name=None if name is None else _text(name, source),
            receiver=_receiver(node, source) if node.type == "method_declaration" else None,
        )
    return Declaration(
        kind=kind,
        start_byte=node.start_byte,
        end_byte=node.end_byte,
        member_names=_member_names(node, source),
    )


def _group_comments(nodes: list[Node], source: bytes) -> list[Comment]:
    """Merge comments on consecutive lines into one group, the way gofmt sees them."""
    groups: list[Comment] = []
    for node in sorted(nodes, key=lambda n: n.start_byte):
        if groups:
            gap = source[groups[-1].end_byte : node.start_byte]
            if not gap.strip() and gap.count(b"\n") <= 1:
                groups[-1] = Comment(start_byte=groups[-1].start_byte, end_byte=node.end_byte)
                continue
        groups.append(Comment(start_byte=node.start_byte, end_byte=node.end_byte))
    return groups


def parse_go_source(source_bytes: bytes) -> ParsedFile:
    parser = get_parser(cast(SupportedLanguage, "go"))
    tree = parser.parse(source_bytes)
    root = tree.root_node

    if root.has_error:
        raise SourceParseError(f"Failed to parse Go source: syntax error at byte {_first_error_offset(root)}")

    package: Node | None = None
    declarations: list[Declaration] = []
    for child in root.named_children:
        if child.type == "comment":
            continue
        if child.type == "package_clause":
            if package is not None:
                raise SourceParseError(f"Duplicate package clause at byte {child.start_byte}")
            package = child
            continue
        kind = _GO_DECLARATION_KINDS.get(child.type)
        if kind is None:
            raise UnknownDeclarationKindError(f"Unsupported top-level node '{child.type}' at byte {child.start_byte}")
        if package is None:
            raise SourceParseError(f"Declaration before package clause at byte {child.start_byte}")
        declarations.append(_declaration(child, kind, source_bytes))

    if package is None:
        raise SourceParseError("Failed to parse Go source: missing package clause")

    identifiers = [c for c in package.named_children if c.type == "package_identifier"]
    if not identifiers:
        raise SourceParseError(f"Package clause without a name at byte {package.start_byte}")

    captures = QueryCursor(_load_query("go", "comments")).captures(root)
    comments = _group_comments(list(captures.get("comment", [])), source_bytes)

    logger.debug("Parsed %d declarations and %d comment groups", len(declarations), len(comments))

    return ParsedFile(
        source=source_bytes,
        package_name=_text(identifiers[0], source_bytes),
        package_start=package.start_byte,
        declarations=declarations,
        comments=comments,
    )


_FRONTENDS: dict[str, Callable[[bytes], ParsedFile]] = {
    "go": parse_go_source,
}


def parse_source(source_bytes: bytes, language: str = "go") -> ParsedFile:
    return _FRONTENDS[normalize_language(language)](source_bytes)
