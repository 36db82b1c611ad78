"""Canonical declaration order.

Declarations are grouped by kind (imports, constants, variables, types,
functions). With ``alphabetical`` enabled they are also ordered inside a kind:

* methods come first, by receiver type and then method name, followed by free
  functions by name, with a free ``main`` always last;
* single-member const/var/type declarations are ordered by member name.

Multi-member groups such as ``const ( ... )`` enumerations are never moved
relative to the other declarations of their kind. They split the singles of
that kind into runs, and singles are only reordered inside their run.
"""

import functools
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from go_order.errors import MalformedReceiverError, UnknownDeclarationKindError
from go_order.models import Declaration, DeclKind, ReceiverShape

logger = logging.getLogger(__name__)

_GROUPED_KINDS = frozenset({DeclKind.CONST, DeclKind.VAR, DeclKind.TYPE})

_METHOD, _FUNCTION, _MAIN = 0, 1, 2


class KindPriority(BaseModel):
    """Fixed total order of declaration kinds, lowest rank first."""

    model_config = ConfigDict(frozen=True)

    order: tuple[DeclKind, ...]

    @field_validator("order")
    @classmethod
    def _distinct(cls, value: tuple[DeclKind, ...]) -> tuple[DeclKind, ...]:
        if len(set(value)) != len(value):
            raise ValueError("each declaration kind may appear only once in the priority order")
        return value

    def rank(self, kind: DeclKind) -> int:
        try:
            return self.order.index(kind)
        except ValueError:
            raise UnknownDeclarationKindError(f"No priority for declaration kind '{kind.value}'") from None


DEFAULT_PRIORITIES = KindPriority(
    order=(DeclKind.IMPORT, DeclKind.CONST, DeclKind.VAR, DeclKind.TYPE, DeclKind.FUNC),
)


class OrderingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    alphabetical: bool = False
    priorities: KindPriority = DEFAULT_PRIORITIES


def receiver_type_name(decl: Declaration) -> str:
    """Return the type a method is declared on, or ``""`` for a plain function."""
    receiver = decl.receiver
    if receiver is None:
        return ""
    if receiver.shape is ReceiverShape.UNRECOGNIZED or not receiver.type_name:
        raise MalformedReceiverError(f"Invalid receiver type '{receiver.text}' for method '{decl.name}'")
    return receiver.type_name


def _run_indexes(declarations: list[Declaration]) -> dict[Declaration, int]:
    # Singles between two multi-member groups share an even run index; each
    # multi-member group gets the odd index between its neighbouring runs.
    anchors_seen: dict[DeclKind, int] = {}
    runs: dict[Declaration, int] = {}
    for decl in declarations:
        if decl.kind not in _GROUPED_KINDS:
            continue
        seen = anchors_seen.get(decl.kind, 0)
        if decl.single_member_name is None:
            seen += 1
            anchors_seen[decl.kind] = seen
            runs[decl] = 2 * seen - 1
        else:
            runs[decl] = 2 * seen
    return runs


class DeclarationComparator:
    """Orders the declarations of one file.

    ``key`` gives the sort key of a declaration and ``compare`` the three-way
    comparison derived from it. Keys of declarations that compare equal keep
    their source order under a stable sort.
    """

    def __init__(self, declarations: list[Declaration], config: OrderingConfig) -> None:
        self._config = config
        self._runs = _run_indexes(declarations) if config.alphabetical else {}

    def key(self, decl: Declaration) -> tuple[Any, ...]:
        rank = self._config.priorities.rank(decl.kind)
        if not self._config.alphabetical:
            return (rank,)

        if decl.kind is DeclKind.FUNC:
            name = decl.name or ""
            recv = receiver_type_name(decl)
            if recv:
                return (rank, _METHOD, recv, name)
            if name == "main":
                return (rank, _MAIN, "", "")
            return (rank, _FUNCTION, "", name)

        if decl.kind in _GROUPED_KINDS:
            return (rank, self._runs[decl], decl.single_member_name or "")

        return (rank,)

    def compare(self, a: Declaration, b: Declaration) -> int:
        key_a, key_b = self.key(a), self.key(b)
        return (key_a > key_b) - (key_a < key_b)


def sort_declarations(declarations: list[Declaration], config: OrderingConfig) -> list[Declaration]:
    """Return the declarations in canonical order; ties keep their source order."""
    comparator = DeclarationComparator(declarations, config)
    ordered = sorted(declarations, key=functools.cmp_to_key(comparator.compare))
    logger.debug("Sorted %d declarations (alphabetical=%s)", len(ordered), config.alphabetical)
    return ordered
