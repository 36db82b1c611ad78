from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class DeclKind(str, Enum):
    IMPORT = "import"
    CONST = "const"
    VAR = "var"
    TYPE = "type"
    FUNC = "func"


class ReceiverShape(str, Enum):
    IDENTIFIER = "identifier"
    POINTER = "pointer"
    UNRECOGNIZED = "unrecognized"


class AttachmentOwner(Enum):
    """Pseudo-owners of root comments that no declaration claims."""

    TRAILING = "trailing"


TRAILING = AttachmentOwner.TRAILING


class Receiver(BaseModel):
    model_config = ConfigDict(frozen=True)

    shape: ReceiverShape
    type_name: str | None = None
    text: str = ""


class Declaration(BaseModel):
    """One top-level declaration, located by its byte span in the source."""

    model_config = ConfigDict(frozen=True)

    kind: DeclKind
    start_byte: int
    end_byte: int
    name: str | None = None
    receiver: Receiver | None = None
    member_names: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_span(self) -> "Declaration":
        if self.start_byte < 0 or self.start_byte >= self.end_byte:
            raise ValueError(f"invalid declaration span [{self.start_byte}, {self.end_byte})")
        return self

    @property
    def is_method(self) -> bool:
        return self.receiver is not None

    @property
    def single_member_name(self) -> str | None:
        """Name of the only member of a const/var/type group, if it has exactly one."""
        if self.kind in (DeclKind.CONST, DeclKind.VAR, DeclKind.TYPE) and len(self.member_names) == 1:
            return self.member_names[0]
        return None


class Comment(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_byte: int
    end_byte: int


class ParsedFile(BaseModel):
    """Positional view of one source file, as produced by a front-end."""

    source: bytes
    package_name: str
    package_start: int
    declarations: list[Declaration]
    comments: list[Comment]


AttachmentKey = Declaration | AttachmentOwner
AttachmentMap = dict[AttachmentKey, bytes]
