"""Models for test attempts and the errors they carry."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal, TypeAlias

TestStatus: TypeAlias = Literal["passed", "failed", "timedOut", "skipped", "interrupted"]
OutputStream: TypeAlias = Literal["stdout", "stderr"]


@dataclass(frozen=True, kw_only=True)
class Location:
    """Position in a source file."""

    file: str
    line: int
    column: int


@dataclass(frozen=True, kw_only=True)
class StackError:
    """Error with a raw stack trace; the message is repeated at its top."""

    message: str
    stack: str


@dataclass(frozen=True, kw_only=True)
class PlainError:
    """Error that only carries a message."""

    message: str


@dataclass(frozen=True, kw_only=True)
class OpaqueError:
    """Arbitrary thrown value that is not an error object."""

    value: object


TestError: TypeAlias = StackError | PlainError | OpaqueError


@dataclass(frozen=True, kw_only=True)
class Attachment:
    """File or in-memory payload attached to a test attempt."""

    name: str
    content_type: str
    path: str | None = None
    body: bytes | str | None = None


@dataclass(frozen=True, kw_only=True, eq=False)
class TestResult:
    """One attempt of a test case.

    Results compare and hash by identity so that the reporter can key
    per-attempt state on them without touching the object itself.
    """

    __test__ = False

    status: TestStatus
    retry: int = 0
    duration: float = 0
    error: TestError | None = None
    attachments: Sequence[Attachment] = field(default_factory=tuple)


@dataclass(frozen=True, kw_only=True)
class TestOutput:
    """Chunk of output captured while an attempt was running."""

    __test__ = False

    chunk: bytes | str
    stream: OutputStream

    @property
    def text(self) -> str:
        """Chunk decoded as UTF-8 text."""
        if isinstance(self.chunk, bytes):
            return self.chunk.decode("utf-8", errors="replace")
        return self.chunk
