from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class RepoDescriptor:
    """A clonable unit: a directory name under the workspace root and its remote URL."""
    name: str
    url: str


class PatchOutcome(str, Enum):
    APPLIED = "applied"
    REVERTED = "reverted"
    NOOP = "noop"
    FAILED = "failed"


class PatchState(str, Enum):
    """Patch state derived from file content, never stored."""
    APPLIED = "applied"
    ORIGINAL = "original"
    NOT_FOUND = "not-found"


@dataclass(frozen=True)
class TextReplace:
    """Whole-file swap between two known contents (registry auth files)."""
    path: Path
    original_content: str
    patched_content: str

    def __post_init__(self) -> None:
        if self.original_content == self.patched_content:
            raise ValueError(f"original and patched content are identical for {self.path}")

    @property
    def kind(self) -> str:
        return "text_replace"


@dataclass(frozen=True)
class LockfileUrlRewrite:
    """Registry URL prefix rewrite inside a lock file.

    When ``remove_adjacent_integrity_line`` is set, a checksum line directly
    following a rewritten line is dropped, since its hash no longer matches
    the redirected source.
    """
    path: Path
    original_url_prefix: str
    patched_url_prefix: str
    remove_adjacent_integrity_line: bool = True

    def __post_init__(self) -> None:
        if not self.original_url_prefix or not self.patched_url_prefix:
            raise ValueError(f"URL prefixes must be non-empty for {self.path}")
        # Detection scans for the original prefix; overlap would make it ambiguous.
        if (
            self.original_url_prefix in self.patched_url_prefix
            or self.patched_url_prefix in self.original_url_prefix
        ):
            raise ValueError(
                f"URL prefixes must not contain one another for {self.path}: "
                f"{self.original_url_prefix!r} / {self.patched_url_prefix!r}"
            )

    @property
    def kind(self) -> str:
        return "lockfile_url_rewrite"


@dataclass(frozen=True)
class SourceLiteralPatch:
    """Exact substring hotfix in a source file, needed only locally."""
    path: Path
    original_snippet: str
    patched_snippet: str

    def __post_init__(self) -> None:
        if not self.original_snippet or not self.patched_snippet:
            raise ValueError(f"snippets must be non-empty for {self.path}")
        if self.original_snippet == self.patched_snippet:
            raise ValueError(f"original and patched snippet are identical for {self.path}")

    @property
    def kind(self) -> str:
        return "source_literal_patch"


PatchTarget = TextReplace | LockfileUrlRewrite | SourceLiteralPatch


@dataclass(frozen=True)
class PatchStatusEntry:
    target: PatchTarget
    state: PatchState


@dataclass(frozen=True)
class PatchSummary:
    applied_count: int
    skipped_count: int
    failed: tuple[str, ...] = ()
    outcomes: tuple[tuple[str, PatchOutcome], ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failed


class FailureKind(str, Enum):
    """Closed classification of a clone attempt's result."""
    NONE = "none"
    CHECKOUT_FAILED = "checkout_failed"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    UNKNOWN = "unknown"

    @property
    def retryable(self) -> bool:
        return self in (FailureKind.NETWORK, FailureKind.UNKNOWN)

    @property
    def remediation(self) -> str:
        return _REMEDIATIONS.get(self, "")


_REMEDIATIONS = {
    FailureKind.AUTH: (
        "Access denied. Check that your git credentials (SSH key or access token) "
        "are configured and have read access to this repository."
    ),
    FailureKind.NOT_FOUND: (
        "Repository not found. Check the URL, or request access if the repository is private."
    ),
    FailureKind.NETWORK: "Network error while cloning. Check your connection or VPN and retry.",
    FailureKind.UNKNOWN: "Clone failed. See the git output above for details.",
}


@dataclass(frozen=True)
class CloneOutcome:
    """Result of a single clone invocation: exit code and combined output."""
    exit_code: int
    output: str = ""


@dataclass(frozen=True)
class CloneFailure:
    repo: str
    kind: FailureKind
    message: str


@dataclass
class EnsureResult:
    cloned: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    failures: list[CloneFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class RepairResult:
    files_recovered: int
    references_rewritten: int
    recovered_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class RegistryArtifact:
    package_name: str


@dataclass(frozen=True)
class VerificationResult:
    found: tuple[str, ...]
    missing: tuple[str, ...]
    polls: int

    @property
    def ok(self) -> bool:
        return not self.missing


@dataclass(frozen=True)
class RegistrySettings:
    """Runtime parameters for restoring and probing the local registry."""
    url: str
    container: str
    storage_path: str
    db_file: str
    owner: str
    archive_storage_dir: str = "storage"
    ready_timeout_seconds: float = 30.0
    ready_interval_seconds: float = 1.0
    verify_attempts: int = 5
    verify_interval_seconds: float = 3.0
    request_timeout_seconds: float = 5.0
