"""Classification of git clone output into a closed set of failure kinds.

This is the only module that inspects error text; everything downstream works
with ``FailureKind``.
"""

from __future__ import annotations

from ..domain.models import FailureKind


CHECKOUT_FAILED_SIGNATURES = (
    "clone succeeded, but checkout failed",
    "unable to checkout working tree",
    "invalid path",
)

AUTH_SIGNATURES = (
    "permission denied",
    "authentication failed",
    "invalid username or password",
    "invalid credentials",
    "could not read username",
    "could not read password",
    "terminal prompts disabled",
    "returned error: 401",
    "returned error: 403",
)

NOT_FOUND_SIGNATURES = (
    "repository not found",
    "does not appear to be a git repository",
    "returned error: 404",
    "does not exist",
    "not found",
)

NETWORK_SIGNATURES = (
    "could not resolve host",
    "failed to connect",
    "connection timed out",
    "connection reset",
    "connection refused",
    "operation timed out",
    "the remote end hung up unexpectedly",
    "early eof",
    "rpc failed",
    "unable to access",
    "gnutls",
    "ssl",
)

_ORDERED = (
    (FailureKind.CHECKOUT_FAILED, CHECKOUT_FAILED_SIGNATURES),
    (FailureKind.AUTH, AUTH_SIGNATURES),
    (FailureKind.NOT_FOUND, NOT_FOUND_SIGNATURES),
    (FailureKind.NETWORK, NETWORK_SIGNATURES),
)


def classify_clone_failure(exit_code: int, output: str) -> FailureKind:
    """Map a clone's exit code and combined output to a ``FailureKind``.

    A zero exit code is a success unless the output reports a failed checkout.
    """
    text = output.lower()
    if exit_code == 0:
        if any(sig in text for sig in CHECKOUT_FAILED_SIGNATURES[:2]):
            return FailureKind.CHECKOUT_FAILED
        return FailureKind.NONE

    for kind, signatures in _ORDERED:
        if any(sig in text for sig in signatures):
            return kind
    return FailureKind.UNKNOWN
