import pytest

from devenv_bootstrap.core.domain.models import FailureKind
from devenv_bootstrap.core.services.failure_classifier import classify_clone_failure


@pytest.mark.parametrize(
    "output, expected",
    [
        (
            "error: invalid path 'src/icons /arrow.svg'\n"
            "fatal: unable to checkout working tree\n"
            "warning: Clone succeeded, but checkout failed.",
            FailureKind.CHECKOUT_FAILED,
        ),
        ("git@github.com: Permission denied (publickey).", FailureKind.AUTH),
        (
            "fatal: unable to access 'https://github.com/acme/web-app.git/': "
            "The requested URL returned error: 403",
            FailureKind.AUTH,
        ),
        ("fatal: Authentication failed for 'https://github.com/acme/web-app.git/'", FailureKind.AUTH),
        ("remote: Repository not found.\nfatal: repository 'x' not found", FailureKind.NOT_FOUND),
        ("fatal: 'nowhere' does not appear to be a git repository", FailureKind.NOT_FOUND),
        ("fatal: unable to access 'https://github.com/': Could not resolve host: github.com", FailureKind.NETWORK),
        ("error: RPC failed; curl 56 GnuTLS recv error (-54)\nfatal: early EOF", FailureKind.NETWORK),
        ("something nobody has seen before", FailureKind.UNKNOWN),
    ],
)
def test_classify_failed_clone(output, expected):
    assert classify_clone_failure(128, output) is expected


def test_zero_exit_is_success():
    assert classify_clone_failure(0, "Cloning into 'web-app'...") is FailureKind.NONE


def test_zero_exit_with_checkout_warning_is_partial():
    assert classify_clone_failure(0, "warning: Clone succeeded, but checkout failed.") is FailureKind.CHECKOUT_FAILED


def test_retryable_kinds():
    assert FailureKind.NETWORK.retryable
    assert FailureKind.UNKNOWN.retryable
    assert not FailureKind.AUTH.retryable
    assert not FailureKind.NOT_FOUND.retryable
    assert FailureKind.AUTH.remediation
