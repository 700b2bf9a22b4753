import pytest

from gac.exceptions import (
    BackendError,
    BackendErrorKind,
    ConfigError,
    GacError,
    GitError,
    LLMError,
    ValidationError,
)


def test_exceptions_hierarchy_and_str():
    g = GitError("git")
    llm_err = LLMError("llm")
    c = ConfigError("cfg")
    v = ValidationError("val")

    for exc in (g, llm_err, c, v):
        assert isinstance(exc, GacError)
    assert "git" in str(g)
    assert "llm" in str(llm_err)
    assert "cfg" in str(c)
    assert "val" in str(v)


def test_backend_error_carries_kind_and_provider_message():
    err = BackendError(
        BackendErrorKind.UNKNOWN, "DashScope API error: boom", provider_message="boom"
    )
    assert isinstance(err, LLMError)
    assert err.kind is BackendErrorKind.UNKNOWN
    assert err.provider_message == "boom"
    assert str(err) == "DashScope API error: boom"


def test_backend_error_provider_message_optional():
    err = BackendError(BackendErrorKind.AUTH, "bad key")
    assert err.provider_message is None
    with pytest.raises(GacError):
        raise err


@pytest.mark.parametrize(
    "kind, value",
    [
        (BackendErrorKind.AUTH, "auth"),
        (BackendErrorKind.QUOTA_EXCEEDED, "quota_exceeded"),
        (BackendErrorKind.INVALID_RESPONSE, "invalid_response"),
        (BackendErrorKind.UNKNOWN, "unknown"),
    ],
)
def test_error_kind_values(kind, value):
    assert kind.value == value
    assert BackendErrorKind(value) is kind
