r"""Unit tests for client and request options."""

from __future__ import annotations

import io
from unittest.mock import Mock

import pytest
from coola.equality import objects_are_equal

from callout import (
    DEFAULT_TIMEOUT,
    ClientConfig,
    JSONTarget,
    default_skip_tls_verify,
    default_skip_tls_verify_from_env,
    skip_tls_verify,
    unmarshal_json_body,
    with_backoff,
    with_default_backoff,
    with_default_header,
    with_default_headers,
    with_default_retries,
    with_default_timeout,
    with_default_tracer,
    with_header,
    with_headers,
    with_retries,
    with_timeout,
    with_tracer,
    write_body,
)
from callout.backoff import ConstantBackoff
from callout.options import RequestOptions

####################################
#     Tests for client options     #
####################################


def test_with_default_header() -> None:
    config = with_default_header("X-Token", "abc")(ClientConfig())
    assert config.headers == {"x-token": "abc"}


def test_with_default_headers_merges() -> None:
    """Test that default headers merge into the existing headers."""
    config = ClientConfig(headers={"a": "1", "b": "2"})

    config = with_default_headers({"B": "3", "c": "4"})(config)

    assert objects_are_equal(config.headers, {"a": "1", "b": "3", "c": "4"})


def test_with_default_headers_copies_input() -> None:
    """Test that mutating the mapping after building the option has no
    effect."""
    headers = {"a": "1"}
    option = with_default_headers(headers)
    headers["a"] = "2"

    assert option(ClientConfig()).headers == {"a": "1"}


def test_with_default_retries() -> None:
    assert with_default_retries(3)(ClientConfig()).retries == 3


def test_with_default_retries_negative() -> None:
    with pytest.raises(ValueError, match=r"retries must be >= 0, got -1"):
        with_default_retries(-1)


@pytest.mark.parametrize(
    ("timeout", "expected"), [(5, 5), (0.5, 0.5), (0, DEFAULT_TIMEOUT), (None, DEFAULT_TIMEOUT)]
)
def test_with_default_timeout(timeout: float | None, expected: float) -> None:
    """Test that a zero or missing timeout falls back to the default."""
    config = with_default_timeout(timeout)(ClientConfig(timeout=1))
    assert config.timeout == expected


def test_with_default_timeout_negative() -> None:
    with pytest.raises(ValueError, match=r"timeout must be >= 0, got -2"):
        with_default_timeout(-2)


@pytest.mark.parametrize("skip", [True, False])
def test_default_skip_tls_verify(skip: bool) -> None:
    assert default_skip_tls_verify(skip)(ClientConfig()).skip_tls_verify is skip


@pytest.mark.parametrize(
    ("environ", "expected"),
    [
        ({"TLS_SKIP_VERIFY": "true"}, True),
        ({"TLS_SKIP_VERIFY": "TRUE"}, True),
        ({"TLS_SKIP_VERIFY": "false"}, False),
        ({"TLS_SKIP_VERIFY": "1"}, False),
        ({}, False),
    ],
)
def test_default_skip_tls_verify_from_env(environ: dict[str, str], expected: bool) -> None:
    config = default_skip_tls_verify_from_env(environ)(ClientConfig())
    assert config.skip_tls_verify is expected


def test_default_skip_tls_verify_from_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that os.environ is read by default."""
    monkeypatch.setenv("TLS_SKIP_VERIFY", "true")
    assert default_skip_tls_verify_from_env()(ClientConfig()).skip_tls_verify


def test_with_default_tracer() -> None:
    tracer = Mock(spec=["trace"])
    assert with_default_tracer(tracer)(ClientConfig()).tracer is tracer


def test_with_default_backoff() -> None:
    backoff = ConstantBackoff(delay=2.0)
    assert with_default_backoff(backoff)(ClientConfig()).backoff_strategy is backoff


#####################################
#     Tests for request options     #
#####################################


def test_request_options_defaults_are_unset() -> None:
    """Test that no override is set by default."""
    assert objects_are_equal(
        RequestOptions.from_options(),
        RequestOptions(
            headers={},
            retries=None,
            timeout=None,
            skip_tls_verify=None,
            body_writer=None,
            json_target=None,
            tracer=None,
            backoff_strategy=None,
        ),
    )


def test_request_options_applied_in_order() -> None:
    """Test that the last scalar option wins and headers merge."""
    request_options = RequestOptions.from_options(
        with_retries(3),
        with_header("A", "1"),
        with_headers({"a": "2", "b": "3"}),
        with_retries(0),
        with_timeout(4),
        skip_tls_verify(True),
    )

    assert request_options.retries == 0
    assert request_options.timeout == 4
    assert request_options.skip_tls_verify
    assert request_options.headers == {"a": "2", "b": "3"}


def test_with_retries_negative() -> None:
    with pytest.raises(ValueError, match=r"retries must be >= 0"):
        with_retries(-3)


def test_with_timeout_negative() -> None:
    with pytest.raises(ValueError, match=r"timeout must be >= 0"):
        with_timeout(-0.1)


def test_with_timeout_none_keeps_client_default() -> None:
    """Test that a None timeout is unset, like the client option."""
    request_options = RequestOptions.from_options(with_timeout(None))

    assert request_options.timeout is None
    assert request_options.resolve(ClientConfig(timeout=7)).timeout == 7


def test_with_timeout_zero_uses_default() -> None:
    effective = RequestOptions.from_options(with_timeout(0)).resolve(ClientConfig(timeout=7))
    assert effective.timeout == DEFAULT_TIMEOUT


def test_write_body() -> None:
    writer = io.BytesIO()
    assert RequestOptions.from_options(write_body(writer)).body_writer is writer


def test_unmarshal_json_body() -> None:
    target = JSONTarget()
    assert RequestOptions.from_options(unmarshal_json_body(target)).json_target is target


def test_unmarshal_json_body_requires_json_target() -> None:
    with pytest.raises(TypeError, match=r"target must be a JSONTarget, got dict"):
        unmarshal_json_body({})


def test_with_tracer() -> None:
    tracer = Mock(spec=["trace"])
    assert RequestOptions.from_options(with_tracer(tracer)).tracer is tracer


def test_with_backoff() -> None:
    backoff = ConstantBackoff()
    assert RequestOptions.from_options(with_backoff(backoff)).backoff_strategy is backoff


#############################################
#     Tests for RequestOptions.resolve     #
#############################################


def test_resolve_without_overrides_keeps_config() -> None:
    """Test that omitted options fall back to the client defaults."""
    config = ClientConfig(headers={"a": "1"}, timeout=7, retries=2, skip_tls_verify=True)

    assert RequestOptions().resolve(config) == config


def test_resolve_with_overrides() -> None:
    """Test that every set option overrides the client default."""
    tracer = Mock(spec=["trace"])
    config = ClientConfig(headers={"a": "1", "b": "2"}, timeout=7, retries=2, skip_tls_verify=True)

    effective = RequestOptions.from_options(
        with_headers({"B": "override", "c": "3"}),
        with_retries(0),
        with_timeout(1.5),
        skip_tls_verify(False),
        with_tracer(tracer),
    ).resolve(config)

    assert effective.headers == {"a": "1", "b": "override", "c": "3"}
    assert effective.retries == 0
    assert effective.timeout == 1.5
    assert not effective.skip_tls_verify
    assert effective.tracer is tracer
    assert config.retries == 2


################################
#     Tests for JSONTarget     #
################################


def test_json_target_initially_unset() -> None:
    target = JSONTarget()
    assert target.value is None
    assert not target.is_set


def test_json_target_set() -> None:
    target = JSONTarget()
    target.set(None)
    assert target.is_set
    assert repr(target) == "JSONTarget(value=None)"
