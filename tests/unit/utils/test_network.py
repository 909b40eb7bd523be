"""Tests for the network utility module."""
from types import SimpleNamespace
from unittest.mock import Mock

from trusted_proxies.services.chain_evaluator import ChainEvaluator
from trusted_proxies.services.trust_store import TrustStore
from trusted_proxies.utils.network import evaluate_request, get_client_ip, get_peer_host


def _make_request(host="10.0.0.1", headers=None, state=None):
    request = Mock()
    request.headers = headers or {}
    request.client = Mock(host=host) if host is not None else None
    request.state = state if state is not None else SimpleNamespace()
    return request


class TestGetPeerHost:
    """Tests for get_peer_host()."""

    def test_returns_client_host(self):
        """Should return request.client.host."""
        assert get_peer_host(_make_request(host="192.168.1.5")) == "192.168.1.5"

    def test_returns_none_when_no_client(self):
        """Should return None when request.client is None."""
        assert get_peer_host(_make_request(host=None)) is None

    def test_returns_none_when_client_host_is_none(self):
        """Should return None when client.host is None."""
        request = _make_request()
        request.client = Mock(host=None)
        assert get_peer_host(request) is None


class TestGetClientIP:
    """Tests for get_client_ip()."""

    def test_prefers_middleware_resolved_value(self):
        """Should reuse the value ClientIPMiddleware stored."""
        request = _make_request(state=SimpleNamespace(client_ip="198.51.100.23"))
        assert get_client_ip(request) == "198.51.100.23"

    def test_ignores_forwarded_for_without_evaluator(self):
        """X-Forwarded-For is spoofable, so it is never trusted by default."""
        request = _make_request(headers={"X-Forwarded-For": "203.0.113.50, 70.41.3.18"})
        assert get_client_ip(request) == "10.0.0.1"

    def test_uses_evaluator_for_trusted_peer(self):
        """Should honour X-Forwarded-For through the evaluator."""
        evaluator = ChainEvaluator(TrustStore(["10.0.0.0/8"]))
        request = _make_request(headers={"X-Forwarded-For": "203.0.113.50, 70.41.3.18"})

        assert get_client_ip(request, evaluator) == "70.41.3.18"

    def test_custom_header_name(self):
        """Should read the chain from a custom header."""
        evaluator = ChainEvaluator(TrustStore(["10.0.0.0/8"]))
        request = _make_request(headers={"Forwarded-Chain": "203.0.113.50"})

        assert get_client_ip(request, evaluator, header_name="Forwarded-Chain") == "203.0.113.50"

    def test_returns_unknown_when_no_client(self):
        """Should return 'unknown' when request.client is None."""
        assert get_client_ip(_make_request(host=None)) == "unknown"

    def test_returns_unknown_when_evaluator_has_no_peer(self):
        """Should return 'unknown' when the evaluator has no peer to start from."""
        evaluator = ChainEvaluator(TrustStore())
        assert get_client_ip(_make_request(host=None), evaluator) == "unknown"


class TestEvaluateRequest:
    """Tests for evaluate_request()."""

    def test_passes_raw_header_and_peer(self):
        """Should hand the untrimmed header and peer host to the evaluator."""
        evaluator = Mock()
        request = _make_request(headers={"X-Forwarded-For": "  1.2.3.4 "})

        evaluate_request(request, evaluator)

        evaluator.evaluate.assert_called_once_with("10.0.0.1", "  1.2.3.4 ")
