"""Network utility functions."""
from typing import Optional

from starlette.requests import Request

from trusted_proxies.services.chain_evaluator import ChainEvaluator, ChainResult

DEFAULT_FORWARDED_FOR_HEADER = "X-Forwarded-For"


def get_peer_host(request: Request) -> Optional[str]:
    """Return the directly connected peer's host, or None if unknown."""
    if request.client and request.client.host:
        return request.client.host
    return None


def evaluate_request(
    request: Request,
    evaluator: ChainEvaluator,
    header_name: str = DEFAULT_FORWARDED_FOR_HEADER,
) -> ChainResult:
    """Run the trust walk for a request's peer and forwarding header."""
    return evaluator.evaluate(get_peer_host(request), request.headers.get(header_name))


def get_client_ip(
    request: Request,
    evaluator: Optional[ChainEvaluator] = None,
    header_name: str = DEFAULT_FORWARDED_FOR_HEADER,
) -> str:
    """
    Extract the client IP address from a request.

    Prefers the value resolved by ClientIPMiddleware. Without it, the
    forwarding header is only honoured through ``evaluator``; with no
    evaluator the peer address is returned, since no proxy is trusted.
    Returns "unknown" when nothing usable is available.
    """
    state = getattr(request, "state", None)
    resolved = getattr(state, "client_ip", None) if state is not None else None
    if isinstance(resolved, str) and resolved:
        return resolved

    if evaluator is not None:
        client = evaluate_request(request, evaluator, header_name).client
        if str(client):
            return str(client)
        return "unknown"

    return get_peer_host(request) or "unknown"
