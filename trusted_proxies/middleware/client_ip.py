"""Middleware resolving the real client IP behind trusted proxies."""
from __future__ import annotations

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from trusted_proxies.config import get_settings
from trusted_proxies.services.chain_evaluator import ChainEvaluator
from trusted_proxies.services.trust_store import TrustStore
from trusted_proxies.utils.network import evaluate_request, get_peer_host

logger = logging.getLogger(__name__)


class ClientIPMiddleware(BaseHTTPMiddleware):
    """Store the deduced client IP and forwarding chain on ``request.state``."""

    def __init__(self, app, settings=None, evaluator: ChainEvaluator | None = None):
        super().__init__(app)
        self.settings = settings or get_settings()
        self.header_name = self.settings.forwarded_for_header
        if evaluator is None:
            store = TrustStore.from_specs(
                self.settings.trusted_proxies,
                strict=self.settings.trusted_proxies_strict,
            )
            evaluator = ChainEvaluator(store)
        self.evaluator = evaluator

    async def dispatch(self, request: Request, call_next):
        if not self.settings.client_ip_resolution_enabled:
            request.state.client_ip = get_peer_host(request)
            request.state.forwarded_chain = None
            return await call_next(request)

        result = evaluate_request(request, self.evaluator, self.header_name)
        request.state.client_ip = str(result.client) or None
        request.state.forwarded_chain = result

        if len(result.hops) > 1:
            logger.debug(f"Client IP {request.state.client_ip} via {result.as_strings()}")

        return await call_next(request)
