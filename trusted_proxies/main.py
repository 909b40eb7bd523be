"""Trusted Proxies FastAPI Application."""
from datetime import datetime
import logging

from fastapi import FastAPI, Request

from trusted_proxies.config import get_settings
from trusted_proxies.middleware.client_ip import ClientIPMiddleware
from trusted_proxies.models.schemas import ChainHop, ClientIPResponse, HealthCheck
from trusted_proxies.services.chain_evaluator import ChainEvaluator, ChainResult
from trusted_proxies.services.trust_store import TrustStore
from trusted_proxies.utils.exceptions import InvalidTrustSpecification
from trusted_proxies.utils.network import get_client_ip, get_peer_host

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Get settings
settings = get_settings()


def build_evaluator(settings) -> ChainEvaluator:
    """Load the configured trusted proxies, failing fast on bad entries in strict mode."""
    try:
        store = TrustStore.from_specs(settings.trusted_proxies, strict=settings.trusted_proxies_strict)
    except InvalidTrustSpecification as e:
        logger.error(f"Invalid TRUSTED_PROXIES entry {e.spec!r}: {e.detail}")
        raise
    return ChainEvaluator(store)


evaluator = build_evaluator(settings)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Client IP resolution behind trusted proxies",
    version="1.0.0"
)

app.add_middleware(ClientIPMiddleware, settings=settings, evaluator=evaluator)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Trusting {len(evaluator.store)} proxy network(s) for {settings.forwarded_for_header}")


def _chain_hops(result: ChainResult) -> list[ChainHop]:
    hops = zip(result.hops, result.trusted_by)
    return [
        ChainHop(
            address=str(hop),
            valid=hop.is_valid,
            trusted_by=str(network) if network is not None else None,
        )
        for hop, network in reversed(list(hops))
    ]


@app.get("/", response_model=HealthCheck)
async def health_check():
    """Health check endpoint."""
    return HealthCheck(
        status="healthy",
        timestamp=datetime.utcnow(),
        trusted_networks=len(evaluator.store),
    )


@app.get("/api/client-ip", response_model=ClientIPResponse)
async def client_ip(request: Request):
    """Report the deduced client IP and the chain it was deduced from."""
    result = getattr(request.state, "forwarded_chain", None)
    return ClientIPResponse(
        client_ip=get_client_ip(request, evaluator, settings.forwarded_for_header),
        peer=get_peer_host(request),
        forwarded_for=request.headers.get(settings.forwarded_for_header),
        chain=_chain_hops(result) if result is not None else [],
    )
