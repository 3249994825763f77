"""AI proxy endpoint: forwards a structured prompt to the model and returns its JSON."""
import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from analysis.models.schemas import AnalyzeProblemRequest
from analysis.services.gateway_client import GeminiGatewayClient, build_gateway_client
from auth.middleware.auth_middleware import get_current_user
from auth.models.schemas import AuthenticatedUser
from shared.utils.exceptions import AnalysisFailedException, IntelliHintException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


def get_gateway_factory() -> Callable[[], GeminiGatewayClient]:
    """Dependency returning a client factory; building is deferred so input errors win over config errors."""
    return build_gateway_client


@router.post("/analyze-problem")
async def analyze_problem(
    request: AnalyzeProblemRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    gateway_factory: Callable[[], GeminiGatewayClient] = Depends(get_gateway_factory),
):
    """Return the model's breakdown object for `problem`, generated from `prompt`."""
    if not request.prompt or not request.problem or not request.problem.strip():
        raise HTTPException(status_code=400, detail="Prompt and problem are required.")

    try:
        gateway = gateway_factory()
        result = await gateway.fetch_breakdown(request.prompt, request.problem)
        if not result.ok:
            raise AnalysisFailedException(f"{result.kind.value}: {result.detail}")
    except IntelliHintException as e:
        logger.error(f"analyze-problem failed for user {current_user.id}: {e}")
        raise e.to_http_exception()

    return result.payload
