import logging

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from api.dependencies import config, get_inference_engine, get_parser
from extraction.task_extractor import FreeformParser
from inference.field_inference import FieldInferenceEngine

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(
    parser: FreeformParser = Depends(get_parser),
    engine: FieldInferenceEngine = Depends(get_inference_engine),
) -> dict:
    """Liveness plus which parsing path freeform input will take."""
    return {
        "status": "healthy",
        "llm_provider": config.llm.provider if config.llm.enabled else "none",
        "parsing_strategy": parser.strategy.name,
        "category_inference": engine.classifier is not None,
    }


@router.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
