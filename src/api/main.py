import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.dependencies import config
from api.routers import ops, planning

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Task planner API started (llm provider: {config.llm.provider}, enabled: {config.llm.enabled})")
    yield
    logger.info("Task planner API stopped")


app = FastAPI(title="Task Planner", lifespan=lifespan)

app.include_router(planning.router)
app.include_router(ops.router)
