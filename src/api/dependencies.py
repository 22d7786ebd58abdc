from api.backend import PlanningBackend
from classification.task_classifier import TaskClassifier
from extraction.task_extractor import FreeformParser
from inference.field_inference import FieldInferenceEngine
from scheduling.scheduler import Scheduler
from task_planner.config import PlannerConfig

# Configuration
config = PlannerConfig.from_env()

parser = FreeformParser.from_config(config.llm)
inference = FieldInferenceEngine(
    classifier=TaskClassifier() if config.classify_categories else None,
)
scheduler = Scheduler()
backend = PlanningBackend(parser=parser, inference=inference, scheduler=scheduler)


def get_parser() -> FreeformParser:
    return parser


def get_inference_engine() -> FieldInferenceEngine:
    return inference


def get_scheduler() -> Scheduler:
    return scheduler


def get_backend() -> PlanningBackend:
    return backend
