"""Five-stage turn pipeline: intake, fill, evaluate, execute, outtake."""

from parley.pipeline.context import PipelineContext
from parley.pipeline.evaluate import evaluate
from parley.pipeline.execute import execute
from parley.pipeline.fill import SlotFiller
from parley.pipeline.fill_slot import fill_slot
from parley.pipeline.graph import build_pipeline
from parley.pipeline.intake import intake
from parley.pipeline.outtake import outtake

__all__ = [
    "PipelineContext",
    "SlotFiller",
    "build_pipeline",
    "evaluate",
    "execute",
    "fill_slot",
    "intake",
    "outtake",
]
