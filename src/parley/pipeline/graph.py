"""Turn pipeline as a LangGraph state graph.

Graph structure:
    intake -> fill_slot -> evaluate -> execute -> END

Outtake is not a node: the engine drains the queue once the graph has run,
so a failed turn never hands out messages.
"""

from typing import Any

from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph
from langgraph.runtime import Runtime

from parley.core.types import ConversationState
from parley.pipeline.context import PipelineContext
from parley.pipeline.evaluate import evaluate
from parley.pipeline.execute import execute
from parley.pipeline.fill_slot import fill_slot
from parley.pipeline.intake import intake


async def intake_node(state: ConversationState, runtime: Runtime[PipelineContext]) -> ConversationState:
    ctx = runtime.context
    return intake(
        state,
        ctx.message,
        ctx.abilities,
        incoming=ctx.incoming,
        default_ability=ctx.settings.default_ability,
    )


async def fill_slot_node(state: ConversationState, runtime: Runtime[PipelineContext]) -> ConversationState:
    ctx = runtime.context
    return await fill_slot(state, ctx.abilities, ctx.settings.fill, ctx.conversation)


async def evaluate_node(state: ConversationState, runtime: Runtime[PipelineContext]) -> ConversationState:
    return evaluate(state, runtime.context.abilities)


async def execute_node(state: ConversationState, runtime: Runtime[PipelineContext]) -> ConversationState:
    ctx = runtime.context
    return await execute(state, ctx.abilities, ctx.settings.fill, ctx.conversation)


def build_pipeline() -> CompiledStateGraph[ConversationState, PipelineContext, Any, Any]:
    """Build the linear turn pipeline."""
    builder: StateGraph[ConversationState, PipelineContext] = StateGraph(
        ConversationState, context_schema=PipelineContext
    )

    builder.add_node("intake", intake_node)
    builder.add_node("fill_slot", fill_slot_node)
    builder.add_node("evaluate", evaluate_node)
    builder.add_node("execute", execute_node)

    builder.add_edge(START, "intake")
    builder.add_edge("intake", "fill_slot")
    builder.add_edge("fill_slot", "evaluate")
    builder.add_edge("evaluate", "execute")
    builder.add_edge("execute", END)

    return builder.compile()
