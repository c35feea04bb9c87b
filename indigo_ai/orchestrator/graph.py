# indigo_ai/orchestrator/graph.py
import logging
from typing import Optional

from langchain_core.language_models import BaseChatModel
from langgraph.graph import StateGraph, END, START

from indigo_ai.capabilities.home_control.tools import format_device_state, format_inventory
from indigo_ai.core.errors import DecodeError, DeviceStateError, NetworkError
from indigo_ai.core.iot import IndigoClient
from indigo_ai.core.llm import complete, get_llm
from indigo_ai.core.prompts import render_prompt
from indigo_ai.orchestrator.state import QueryState
from indigo_ai.utils.parsing import APPLICABLE_STATES, parse_desired_states, parse_device_selection

logger = logging.getLogger(__name__)


def build_query_graph(
    client: IndigoClient,
    llm: Optional[BaseChatModel] = None,
    prompt_dir: Optional[str] = None,
    selection_template: str = "prompt3.txt",
    desired_state_template: str = "prompt2.txt",
):
    """
    Compiles the two-round AI flow:

        list_devices -> select_devices -> fetch_states -> desire_states -> apply_states

    Failures in the first four nodes abort the run. Per-device failures while
    fetching or applying state are logged and skipped.
    """
    llm = llm or get_llm()

    def list_devices_node(state: QueryState):
        devices = client.list_devices()
        logger.info("Found %d devices", len(devices))
        return {"inventory": format_inventory(devices)}

    def select_devices_node(state: QueryState):
        prompt = render_prompt(state["inventory"], state["query"], selection_template, prompt_dir)
        reply = complete(prompt, llm)
        logger.info("Response from LLM: %s", reply.replace("\n", ""))
        paths = parse_device_selection(reply).device_paths
        logger.info("Model selected %d device(s): %s", len(paths), paths)
        return {"device_paths": paths}

    def fetch_states_node(state: QueryState):
        dump = ""
        for path in state["device_paths"]:
            try:
                detail = client.get_device(path)
            except (NetworkError, DecodeError) as e:
                logger.error("Couldn't fetch device %s, skipping: %s", path, e)
                continue
            dump += format_device_state(path, detail)
        return {"state_dump": dump}

    def desire_states_node(state: QueryState):
        prompt = render_prompt(state["state_dump"], state["query"], desired_state_template, prompt_dir)
        reply = complete(prompt, llm)
        logger.info("Response from LLM: %s", reply.replace("\n", ""))
        logger.info("Interpreting the desired state")
        desired = parse_desired_states(reply)
        if desired.text:
            logger.info("Response from LLM: %s", desired.text)
        return {"desired_states": desired.devices}

    def apply_states_node(state: QueryState):
        applied = []
        for entry in state["desired_states"]:
            if entry.desired_state not in APPLICABLE_STATES:
                logger.info("No change for %s (desiredState=%r)", entry.device_path, entry.desired_state)
                continue
            logger.info("The device %s is turning %s", entry.device_path, entry.desired_state)
            try:
                client.set_device_state(entry.device_path, entry.desired_state)
            except (DeviceStateError, DecodeError) as e:
                logger.error("Changing %s failed, skipping: %s", entry.device_path, e)
                continue
            applied.append((entry.device_path, entry.desired_state))
        return {"applied": applied}

    # --- GRAPH ---
    workflow = StateGraph(QueryState)

    workflow.add_node("list_devices", list_devices_node)
    workflow.add_node("select_devices", select_devices_node)
    workflow.add_node("fetch_states", fetch_states_node)
    workflow.add_node("desire_states", desire_states_node)
    workflow.add_node("apply_states", apply_states_node)

    workflow.add_edge(START, "list_devices")
    workflow.add_edge("list_devices", "select_devices")
    workflow.add_edge("select_devices", "fetch_states")
    workflow.add_edge("fetch_states", "desire_states")
    workflow.add_edge("desire_states", "apply_states")
    workflow.add_edge("apply_states", END)

    # No checkpointer: nothing survives the process
    return workflow.compile()


def run_query(graph, query: str) -> QueryState:
    """Runs the compiled graph for one question and returns the final state."""
    return graph.invoke({"query": query})
