# indigo_ai/orchestrator/state.py

import operator
from typing import Annotated, List, Tuple, TypedDict

from indigo_ai.utils.parsing import DesiredState

class QueryState(TypedDict, total=False):
    # INPUT: The operator's question (-queryText)
    query: str

    # ROUND 1: "- Name (/devices/x)" lines, and the paths the model picked
    inventory: str
    device_paths: List[str]

    # ROUND 2: Current state of the picked devices, and what the model wants
    state_dump: str
    desired_states: List[DesiredState]

    # RESULT: (device_path, state) pairs that were actually sent
    applied: Annotated[List[Tuple[str, str]], operator.add]
