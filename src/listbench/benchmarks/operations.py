"""Element access and transformation chains over a single-element sequence."""

from listbench import pipelines, product
from listbench.benchmarks.states import VARIANTS, ListState

LIST_STATES = [ListState(variant) for variant in VARIANTS]
ODD_LIST_STATES = [ListState(variant, values="odd") for variant in VARIANTS]


@product(state=LIST_STATES, tags=("operations",))
def list_first(state: ListState) -> int:
    return state.list[0]


@product(state=LIST_STATES, tags=("operations", "chain"))
def list_chain(state: ListState) -> int | None:
    return pipelines.list_chain(state.list)


@product(state=ODD_LIST_STATES, tags=("operations", "chain"))
def list_chain_odd(state: ListState) -> int | None:
    return pipelines.list_chain_odd(state.list)


@product(state=LIST_STATES, tags=("operations", "real-world"))
def list_real_world(state: ListState) -> int:
    return pipelines.list_real_world(state.list)
