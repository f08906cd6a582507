"""
Call site polymorphism: the same chain runs over sequences of one or two
concrete types.

How (and whether) the interpreter specializes the chain for the sequence
types it observes is implementation-specific, so only relative trends between
the scenarios carry meaning.
"""

from listbench import pipelines, product
from listbench.benchmarks.states import SCENARIOS, PolymorphicState


@product(state=[PolymorphicState(scenario) for scenario in SCENARIOS], tags=("polymorphic",))
def polymorphic_sum(state: PolymorphicState) -> int:
    total = 0
    for seq in state.lists:
        total += pipelines.sum_chain(seq)
    return total
