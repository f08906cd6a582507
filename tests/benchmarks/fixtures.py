import listbench
from listbench.benchmarks.states import ListState


@listbench.product(state=[ListState("default"), ListState("bogus")], tags=("fixtures",))
def first_element(state: ListState) -> int:
    return state.list[0]


@listbench.benchmark(tags=("fixtures",))
def sink_many(blackhole: listbench.Blackhole) -> None:
    for i in range(10):
        blackhole.consume(listbench.listof(i))
