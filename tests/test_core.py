import pytest

import listbench
from listbench import benchmark, listof, listof_vararg, parametrize, product
from listbench.benchmarks.states import ListState


def test_bare_benchmark_is_named_after_function():
    @benchmark
    def vararg_single():
        return listof_vararg(1)

    assert isinstance(vararg_single, listbench.Benchmark)
    assert vararg_single.name == "vararg_single"
    assert vararg_single.fn() == (1,)


def test_benchmark_with_name_and_tags():
    @benchmark(name="default_single", tags=("creation", "single"))
    def single():
        return listof(1)

    assert single.name == "default_single"
    assert single.tags == ("creation", "single")


def test_parametrize_binds_arguments():
    @parametrize([{"count": 1}, {"count": 10}])
    def repeated(count: int) -> int:
        return len([listof(i) for i in range(count)])

    assert [bm.name for bm in repeated] == ["repeated_count=1", "repeated_count=10"]
    assert [bm.fn() for bm in repeated] == [1, 10]
    # bound arguments show up as defaults of the benchmark's interface.
    assert repeated[1].interface.names == ("count",)
    assert repeated[1].interface.defaults == (10,)


def test_parametrize_warns_on_duplicate_names():
    with pytest.warns(UserWarning, match="duplicate configuration name 'repeated_count=1'"):

        @parametrize([{"count": 1}, {"count": 1}])
        def repeated(count: int) -> int:
            return count


def test_parametrize_rejects_mistyped_value():
    with pytest.raises(TypeError, match="expected type <class 'int'>"):

        @parametrize([{"count": "1"}])
        def repeated(count: int) -> int:
            return count


def test_parametrize_accepts_union_members():
    @parametrize([{"value": 1}, {"value": None}])
    def wrap(value: int | None) -> tuple:
        return listof_vararg(value)

    assert len(wrap) == 2


def test_parametrize_rejects_unknown_argument():
    with pytest.raises(TypeError, match="unexpected keyword argument 'size'"):

        @parametrize([{"size": 1}])
        def repeated(count: int) -> int:
            return count


def test_product_covers_every_combination():
    @product(count=[1, 2], variant=["default", "vararg"])
    def repeated(count: int, variant: str) -> tuple[int, str]:
        return count, variant

    assert [bm.fn() for bm in repeated] == [
        (1, "default"),
        (1, "vararg"),
        (2, "default"),
        (2, "vararg"),
    ]


def test_product_names_fixtures_by_their_parameters():
    @product(state=[ListState("default"), ListState("vararg", values="odd")])
    def first(state: ListState) -> int:
        return state.list[0]

    assert [bm.name for bm in first] == [
        "first_variant=default",
        "first_variant=vararg_values=odd",
    ]


def test_product_warns_on_duplicate_names():
    with pytest.warns(UserWarning, match="duplicate"):

        @product(count=[1, 1])
        def repeated(count: int) -> int:
            return count
