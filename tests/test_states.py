import pytest

from listbench import ConfigurationError
from listbench.benchmarks.states import (
    INT32_MAX,
    INT32_MIN,
    ODD_BOUND,
    ListState,
    PolymorphicState,
)


@pytest.mark.parametrize("variant,expected_type", [("default", list), ("vararg", tuple)])
def test_list_state_setup(variant: str, expected_type: type) -> None:
    state = ListState(variant)
    state.setup()
    assert isinstance(state.list, expected_type)
    assert len(state.list) == 1
    assert INT32_MIN <= state.list[0] <= INT32_MAX


def test_list_state_inputs_are_reproducible_across_variants() -> None:
    default, vararg = ListState("default"), ListState("vararg")
    default.setup()
    vararg.setup()
    assert default.list[0] == vararg.list[0]

    # a second trial sees the same input as the first.
    first = default.list[0]
    default.setup()
    assert default.list[0] == first


def test_list_state_odd_values() -> None:
    state = ListState("vararg", values="odd")
    state.setup()
    (x,) = state.list
    assert x % 2 == 1
    assert 0 <= x < ODD_BOUND


@pytest.mark.parametrize(
    "state",
    [ListState("bogus"), ListState("default", values="bogus"), PolymorphicState("bogus")],
)
def test_unknown_parameters_raise_configuration_error(state) -> None:
    with pytest.raises(ConfigurationError, match="bogus"):
        state.setup()


@pytest.mark.parametrize(
    "scenario,expected",
    [
        ("default_only", [list] * 4),
        ("vararg_only", [tuple] * 4),
        ("mixed", [list, tuple, list, tuple]),
    ],
)
def test_polymorphic_scenarios(scenario: str, expected: list[type]) -> None:
    state = PolymorphicState(scenario)
    state.setup()
    assert len(state.lists) == 100
    assert all(len(seq) == 1 for seq in state.lists)
    assert all(seq[0] % 2 == 1 and 0 <= seq[0] < ODD_BOUND for seq in state.lists)
    assert [type(seq) for seq in state.lists[:4]] == expected


def test_polymorphic_scenarios_share_inputs() -> None:
    states = [PolymorphicState(s) for s in ("default_only", "vararg_only", "mixed")]
    values = []
    for state in states:
        state.setup()
        values.append([seq[0] for seq in state.lists])
    assert values[0] == values[1] == values[2]


def test_fixture_params_and_repr() -> None:
    assert ListState("default").params() == {"variant": "default"}
    assert ListState("vararg", values="odd").to_json() == {"variant": "vararg", "values": "odd"}
    assert repr(PolymorphicState("mixed")) == "PolymorphicState(scenario='mixed')"


def test_polymorphic_batch_size_distinguishes_configurations() -> None:
    from listbench import product

    assert PolymorphicState("mixed", size=10).params() == {"scenario": "mixed", "size": 10}

    @product(state=[PolymorphicState("mixed"), PolymorphicState("mixed", size=10)])
    def batch(state: PolymorphicState) -> int:
        return len(state.lists)

    assert [bm.name for bm in batch] == ["batch_scenario=mixed", "batch_scenario=mixed_size=10"]
