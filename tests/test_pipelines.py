import pytest

from listbench import pipelines
from listbench.listof import listof, listof_vararg

CHAINS = [
    pipelines.list_chain,
    pipelines.list_chain_odd,
    pipelines.list_real_world,
    pipelines.sum_chain,
]


@pytest.mark.parametrize("chain", CHAINS)
@pytest.mark.parametrize("x", [1, 7, 8, 1_999_999, -(2**31)])
def test_chain_result_independent_of_constructor(chain, x: int) -> None:
    assert chain(listof(x)) == chain(listof_vararg(x))


def test_list_chain_filters_odd_products() -> None:
    # 7 * 3 = 21 is odd, so nothing passes the even filter.
    assert pipelines.list_chain(listof(7)) is None
    # 8 * 3 = 24, 24 + 7 = 31.
    assert pipelines.list_chain(listof(8)) == 31


def test_list_chain_odd_keeps_odd_products() -> None:
    # 7 * 3 = 21 is odd and kept, 21 + 7 = 28.
    assert pipelines.list_chain_odd(listof_vararg(7)) == 28
    assert pipelines.list_chain_odd(listof_vararg(8)) is None


def test_list_chain_on_empty_sequence() -> None:
    assert pipelines.list_chain(listof_vararg()) is None


def test_list_real_world() -> None:
    # (1 + 75) * 3 = 228 -> "228" -> 3 -> 3 + 1
    assert pipelines.list_real_world(listof(1)) == 4
    # (2 + 75) * 3 = 231 is odd and filtered out.
    assert pipelines.list_real_world(listof(2)) == 0
    # (-75 + 75) * 3 = 0 -> "0" has length 1, which is filtered out.
    assert pipelines.list_real_world(listof(-75)) == 0


def test_sum_chain() -> None:
    # 5 * 3 = 15 is odd, 15 + 1 = 16.
    assert pipelines.sum_chain(listof(5)) == 16
    assert pipelines.sum_chain(listof(4)) == 0
