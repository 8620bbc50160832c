import random

import pytest

from order_pricing.engine import (
    InvalidInvoiceTotal, InvalidPercentage, InvalidSplitStrategy, InvoiceLineItem,
    UnassignedLineItem, calculate_split, percentage_from_amounts,
)


@pytest.fixture
def line_items():
    return [
        InvoiceLineItem("li-1", "Photography", 25000),
        InvoiceLineItem("li-2", "Drone", 12550),
        InvoiceLineItem("li-3", "Floor plan", 9999),
    ]


def test_none_strategy_gives_everything_to_agent(line_items):
    result = calculate_split(47549, "none", line_items=line_items)
    assert result.agent_amount_cents == 47549
    assert result.secondary_amount_cents == 0
    assert [d.assigned_to for d in result.details] == ["primary"] * 3


def test_percentage_scenario_even():
    result = calculate_split(10000, "percentage", percentage_to_secondary=30)
    assert result.secondary_amount_cents == 3000
    assert result.agent_amount_cents == 7000


def test_percentage_scenario_uneven():
    result = calculate_split(9999, "percentage", percentage_to_secondary=33)
    assert result.secondary_amount_cents == 3300
    assert result.agent_amount_cents == 6699
    assert result.agent_amount_cents + result.secondary_amount_cents == 9999


def test_percentage_rounds_half_up():
    # 50 * 5% = 2.5 -> 3, builtin round() would give 2
    result = calculate_split(50, "percentage", percentage_to_secondary=5)
    assert result.secondary_amount_cents == 3
    assert result.agent_amount_cents == 47


@pytest.mark.parametrize("p", [0, 100, 0.5, 99.99])
def test_percentage_bounds_accepted(p):
    result = calculate_split(12345, "percentage", percentage_to_secondary=p)
    assert result.agent_amount_cents + result.secondary_amount_cents == 12345
    assert result.agent_amount_cents >= 0
    assert result.secondary_amount_cents >= 0


def test_percentage_split_reconstructs_total_for_random_pairs():
    rng = random.Random(20240501)
    for _ in range(10_000):
        total = rng.randint(0, 10_000_000)
        if rng.random() < 0.5:
            p = rng.randint(0, 100)
        else:
            p = round(rng.uniform(0, 100), 2)

        result = calculate_split(total, "percentage", percentage_to_secondary=p)

        assert result.agent_amount_cents + result.secondary_amount_cents == total, (total, p)
        assert result.agent_amount_cents >= 0
        assert result.secondary_amount_cents >= 0


@pytest.mark.parametrize("p", [-0.01, 100.01, None, float("nan"), True, "lots"])
def test_invalid_percentage(p):
    with pytest.raises(InvalidPercentage):
        calculate_split(10000, "percentage", percentage_to_secondary=p)


@pytest.mark.parametrize("total", [-1, None, 10.5, "100", float("inf"), False])
def test_invalid_total(total):
    with pytest.raises(InvalidInvoiceTotal):
        calculate_split(total, "none")


def test_line_item_split(line_items):
    result = calculate_split(
        47549,
        "line_item",
        line_items=line_items,
        line_item_assignments={"li-1": "primary", "li-2": "secondary", "li-3": "secondary"},
    )
    assert result.secondary_amount_cents == 12550 + 9999
    assert result.agent_amount_cents == 25000
    assert {d.line_item_id: d.assigned_to for d in result.details} == {
        "li-1": "primary", "li-2": "secondary", "li-3": "secondary",
    }


def test_line_item_split_reconstructs_total_for_any_assignment():
    rng = random.Random(7)
    for _ in range(500):
        items = [
            InvoiceLineItem(f"li-{i}", "item", rng.randint(0, 50_000))
            for i in range(rng.randint(1, 12))
        ]
        total = sum(item.total_cents for item in items)
        assignments = {item.line_item_id: rng.choice(["primary", "secondary"]) for item in items}

        result = calculate_split(total, "line_item", line_items=items, line_item_assignments=assignments)

        expected_secondary = sum(
            item.total_cents for item in items if assignments[item.line_item_id] == "secondary"
        )
        assert result.secondary_amount_cents == expected_secondary
        assert result.agent_amount_cents + result.secondary_amount_cents == total


def test_line_item_split_requires_every_assignment(line_items):
    with pytest.raises(UnassignedLineItem) as exc:
        calculate_split(47549, "line_item", line_items=line_items,
                        line_item_assignments={"li-1": "secondary"})
    assert exc.value.line_item_ids == ["li-2", "li-3"]


def test_line_item_split_accepts_agent_brokerage_aliases(line_items):
    result = calculate_split(
        None,
        "dual",
        line_items=line_items,
        line_item_assignments={"li-1": "brokerage", "li-2": "agent", "li-3": "agent"},
    )
    assert result.strategy == "line_item"
    assert result.total_cents == 47549
    assert result.brokerage_amount_cents == 25000
    assert result.agent_amount_cents == 22549


def test_line_item_split_larger_than_total_is_rejected(line_items):
    with pytest.raises(InvalidInvoiceTotal):
        calculate_split(
            100,
            "line_item",
            line_items=line_items,
            line_item_assignments={"li-1": "secondary", "li-2": "primary", "li-3": "primary"},
        )


def test_total_derived_from_line_items(line_items):
    result = calculate_split(None, "percentage", percentage_to_secondary=10, line_items=line_items)
    assert result.total_cents == 47549
    assert result.secondary_amount_cents == 4755


def test_dict_line_items_are_accepted():
    result = calculate_split(
        None, "line_item",
        line_items=[{"id": "a", "totalCents": 300}, {"line_item_id": "b", "total_cents": 200}],
        line_item_assignments={"a": "secondary", "b": "primary"},
    )
    assert result.secondary_amount_cents == 300
    assert result.agent_amount_cents == 200


def test_dict_line_item_without_id_is_rejected():
    with pytest.raises(InvalidInvoiceTotal) as exc:
        calculate_split(None, "none", line_items=[{"total_cents": 5}])
    assert exc.value.code == "InvalidInvoiceTotal"
    assert "#1" in exc.value.message


def test_line_item_totals_follow_invoice_total_rule():
    result = calculate_split(
        100.0, "line_item",
        line_items=[InvoiceLineItem("a", "Photos", 60.0), {"id": "b", "total_cents": 40}],
        line_item_assignments={"a": "secondary", "b": "primary"},
    )
    assert result.secondary_amount_cents == 60
    assert isinstance(result.details[0].amount_cents, int)


@pytest.mark.parametrize("cents", [-1, 10.5, "100", float("nan"), True])
def test_invalid_line_item_total(cents):
    with pytest.raises(InvalidInvoiceTotal):
        calculate_split(None, "none", line_items=[{"id": "a", "total_cents": cents}])


def test_unknown_strategy():
    with pytest.raises(InvalidSplitStrategy):
        calculate_split(100, "thirds")


def test_unknown_assignment_value(line_items):
    with pytest.raises(InvalidSplitStrategy):
        calculate_split(47549, "line_item", line_items=line_items,
                        line_item_assignments={"li-1": "nobody", "li-2": "primary", "li-3": "primary"})


def test_percentage_from_amounts():
    assert percentage_from_amounts(10000, 3000) == 30
    assert percentage_from_amounts(9999, 3300) == 33
    assert percentage_from_amounts(0, 0) == 0
