"""
Membership set reconciliation tests.
"""

from fieldhouse.utils.reconcile import plan_reconciliation


def test_plan_adds_and_removes_difference():
    plan = plan_reconciliation(["a", "b", "c"], ["b", "c", "d"])

    assert plan.to_add == ["d"]
    assert plan.to_remove == ["a"]
    assert not plan.is_empty


def test_unchanged_set_gives_empty_plan():
    plan = plan_reconciliation(["a", "b"], ["b", "a"])

    assert plan.to_add == []
    assert plan.to_remove == []
    assert plan.is_empty


def test_plan_follows_input_order_and_drops_duplicates():
    plan = plan_reconciliation(["x", "y", "x"], ["c", "a", "c", "b"])

    assert plan.to_add == ["c", "a", "b"]
    assert plan.to_remove == ["x", "y"]


def test_applying_plan_yields_desired_set():
    initial = {"t1", "t2", "t3"}
    desired = {"t2", "t4"}
    plan = plan_reconciliation(sorted(initial), sorted(desired))

    result = (initial | set(plan.to_add)) - set(plan.to_remove)

    assert result == desired
