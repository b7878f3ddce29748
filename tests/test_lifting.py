"""Tests for lifting and merging of usage contexts."""

from __future__ import annotations

from mustache_usage.analysis import follow, lift_nested, merge_usage


class TestLiftNested:
    """lift_nested() target selection."""

    def test_lift_into_root(self) -> None:
        """With only the root enclosing, nested names go to the root mapping."""
        record = {"scalar": True, "nested": {"a": {"scalar": True}}}
        root = {"r": record}
        lift_nested(record, [root])
        assert root == {"r": {"scalar": True}, "a": {"scalar": True}}

    def test_skips_leaf_parents(self) -> None:
        """Scalar and array parents are passed over."""
        record = {"array": True, "nested": {"a": {"scalar": True}}}
        outer: dict = {"section": True}
        arr = {"array": True}
        root: dict = {}
        lift_nested(record, [root, outer, arr])
        assert outer["nested"] == {"a": {"scalar": True}}
        assert "nested" not in arr
        assert "nested" not in record

    def test_noop_without_nested(self) -> None:
        """Records without nested names are left alone."""
        record = {"scalar": True}
        root: dict = {}
        lift_nested(record, [root])
        assert record == {"scalar": True}
        assert root == {}

    def test_noop_without_parents(self) -> None:
        """With nowhere to go, nested names stay put."""
        record = {"scalar": True, "nested": {"a": {}}}
        lift_nested(record, [])
        assert record["nested"] == {"a": {}}

    def test_empty_nested_removed(self) -> None:
        """An empty nested map is dropped."""
        record: dict = {"scalar": True, "nested": {}}
        lift_nested(record, [{}])
        assert record == {"scalar": True}

    def test_scope_holds_lifted_record(self) -> None:
        """Lifting into a scope that already holds the record itself merges without error."""
        inner = {"scalar": True, "escaped": True}
        record = {"section": True, "scalar": True, "nested": {"a": inner}}
        root = {"a": record}
        forwarded: dict = {}
        lift_nested(record, [root], forwarded)
        assert root == {"a": {"section": True, "scalar": True, "escaped": True}}
        assert root["a"] is record
        assert follow(inner, forwarded) is record

    def test_stale_parents_followed(self) -> None:
        """Parents merged away earlier are replaced by their surviving record."""
        survivor: dict = {"section": True}
        stale: dict = {"section": True}
        forwarded = {id(stale): (stale, survivor)}
        record = {"scalar": True, "nested": {"n": {}}}
        lift_nested(record, [{}, stale], forwarded)
        assert survivor["nested"] == {"n": {}}
        assert "nested" not in stale

    def test_skips_scopes_inside_record(self) -> None:
        """Parents living inside the lifted record are not lift targets."""
        inner: dict = {"section": True}
        record = {"scalar": True, "nested": {"inner": inner}}
        root = {"record": record}
        lift_nested(record, [root, record, inner])
        assert root["inner"] is inner
        assert "nested" not in inner


class TestMergeUsage:
    """merge_usage() deep union."""

    def test_moves_by_reference(self) -> None:
        """Records missing from the target keep their identity."""
        moved = {"scalar": True}
        target: dict = {}
        merge_usage(target, {"a": moved}, spill=target)
        assert target["a"] is moved

    def test_merges_fields(self) -> None:
        """Shared records combine flags and members."""
        target = {"x": {"scalar": True, "members": {"y": {"section": True}}}}
        source = {"x": {"section": True, "members": {"y": {"inverted": True}, "z": {}}}}
        merge_usage(target, source, spill=target)
        assert target == {
            "x": {
                "scalar": True,
                "section": True,
                "members": {"y": {"section": True, "inverted": True}, "z": {}},
            }
        }

    def test_merges_elements(self) -> None:
        """Element records merge like any other record."""
        target = {"x": {"array": True, "elements": {"scalar": True}}}
        source = {"x": {"elements": {"section": True}}}
        merge_usage(target, source, spill=target)
        assert target["x"]["elements"] == {"scalar": True, "section": True}

    def test_destination_value_kept(self) -> None:
        """Plain values already present in the target win."""
        target = {"x": {"name": "x"}}
        merge_usage(target, {"x": {"name": "other"}}, spill=target)
        assert target["x"]["name"] == "x"

    def test_elements_moved_by_reference(self) -> None:
        """An elements record missing from the target keeps its identity."""
        elements = {"scalar": True}
        target: dict = {"x": {"section": True}}
        merge_usage(target, {"x": {"array": True, "elements": elements}}, spill=target)
        assert target["x"]["elements"] is elements

    def test_forwarding_recorded(self) -> None:
        """Records folded into existing ones are entered in the forwarding table."""
        kept = {"scalar": True, "elements": {"scalar": True}}
        folded_elements = {"section": True}
        folded = {"section": True, "elements": folded_elements}
        forwarded: dict = {}
        target = {"x": kept}
        merge_usage(target, {"x": folded}, spill=target, forwarded=forwarded)
        assert follow(folded, forwarded) is kept
        assert follow(folded_elements, forwarded) is kept["elements"]
        assert follow(kept, forwarded) is kept

    def test_forwarding_chains(self) -> None:
        """follow() walks through repeated merges."""
        a: dict = {}
        b: dict = {}
        c: dict = {}
        assert follow(a, {id(a): (a, b), id(b): (b, c)}) is c

    def test_leaf_nested_spills(self) -> None:
        """Nested names merged onto a leaf record move to the spill scope."""
        target = {"x": {"scalar": True}}
        source = {"x": {"nested": {"z": {"scalar": True}}}}
        merge_usage(target, source, spill=target)
        assert target == {"x": {"scalar": True}, "z": {"scalar": True}}

    def test_leaf_member_nested_spills(self) -> None:
        """Spilling also applies to members merged deeper down."""
        spill: dict = {}
        target = {"x": {"members": {"len": {"scalar": True}}}}
        source = {"x": {"members": {"len": {"nested": {"q": {}}}}}}
        merge_usage(target, source, spill=spill)
        assert target == {"x": {"members": {"len": {"scalar": True}}}}
        assert spill == {"q": {}}
