"""
Tests for the Tree Layout Engine
================================

Covers subtree sizing, centering, depth spacing, the no-overlap invariant
and degenerate inputs.
"""
import random

import pytest

from orgchart.config import (
    DIAGRAM_MARGIN, HORIZONTAL_SPACING, NODE_HEIGHT, NODE_WIDTH, VERTICAL_SPACING
)
from orgchart.model.layout import (
    LayoutError, diagram_extent, find_node, index_nodes, iter_edges, iter_nodes, layout
)

from conftest import leaves, make_unit

LEVEL_STEP = NODE_HEIGHT + VERTICAL_SPACING


def _center(node):
    return node.x + node.width / 2


def random_forest(seed, max_nodes=120, max_children=6, roots=3):
    """Seeded random forest mixing wide fan-outs and long chains."""
    rng = random.Random(seed)
    forest = [make_unit(f"R{i}") for i in range(rng.randint(1, roots))]
    frontier = list(forest)
    count = len(forest)
    while frontier and count < max_nodes:
        parent = frontier.pop(rng.randrange(len(frontier)))
        # Mostly narrow, sometimes a single child (chains), sometimes very wide
        fan_out = rng.choice([0, 1, 1, 2, 3, max_children, max_children * 2])
        for _ in range(min(fan_out, max_nodes - count)):
            child = make_unit(f"{parent.name}.{len(parent.children)}")
            parent.children.append(child)
            frontier.append(child)
            count += 1
    return forest


RANDOM_SEEDS = list(range(12))


# ============================================================
# Scenarios
# ============================================================

class TestScenarios:
    def test_empty_input(self):
        assert layout([]) == []
        assert layout(None) == []

    def test_single_root_at_origin(self):
        [root] = layout([make_unit("Solo")])
        assert (root.x, root.y) == (0.0, 0.0)
        assert root.level == 0
        assert root.subtree_width == NODE_WIDTH
        assert root.children == []

    def test_root_with_three_leaves(self, star_tree):
        [root] = layout(star_tree)
        a, b, c = root.children

        assert root.subtree_width == 3 * NODE_WIDTH + 2 * HORIZONTAL_SPACING
        assert [a.x, b.x, c.x] == [0.0, NODE_WIDTH + HORIZONTAL_SPACING, 2 * (NODE_WIDTH + HORIZONTAL_SPACING)]
        # Gap between neighbouring cards is exactly the spacing constant
        assert b.x - (a.x + a.width) == HORIZONTAL_SPACING
        assert c.x - (b.x + b.width) == HORIZONTAL_SPACING
        # Root centered over the children span
        assert _center(root) == pytest.approx((a.x + c.x + c.width) / 2)

    def test_lopsided_branches(self, lopsided_tree):
        [root] = layout(lopsided_tree)
        wide, narrow = root.children

        assert wide.subtree_width == 5 * NODE_WIDTH + 4 * HORIZONTAL_SPACING
        assert narrow.subtree_width == NODE_WIDTH
        assert wide.subtree_width > narrow.subtree_width

        # The narrow branch starts right after the wide subtree, not at a fixed column
        assert narrow.subtree_x == wide.subtree_x + wide.subtree_width + HORIZONTAL_SPACING
        assert narrow.x == narrow.subtree_x
        # The single leaf sits directly under its parent
        assert narrow.children[0].x == narrow.x

    def test_top_level_siblings_packed_from_zero(self):
        roots = layout([make_unit("A", children=leaves(2)), make_unit("B")])
        first, second = roots
        assert first.subtree_x == 0.0
        assert second.subtree_x == first.subtree_width + HORIZONTAL_SPACING
        assert second.y == 0.0

    def test_deeply_unbalanced_chain(self):
        unit = make_unit("bottom")
        for i in range(50):
            unit = make_unit(f"level {i}", children=[unit])
        [root] = layout([unit])
        nodes = list(iter_nodes([root]))

        assert len(nodes) == 51
        assert all(n.x == 0.0 for n in nodes)
        assert nodes[-1].level == 50

    def test_very_deep_chain_does_not_recurse(self):
        unit = make_unit("bottom")
        for i in range(3000):
            unit = make_unit(f"level {i}", children=[unit])
        [root] = layout([unit])
        assert max(n.level for n in iter_nodes([root])) == 3000


# ============================================================
# Invariants
# ============================================================

class TestInvariants:
    @pytest.fixture(params=["star_tree", "lopsided_tree", "deep_tree"] + [f"seed-{s}" for s in RANDOM_SEEDS])
    def tree(self, request):
        if request.param.startswith("seed-"):
            return random_forest(int(request.param[5:]))
        return request.getfixturevalue(request.param)

    def test_sibling_subtrees_never_overlap(self, tree):
        roots = layout(tree)
        groups = [roots] + [n.children for n in iter_nodes(roots)]
        for siblings in groups:
            spans = sorted(n.span for n in siblings)
            for (_, right), (left, _) in zip(spans, spans[1:]):
                assert right <= left

    def test_cards_on_a_level_keep_spacing(self, tree):
        by_level = {}
        for node in iter_nodes(layout(tree)):
            by_level.setdefault(node.level, []).append(node.x)
        for xs in by_level.values():
            xs.sort()
            for left, right in zip(xs, xs[1:]):
                assert right - (left + NODE_WIDTH) >= HORIZONTAL_SPACING - 1e-6

    def test_child_is_one_level_step_below_parent(self, tree):
        for parent, child in iter_edges(layout(tree)):
            assert child.level == parent.level + 1
            assert child.y == parent.y + NODE_HEIGHT + VERTICAL_SPACING

    def test_parent_centered_over_children(self, tree):
        for node in iter_nodes(layout(tree)):
            if node.children:
                left = node.children[0].x
                right = node.children[-1].x + node.children[-1].width
                assert _center(node) == pytest.approx((left + right) / 2)

    def test_cards_have_fixed_size(self, tree):
        for node in iter_nodes(layout(tree)):
            assert (node.width, node.height) == (NODE_WIDTH, NODE_HEIGHT)

    def test_deterministic(self, tree):
        first = [(n.id, n.x, n.y) for n in iter_nodes(layout(tree))]
        second = [(n.id, n.x, n.y) for n in iter_nodes(layout(tree))]
        assert first == second

    def test_input_not_modified(self, star_tree):
        before = [c.name for c in star_tree[0].children]
        layout(star_tree)
        assert [c.name for c in star_tree[0].children] == before


# ============================================================
# Traversal helpers and extent
# ============================================================

class TestHelpers:
    def test_iter_nodes_is_preorder(self, deep_tree):
        names = [n.unit.name for n in iter_nodes(layout(deep_tree))]
        assert names[:5] == ["A", "A1", "A1- 0", "A1- 1", "A2"]
        assert names[-5] == "B"

    def test_find_and_index(self, lopsided_tree):
        roots = layout(lopsided_tree)
        assert find_node(roots, 20).unit.name == "Narrow"
        assert find_node(roots, 999_999) is None
        assert set(index_nodes(roots)) == {n.id for n in iter_nodes(roots)}

    def test_extent_of_star(self, star_tree):
        width, height = diagram_extent(layout(star_tree))
        assert width == 3 * NODE_WIDTH + 2 * HORIZONTAL_SPACING + DIAGRAM_MARGIN
        assert height == LEVEL_STEP + NODE_HEIGHT + DIAGRAM_MARGIN

    def test_extent_uses_position_lookup(self, star_tree):
        roots = layout(star_tree)
        width, height = diagram_extent(roots, lambda n: (5000.0, 0.0) if n.id == 1 else n.position)
        assert width == 5000.0 + NODE_WIDTH + DIAGRAM_MARGIN

    def test_extent_of_empty(self):
        assert diagram_extent([]) == (0.0, 0.0)


# ============================================================
# Invalid input
# ============================================================

class TestInvalidInput:
    def test_cycle_is_rejected(self):
        a = make_unit("A")
        b = make_unit("B", children=[a])
        a.children.append(b)
        with pytest.raises(LayoutError):
            layout([a])

    def test_shared_subtree_is_rejected(self):
        shared = make_unit("Shared")
        with pytest.raises(LayoutError):
            layout([make_unit("A", children=[shared]), make_unit("B", children=[shared])])

    def test_layout_error_is_value_error(self):
        assert issubclass(LayoutError, ValueError)
