"""Tests for active-leaf resolution and the view transition detector."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from rumkit.navigation import Route, ViewTransition, ViewTransitionDetector, find_active_leaf
from rumkit.sinks import RecordingSink


def stack(*routes, index=None):
    tree = {"routes": list(routes)}
    if index is not None:
        tree["index"] = index
    return tree


def screen(name, key=None, state=None):
    route = {"name": name}
    if key is not None:
        route["key"] = key
    if state is not None:
        route["state"] = state
    return route


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def detector(sink):
    return ViewTransitionDetector(sink)


# =============================================================================
# find_active_leaf
# =============================================================================


class TestFindActiveLeaf:
    def test_flat_tree(self):
        tree = stack(screen("Login"), screen("Welcome"), index=0)
        assert find_active_leaf(tree) == Route(name="Login", key="Login")

    def test_uses_route_key(self):
        tree = stack(screen("Detail", key="Detail-abc"), index=0)
        assert find_active_leaf(tree).key == "Detail-abc"

    def test_missing_index_means_last_route(self):
        tree = stack(screen("Home"), screen("ProductsList"))
        assert find_active_leaf(tree).name == "ProductsList"

    def test_three_levels(self):
        tree = stack(
            screen("Auth"),
            screen(
                "Main",
                state=stack(
                    screen("Tabs", state=stack(screen("Users"), screen("Products"), index=1)),
                    index=0,
                ),
            ),
            index=1,
        )
        assert find_active_leaf(tree).name == "Products"

    @pytest.mark.parametrize(
        "tree",
        [
            None,
            {},
            {"routes": []},
            stack(screen("A"), index=3),
            stack(screen("A"), index=-1),
            stack(screen("A"), index="0"),
            stack(screen("A"), index=True),
            stack({"key": "no-name"}, index=0),
            stack(screen("Outer", state={"routes": []}), index=0),
        ],
        ids=[
            "none",
            "no-routes-key",
            "empty-routes",
            "index-too-high",
            "negative-index",
            "string-index",
            "bool-index",
            "unnamed-route",
            "empty-nested",
        ],
    )
    def test_malformed_trees_have_no_leaf(self, tree):
        assert find_active_leaf(tree) is None

    def test_attribute_style_nodes(self):
        @dataclass
        class R:
            name: str
            key: str | None = None
            state: object = None

        @dataclass
        class S:
            routes: list = field(default_factory=list)
            index: int | None = None

        tree = S(routes=[R("Outer", state=S(routes=[R("Inner", key="k1")], index=0))], index=0)
        assert find_active_leaf(tree) == Route(name="Inner", key="k1")


# =============================================================================
# ViewTransitionDetector
# =============================================================================


class TestDetector:
    def test_first_observation_emits_nothing(self, detector, sink):
        assert detector.is_initial_observation
        assert detector.observe(stack(screen("Login"))) is None
        assert not detector.is_initial_observation
        assert detector.last_view == "Login"
        assert sink.views == []

    def test_login_login_welcome(self, detector, sink):
        assert detector.observe(stack(screen("Login"))) is None
        assert detector.observe(stack(screen("Login"))) is None

        transition = detector.observe(stack(screen("Welcome")))

        assert transition == ViewTransition(from_view="Login", to_view="Welcome", to_key="Welcome")
        assert len(sink.views) == 1
        assert sink.views[0].name == "Welcome"
        assert sink.views[0].attributes == {"previous_view": "Login"}
        assert detector.last_view == "Welcome"

    def test_intermediate_change_with_same_leaf_is_ignored(self, detector, sink):
        def tree(mid_index):
            return stack(
                screen("Splash"),
                screen(
                    "Main",
                    state=stack(
                        screen("TabsA", state=stack(screen("Users"))),
                        screen("TabsB", state=stack(screen("Users"))),
                        index=mid_index,
                    ),
                ),
                index=1,
            )

        detector.observe(tree(0))
        assert detector.observe(tree(1)) is None
        assert detector.last_view == "Users"
        assert sink.views == []

    def test_one_transition_per_change(self, detector, sink):
        detector.observe(stack(screen("A")))
        for name in ["B", "B", "C", "C", "C", "A"]:
            detector.observe(stack(screen(name)))
        assert [v.name for v in sink.views] == ["B", "C", "A"]

    def test_only_previous_leaf_matters(self, detector):
        detector.observe(stack(screen("A")))
        detector.observe(stack(screen("B")))
        transition = detector.observe(stack(screen("A")))
        assert transition.from_view == "B"

    def test_malformed_tree_emits_nothing_and_keeps_state(self, detector, sink):
        detector.observe(stack(screen("A")))
        assert detector.observe({"routes": []}) is None
        assert detector.last_view == "A"
        assert detector.observe(stack(screen("A"))) is None
        assert sink.views == []

    def test_malformed_first_observation_still_primes(self, detector, sink):
        assert detector.observe(None) is None
        assert not detector.is_initial_observation
        transition = detector.observe(stack(screen("Home")))
        assert transition == ViewTransition(from_view=None, to_view="Home", to_key="Home")

    def test_state_advances_when_publish_fails(self):
        class FailingSink(RecordingSink):
            def start_view(self, key, name, attributes):
                raise RuntimeError("backend down")

        detector = ViewTransitionDetector(FailingSink())
        detector.observe(stack(screen("A")))
        transition = detector.observe(stack(screen("B")))

        assert transition is not None
        assert detector.last_view == "B"
        assert detector.observe(stack(screen("B"))) is None

    def test_custom_view_name(self, sink):
        detector = ViewTransitionDetector(sink, view_name=lambda r: r.name.lower())
        detector.observe(stack(screen("Login")))
        transition = detector.observe(stack(screen("Welcome", key="w-1")))
        assert transition.to_view == "welcome"
        assert sink.views[0].key == "w-1"

    def test_raising_view_name_is_treated_as_no_leaf(self, sink):
        def view_name(route):
            if route.name == "Broken":
                raise ValueError("unmapped")
            return route.name

        detector = ViewTransitionDetector(sink, view_name=view_name)
        detector.observe(stack(screen("Login")))

        assert detector.observe(stack(screen("Broken"))) is None
        assert detector.last_view == "Login"
        transition = detector.observe(stack(screen("Welcome")))
        assert transition.from_view == "Login"
        assert [v.name for v in sink.views] == ["Welcome"]

    def test_reset_suppresses_next_observation(self, detector, sink):
        detector.observe(stack(screen("A")))
        detector.reset()
        assert detector.is_initial_observation
        assert detector.observe(stack(screen("B"))) is None
        assert sink.views == []
