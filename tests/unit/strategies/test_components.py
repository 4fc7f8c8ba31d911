"""
Unit tests for positioned element strategies.
"""

from wardmap.config import Config
from wardmap.strategies import components as _components  # noqa: F401 - ensure component strategies are registered
from wardmap.strategies.base import registry


def extract(strategy: str, text: str):
    return registry.get_by_name(strategy).extract(text, Config())


class TestComponentStrategy:
    def test_reads_components(self):
        result = extract("component", "component Tea [0.8, 0.3]\ncomponent Water [0.4, 0.9] inertia")
        tea, water = result.fields["elements"]
        assert (tea.name, tea.kind, tea.visibility, tea.maturity) == ("Tea", "component", 0.8, 0.3)
        assert water.inertia

    def test_inline_evolve(self):
        result = extract("component", "component Tea [0.8, 0.3] evolve 0.7")
        [tea] = result.fields["elements"]
        assert tea.evolving
        assert tea.evolve_maturity == 0.7

    def test_inline_evolve_out_of_range_is_warning(self):
        result = extract("component", "component B [0.4, 0.5] evolve 3")
        [b] = result.fields["elements"]
        assert (b.name, b.evolving, b.evolve_maturity) == ("B", True, 0.85)
        assert [e.severity for e in result.errors] == ["warning"]

    def test_decorated_label_spacing(self):
        result = extract("component", "component Tea [0.8, 0.3] (buy)")
        [tea] = result.fields["elements"]
        assert tea.decorators.buy
        assert (tea.label.x, tea.label.y) == (10, -20)

    def test_ignores_other_keywords(self):
        result = extract("component", "anchor User [0.95, 0.5]\nTea->Water")
        assert result.fields["elements"] == []


class TestOtherPositioned:
    def test_anchor_defaults(self):
        result = extract("anchor", "anchor User")
        [user] = result.fields["anchors"]
        assert (user.kind, user.visibility, user.maturity) == ("anchor", 0.95, 0.05)

    def test_market(self):
        result = extract("market", "market Shops [0.5, 0.6]")
        [market] = result.fields["markets"]
        assert market.decorators.market
        assert market.increase_label_spacing == 2

    def test_ecosystem(self):
        result = extract("ecosystem", "ecosystem Apps [0.5, 0.6]")
        [eco] = result.fields["ecosystems"]
        assert eco.decorators.ecosystem

    def test_submap_ref(self):
        result = extract("submap", "submap Website [0.83, 0.50] url(submapUrl)")
        [submap] = result.fields["submaps"]
        assert (submap.kind, submap.url) == ("submap", "submapUrl")

    def test_accelerators_merge_in_line_order(self):
        text = "deaccelerator Slow [0.2, 0.3]\naccelerator Fast [0.4, 0.5]"
        result = extract("accelerator", text)
        slow, fast = result.fields["accelerators"]
        assert (slow.name, slow.deaccelerator) == ("Slow", True)
        assert (fast.name, fast.deaccelerator) == ("Fast", False)
