"""Tests for plugin lookup and installation."""

from typing import ClassVar

import pytest

from desplegable import Markdown, PluginError
from desplegable.parsing import ProbeMode
from desplegable.parsing.blocks import create_default_rules
from desplegable.plugins import (
    BUILTIN_PLUGINS,
    CollapsiblePlugin,
    DesplegablePlugin,
    apply_plugins,
    get_plugin,
)
from desplegable.renderers import HtmlRenderer
from desplegable.tokens import TokenType


class NeverRule:
    name: ClassVar[str] = "never"

    def probe(self, ctx, start, end, mode: ProbeMode) -> bool:
        return False


class AnchoredPlugin:
    """Test plugin inserting a rule before a given anchor."""

    def __init__(self, anchor: str) -> None:
        self.anchor = anchor

    @property
    def name(self) -> str:
        return "anchored"

    def extend_rules(self, builder) -> None:
        builder.before(self.anchor, NeverRule())

    def extend_renderer(self, renderer) -> None:
        pass


class TestRegistry:
    """Built-in plugin lookup."""

    def test_collapsible_registered(self) -> None:
        assert BUILTIN_PLUGINS["collapsible"] is CollapsiblePlugin

    def test_get_plugin(self) -> None:
        plugin = get_plugin("collapsible")
        assert isinstance(plugin, CollapsiblePlugin)
        assert isinstance(plugin, DesplegablePlugin)

    def test_unknown_plugin(self) -> None:
        with pytest.raises(PluginError, match="unknown plugin") as exc_info:
            get_plugin("tables")
        assert exc_info.value.plugin_name == "tables"
        assert "collapsible" in str(exc_info.value)


class TestApplyPlugins:
    """apply_plugins resolves names and extends builder and renderer."""

    def test_applies_rules_and_render_rules(self) -> None:
        builder = create_default_rules()
        renderer = HtmlRenderer()
        assert apply_plugins(["collapsible"], builder, renderer) == ["collapsible"]
        chain = builder.build()
        assert "collapsible" in chain
        assert "classy_list" in chain
        assert renderer.has_rule(TokenType.COLLAPSIBLE_SUMMARY)

    def test_all(self) -> None:
        assert Markdown(plugins=["all"]).plugins == tuple(BUILTIN_PLUGINS)

    def test_duplicates_applied_once(self) -> None:
        md = Markdown(plugins=["collapsible", "all", "collapsible"])
        assert md.plugins == ("collapsible",)

    def test_instances_accepted(self) -> None:
        md = Markdown(plugins=[AnchoredPlugin("paragraph")])
        assert md.plugins == ("anchored",)
        assert md.rules.names[-2:] == ("never", "paragraph")

    def test_bad_anchor_wrapped(self) -> None:
        with pytest.raises(PluginError, match="anchored"):
            Markdown(plugins=[AnchoredPlugin("table")])

    def test_duplicate_rule_wrapped(self) -> None:
        builder = create_default_rules()
        apply_plugins([CollapsiblePlugin()], builder, HtmlRenderer())
        with pytest.raises(PluginError, match="already registered"):
            apply_plugins([CollapsiblePlugin()], builder, HtmlRenderer())

    def test_unknown_name_in_engine(self) -> None:
        with pytest.raises(PluginError):
            Markdown(plugins=["nope"])

    def test_no_plugins(self) -> None:
        assert Markdown(plugins=None).plugins == ()
        assert "collapsible" not in Markdown(plugins=[]).rules
