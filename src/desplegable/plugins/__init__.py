"""Plugin system for desplegable.

Plugins extend an engine at construction time:

1. Block rules: inserted into the RuleChainBuilder before it is frozen
2. Render rules: added to the engine's HtmlRenderer

Usage:
    >>> from desplegable import Markdown
    >>> md = Markdown(plugins=["collapsible"])
    >>> md("+++ Title\\nbody\\n+++")

Thread Safety:
Plugins are stateless. Applying one only touches the builder and renderer
of the engine under construction.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from desplegable.errors import PluginError

if TYPE_CHECKING:
    from desplegable.parsing.ruler import RuleChainBuilder
    from desplegable.renderers.html import HtmlRenderer

__all__ = [
    "DesplegablePlugin",
    "BUILTIN_PLUGINS",
    "register_plugin",
    "get_plugin",
    "apply_plugins",
]


@runtime_checkable
class DesplegablePlugin(Protocol):
    """Protocol for desplegable plugins."""

    @property
    def name(self) -> str:
        """Plugin identifier."""
        ...

    def extend_rules(self, builder: RuleChainBuilder) -> None:
        """Insert block rules. Called once per engine."""
        ...

    def extend_renderer(self, renderer: HtmlRenderer) -> None:
        """Add render rules for the plugin's token types. Called once per engine."""
        ...


# Plugin classes by name. Rules themselves live on each engine's chain.
BUILTIN_PLUGINS: dict[str, type[DesplegablePlugin]] = {}


def register_plugin(
    name: str,
) -> Callable[[type[DesplegablePlugin]], type[DesplegablePlugin]]:
    """Decorator to register a built-in plugin class.

    Usage:
        @register_plugin("collapsible")
        class CollapsiblePlugin:
            ...

    """

    def decorator(cls: type[DesplegablePlugin]) -> type[DesplegablePlugin]:
        BUILTIN_PLUGINS[name] = cls
        return cls

    return decorator


def get_plugin(name: str) -> DesplegablePlugin:
    """Get a plugin instance by name.

    Raises:
        PluginError: If plugin name is not recognized

    """
    if name not in BUILTIN_PLUGINS:
        available = ", ".join(sorted(BUILTIN_PLUGINS))
        raise PluginError(name, f"unknown plugin. Available: {available}")
    return BUILTIN_PLUGINS[name]()


def apply_plugins(
    plugins: Iterable[str | DesplegablePlugin],
    builder: RuleChainBuilder,
    renderer: HtmlRenderer,
) -> list[str]:
    """Apply plugins to an engine under construction.

    Args:
        plugins: Plugin names (``"all"`` expands to every built-in) or instances
        builder: Rule chain builder to extend
        renderer: Renderer to extend

    Returns:
        Names of the applied plugins, in order

    """
    resolved: list[DesplegablePlugin] = []
    for plugin in plugins:
        if plugin == "all":
            resolved.extend(get_plugin(name) for name in BUILTIN_PLUGINS)
        elif isinstance(plugin, str):
            resolved.append(get_plugin(plugin))
        else:
            resolved.append(plugin)

    applied: list[str] = []
    for plugin in resolved:
        if plugin.name in applied:
            continue
        try:
            plugin.extend_rules(builder)
        except (KeyError, ValueError) as exc:
            raise PluginError(plugin.name, str(exc)) from exc
        plugin.extend_renderer(renderer)
        applied.append(plugin.name)
    return applied


# Import built-in plugins to register them
from desplegable.plugins.collapsible import CollapsiblePlugin  # noqa: E402

__all__ += ["CollapsiblePlugin"]
