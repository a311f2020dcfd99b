"""Named groups of tools that can be switched on as a unit."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Protocol

from .tool import ToolDefinition

logger = logging.getLogger(__name__)

ALL_TOOLSETS = "all"


class ToolsetNotFoundError(KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"toolset {self.name} does not exist"


class ToolServer(Protocol):
    """Anything tools can be registered with."""

    def add_tools(self, *tools: ToolDefinition) -> None:
        ...


class Toolset:
    def __init__(self, name: str, description: str, read_only: bool = False):
        self.name = name
        self.description = description
        self.enabled = False
        self.read_only = read_only
        self.read_tools: List[ToolDefinition] = []
        self.write_tools: List[ToolDefinition] = []

    def add_read_tools(self, *tools: ToolDefinition) -> "Toolset":
        for tool in tools:
            tool.read_only = True
            self.read_tools.append(tool)
        return self

    def add_write_tools(self, *tools: ToolDefinition) -> "Toolset":
        """Add write tools. A read-only toolset silently drops them."""
        if self.read_only:
            return self
        self.write_tools.extend(tools)
        return self

    def get_active_tools(self) -> List[ToolDefinition]:
        if not self.enabled:
            return []
        if self.read_only:
            return list(self.read_tools)
        return [*self.read_tools, *self.write_tools]

    def register_tools(self, server: ToolServer) -> None:
        tools = self.get_active_tools()
        if tools:
            server.add_tools(*tools)


class ToolsetGroup:
    """All known toolsets plus which of them are enabled."""

    def __init__(self, read_only: bool = False):
        self.toolsets: Dict[str, Toolset] = {}
        self.read_only = read_only
        self.everything_on = False

    def add_toolset(self, toolset: Toolset) -> None:
        if self.read_only:
            toolset.read_only = True
            toolset.write_tools = []
        self.toolsets[toolset.name] = toolset

    def enable_toolset(self, name: str) -> None:
        toolset = self.toolsets.get(name)
        if toolset is None:
            raise ToolsetNotFoundError(name)
        toolset.enabled = True

    def enable_toolsets(self, names: Iterable[str]) -> None:
        """
        Enable the named toolsets.

        An empty selection, or one containing "all", enables every toolset.

        Raises:
            ToolsetNotFoundError: A name does not match any toolset
        """
        names = list(names)
        if not names or ALL_TOOLSETS in names:
            self.everything_on = True
            for toolset in self.toolsets.values():
                toolset.enabled = True
            return
        for name in names:
            self.enable_toolset(name)

    def get_enabled_tools(self) -> List[ToolDefinition]:
        tools: List[ToolDefinition] = []
        for toolset in self.toolsets.values():
            tools.extend(toolset.get_active_tools())
        return tools

    def register_tools(self, server: ToolServer) -> None:
        for toolset in self.toolsets.values():
            toolset.register_tools(server)
        logger.info(
            f"Registered {len(self.get_enabled_tools())} tools "
            f"(read_only={self.read_only}, toolsets={[t.name for t in self.toolsets.values() if t.enabled]})"
        )
