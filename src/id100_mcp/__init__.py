"""Host-side driver and MCP server for the ID100 clock/display."""

__version__ = "0.1.0"
