"""Interactive feedback tools exposed over MCP via native macOS dialogs."""

__version__ = "1.0.1"
