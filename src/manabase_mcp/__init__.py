"""FastMCP tool server exposing manabase analyses."""
