import argparse

from manabase import EngineConfig

from .utils import config


def build_parser(defaults: EngineConfig = config) -> argparse.ArgumentParser:
    """Command line for the server; defaults come from MANABASE_MCP_* settings."""
    parser = argparse.ArgumentParser(description="Manabase MCP Server")
    transport = parser.add_mutually_exclusive_group()
    transport.add_argument(
        "--stdio",
        dest="transport",
        action="store_const",
        const="stdio",
        help="Run the MCP server over stdio transport.",
    )
    transport.add_argument(
        "--http",
        dest="transport",
        action="store_const",
        const="http",
        help="Run the MCP server over HTTP transport.",
    )
    parser.add_argument(
        "--host",
        default=defaults.mcp_host,
        help=f"Host for HTTP server (default: {defaults.mcp_host}).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=defaults.mcp_port,
        help=f"Port for HTTP server (default: {defaults.mcp_port}).",
    )
    parser.set_defaults(transport=defaults.mcp_transport)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    # Importing the server registers every tool
    from .mcp import mcp

    if args.transport == "http":
        mcp.run(transport="http", host=args.host, port=args.port)
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
