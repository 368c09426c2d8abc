# -*- coding: utf-8 -*-
from academic_planner.server import mcp as planner_mcp
from mcp_gateway.server import mcp as gateway_mcp

# Server registry mapping server names to MCP instances
# "planner_server" works on data passed in; "gateway" goes through the REST service
SERVER_REGISTRY = {
    "planner_server": planner_mcp,
    "gateway": gateway_mcp,
}


async def list_tool_schemas() -> list[dict]:
    """Collect and return JSON schemas of all available tools from MCP servers."""
    schemas = []

    for server_name, server in SERVER_REGISTRY.items():
        tools = await server.get_tools()
        for tool_key, tool in tools.items():
            schemas.append({
                "server": server_name,
                "name": tool_key,
                "title": tool.title or tool_key,
                "description": tool.description or "",
                "inputSchema": tool.parameters or {},
                "outputSchema": tool.output_schema or {},
            })

    return schemas
