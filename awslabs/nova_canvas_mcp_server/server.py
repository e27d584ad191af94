# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Nova Canvas MCP Server implementation."""

import asyncio
import os
import sys
from awslabs.nova_canvas_mcp_server import __version__
from awslabs.nova_canvas_mcp_server.consts import PROMPT_INSTRUCTIONS, SERVER_NAME
from awslabs.nova_canvas_mcp_server.errors import ImageGenerationError
from awslabs.nova_canvas_mcp_server.services.bedrock_common import (
    create_bedrock_runtime_client,
)
from awslabs.nova_canvas_mcp_server.services.nova_canvas import (
    GENERATE_IMAGE_TOOL,
    ResponseContent,
    handle_tool_call,
)
from loguru import logger
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, LoggingLevel, TextContent, Tool
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union


# Logging
logger.remove()
logger.add(sys.stderr, level=os.getenv('FASTMCP_LOG_LEVEL', 'WARNING'))

# Bedrock Runtime Client typing
if TYPE_CHECKING:
    from mypy_boto3_bedrock_runtime import BedrockRuntimeClient
else:
    BedrockRuntimeClient = object


SERVER_INSTRUCTIONS = f"""
# Amazon Nova Canvas Image Generation

This MCP server provides a tool for generating images using Amazon Nova Canvas through Amazon Bedrock.

## Available Tools

- **generate_image**: Generate one to five images from a text prompt. Images are returned inline as base64-encoded PNG data.

## Nova Canvas Prompt Best Practices

{PROMPT_INSTRUCTIONS}
"""


def create_server(bedrock_runtime_client: BedrockRuntimeClient) -> Server:
    """Create the MCP server exposing the generate_image tool.

    Args:
        bedrock_runtime_client: BedrockRuntimeClient shared by all tool calls.

    Returns:
        The configured low-level MCP server.
    """
    server = Server(SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS)

    async def notify(level: LoggingLevel, message: str) -> None:
        try:
            session = server.request_context.session
        except LookupError:
            # Not serving a request, nobody to notify
            return
        await session.send_log_message(level=level, data=message, logger=SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        """List the tools provided by this server."""
        return [GENERATE_IMAGE_TOOL]

    # Arguments are validated by the tool handler so that every violation is reported
    @server.call_tool(validate_input=False)
    async def call_tool(
        name: str, arguments: Optional[Dict[str, Any]]
    ) -> Union[ResponseContent, CallToolResult]:
        """Dispatch a tool call to the Nova Canvas handler.

        Failures are returned as error results carrying the error kind and
        JSON-RPC code, and the server keeps serving.
        """
        logger.debug(f'MCP tool {name} called')
        try:
            return await handle_tool_call(
                name=name,
                arguments=arguments,
                bedrock_runtime_client=bedrock_runtime_client,
                notify=notify,
            )
        except ImageGenerationError as e:
            return e.to_tool_result()

    @server.set_logging_level()
    async def set_logging_level(level: LoggingLevel) -> None:
        """Accept the client's logging level; progress notifications are always sent."""
        logger.debug(f'Client requested logging level: {level}')

    return server


async def serve(server: Server) -> None:
    """Serve MCP requests over stdio until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info('Amazon Nova Canvas MCP server running on stdio')
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(notification_options=NotificationOptions()),
        )


def main():
    """Run the MCP server."""
    logger.info('Starting nova-canvas-mcp-server MCP server')
    try:
        bedrock_runtime_client = create_bedrock_runtime_client()
    except Exception as e:
        logger.error(f'Error creating bedrock runtime client: {str(e)}')
        raise

    try:
        asyncio.run(serve(create_server(bedrock_runtime_client)))
    except KeyboardInterrupt:
        logger.info('Nova Canvas MCP server interrupted, shutting down')


if __name__ == '__main__':
    main()
