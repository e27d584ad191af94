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
"""Example MCP client for the Nova Canvas MCP server.

Spawns the server over stdio, lists its tools, generates two images and saves
them to ``./output``.
"""

import asyncio
import os
import sys
import time
from awslabs.nova_canvas_mcp_server.consts import GENERATE_IMAGE_TOOL_NAME
from awslabs.nova_canvas_mcp_server.utils.image_utils import (
    decode_base64_image,
    get_image_dimensions,
    save_images,
)
from loguru import logger
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.types import CallToolResult, ImageContent, TextContent
from typing import List, Optional


EXAMPLE_ARGUMENTS = {
    'prompt': 'A serene landscape with mountains and a lake at sunset',
    'width': 1024,
    'height': 1024,
    'quality': 'standard',
    'cfg_scale': 7,
    'seed': 42,
    'numberOfImages': 2,
}


def save_image_content(result: CallToolResult, workspace_dir: Optional[str] = None) -> List[str]:
    """Save the images of a generate_image result.

    Args:
        result: The tool call result.
        workspace_dir: Directory under which the output directory is created.

    Returns:
        Absolute paths of the saved images, in response order.

    Raises:
        RuntimeError: If the tool call reported an error.
    """
    texts = [item.text for item in result.content if isinstance(item, TextContent)]
    if result.isError:
        raise RuntimeError(f'Image generation failed: {" ".join(texts)}')

    for text in texts:
        logger.info(text)

    images = [item.data for item in result.content if isinstance(item, ImageContent)]
    for i, image in enumerate(images):
        width, height = get_image_dimensions(decode_base64_image(image))
        logger.info(f'Image {i + 1}: {width}x{height}')

    return save_images(images, workspace_dir=workspace_dir, filename_prefix='nova_canvas')


async def run_example(workspace_dir: Optional[str] = None) -> List[str]:
    """Run the example against a freshly spawned server."""
    server_params = StdioServerParameters(
        command=sys.executable,
        args=['-m', 'awslabs.nova_canvas_mcp_server.server'],
        env=dict(os.environ),
    )

    async with stdio_client(server_params) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            logger.info('Connected to Amazon Nova Canvas MCP server')

            tools = await session.list_tools()
            logger.info(f'Available tools: {[tool.name for tool in tools.tools]}')

            start_time = time.monotonic()
            result = await session.call_tool(GENERATE_IMAGE_TOOL_NAME, arguments=EXAMPLE_ARGUMENTS)
            logger.info(f'Image generation took {time.monotonic() - start_time:.1f}s')

            return save_image_content(result, workspace_dir=workspace_dir)


def main():
    """Run the example client."""
    logger.remove()
    logger.add(sys.stderr, level=os.getenv('FASTMCP_LOG_LEVEL', 'INFO'))
    try:
        paths = asyncio.run(run_example())
    except Exception as e:
        logger.error(f'Example client failed: {str(e)}')
        sys.exit(1)
    for path in paths:
        logger.info(f'Saved image to: {path}')


if __name__ == '__main__':
    main()
