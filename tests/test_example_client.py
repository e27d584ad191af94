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
"""Tests for the example client of the nova-canvas-mcp-server."""

import os
import pytest
import sys
from awslabs.nova_canvas_mcp_server.example_client import (
    EXAMPLE_ARGUMENTS,
    run_example,
    save_image_content,
)
from awslabs.nova_canvas_mcp_server.services.nova_canvas import (
    build_response_content,
    validate_generation_request,
)
from mcp.types import CallToolResult, ListToolsResult, TextContent, Tool
from PIL import Image
from unittest.mock import AsyncMock, MagicMock, patch


class TestExampleArguments:
    """Tests for the example tool arguments."""

    def test_arguments_are_valid(self):
        """Test that the example arguments pass validation."""
        request = validate_generation_request(EXAMPLE_ARGUMENTS)
        assert request.number_of_images == 2
        assert request.cfg_scale == 7.0
        assert request.seed == 42


class TestSaveImageContent:
    """Tests for the save_image_content function."""

    def test_saves_images_in_order(self, temp_workspace_dir, sample_base64_images):
        """Test that every image item is written to the output directory."""
        result = CallToolResult(
            content=build_response_content('A lighthouse', sample_base64_images[:2]),
            isError=False,
        )

        paths = save_image_content(result, workspace_dir=temp_workspace_dir)

        assert len(paths) == 2
        for path in paths:
            assert os.path.dirname(path) == os.path.join(temp_workspace_dir, 'output')
            with Image.open(path) as image:
                assert image.size == (64, 32)
        with Image.open(paths[0]) as image:
            assert image.getpixel((0, 0)) == (255, 0, 0)

    def test_error_result(self, temp_workspace_dir):
        """Test that an error result raises instead of saving."""
        result = CallToolResult(
            content=[TextContent(type='text', text='Unknown tool: unknown_tool')],
            isError=True,
        )

        with pytest.raises(RuntimeError, match='Unknown tool: unknown_tool'):
            save_image_content(result, workspace_dir=temp_workspace_dir)

        assert not os.path.exists(os.path.join(temp_workspace_dir, 'output'))


class TestRunExample:
    """Tests for the run_example function."""

    @pytest.mark.asyncio
    @patch('awslabs.nova_canvas_mcp_server.example_client.ClientSession')
    @patch('awslabs.nova_canvas_mcp_server.example_client.stdio_client')
    async def test_run_example(
        self, mock_stdio_client, mock_session_cls, temp_workspace_dir, sample_base64_images
    ):
        """Test that the example spawns the server and saves the generated images."""
        mock_stdio_client.return_value.__aenter__.return_value = (MagicMock(), MagicMock())
        session = AsyncMock()
        session.list_tools.return_value = ListToolsResult(
            tools=[Tool(name='generate_image', inputSchema={'type': 'object'})]
        )
        session.call_tool.return_value = CallToolResult(
            content=build_response_content('test', sample_base64_images[:2]),
            isError=False,
        )
        mock_session_cls.return_value.__aenter__.return_value = session

        paths = await run_example(workspace_dir=temp_workspace_dir)

        assert len(paths) == 2
        server_params = mock_stdio_client.call_args.args[0]
        assert server_params.command == sys.executable
        assert server_params.args == ['-m', 'awslabs.nova_canvas_mcp_server.server']
        session.initialize.assert_awaited_once()
        session.call_tool.assert_awaited_once_with('generate_image', arguments=EXAMPLE_ARGUMENTS)
