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
"""Test fixtures for the nova-canvas-mcp-server tests."""

import base64
import json
import pytest
import tempfile
from io import BytesIO
from PIL import Image
from unittest.mock import MagicMock


def create_test_image_base64(width=64, height=32, color='blue'):
    """Create a valid PNG image and return it as a base64 string."""
    img = Image.new('RGB', (width, height), color=color)
    buffer = BytesIO()
    img.save(buffer, format='PNG')
    return base64.b64encode(buffer.getvalue()).decode('utf-8')


def make_invoke_model_response(payload):
    """Build a boto3 invoke_model response whose body reads as the JSON payload."""
    return {'body': MagicMock(read=MagicMock(return_value=json.dumps(payload).encode('utf-8')))}


@pytest.fixture
def temp_workspace_dir():
    """Create a temporary directory for test output."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def mock_bedrock_runtime_client():
    """Create a mock Bedrock runtime client returning a single image."""
    mock_client = MagicMock()
    mock_client.invoke_model.return_value = make_invoke_model_response(
        {'images': [create_test_image_base64()]}
    )
    return mock_client


@pytest.fixture
def sample_text_prompt():
    """Return a sample text prompt."""
    return 'A beautiful mountain landscape with a lake and trees'


@pytest.fixture
def sample_base64_images():
    """Return five distinct base64-encoded PNG images."""
    colors = ['red', 'green', 'blue', 'white', 'black']
    return [create_test_image_base64(color=color) for color in colors]


@pytest.fixture
def bedrock_response():
    """Return a factory for boto3 invoke_model responses."""
    return make_invoke_model_response
