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
"""Structured errors raised while handling a Nova Canvas tool call.

Every error is an ``McpError`` carrying a JSON-RPC error code. The ``kind``
attribute is the machine-readable classification. Both are sent to the client
in the structured content of an error tool result.
"""

from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    CallToolResult,
    ErrorData,
    TextContent,
)
from typing import List, Optional


class ImageGenerationError(McpError):
    """Base exception for all tool call failures.

    Attributes:
        kind: Machine-readable error classification.
        code: JSON-RPC error code reported to the client.
        message: Human-readable error message.
    """

    kind: str = 'InternalError'
    code: int = INTERNAL_ERROR

    def __init__(self, message: str):
        """Initialize ImageGenerationError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(ErrorData(code=self.code, message=message, data={'kind': self.kind}))

    def to_tool_result(self) -> CallToolResult:
        """Convert the error into a tool result the client can classify.

        The message is the text content. The kind and JSON-RPC code are sent
        as structured content.
        """
        return CallToolResult(
            content=[TextContent(type='text', text=self.message)],
            structuredContent={'kind': self.kind, 'code': self.code},
            isError=True,
        )


class UnknownToolError(ImageGenerationError):
    """Raised when the invocation names a tool this server does not provide."""

    kind = 'UnknownTool'
    code = METHOD_NOT_FOUND

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f'Unknown tool: {tool_name}')


class InvalidParamsError(ImageGenerationError):
    """Raised when one or more tool arguments fail validation.

    Attributes:
        violations: One entry per violated constraint, in reporting order.
    """

    kind = 'InvalidParams'
    code = INVALID_PARAMS

    def __init__(self, violations: List[str]):
        self.violations = list(violations)
        super().__init__(f'Invalid parameters: {", ".join(self.violations)}')


class UpstreamFailureError(ImageGenerationError):
    """Raised when the Bedrock call itself fails.

    Attributes:
        error_code: AWS error code (e.g., 'ValidationException', 'ThrottlingException').
        retryable: Whether the failure is transient. The SDK retries these itself.
    """

    kind = 'UpstreamFailure'

    def __init__(self, message: str, error_code: str = 'Unknown', retryable: bool = False):
        """Initialize UpstreamFailureError.

        Args:
            message: Description of the underlying failure.
            error_code: AWS error code.
            retryable: Whether this error is transient.
        """
        self.error_code = error_code
        self.retryable = retryable
        super().__init__(f'Failed to generate image: {message}')


class EmptyResultError(ImageGenerationError):
    """Raised when Bedrock answers successfully but returns no images."""

    kind = 'EmptyResult'

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason
        super().__init__(f'No image data in response due to {reason}.')


class InternalError(ImageGenerationError):
    """Raised for failures that fit no other classification."""

    kind = 'InternalError'

    def __init__(self, detail: str = ''):
        message = 'An unexpected error occurred'
        super().__init__(f'{message}: {detail}' if detail else message)
