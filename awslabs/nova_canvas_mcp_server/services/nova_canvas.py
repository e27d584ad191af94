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
"""Amazon Nova Canvas service implementation.

This module turns a generate_image tool call into a Nova Canvas request,
invokes the model through the common Bedrock utilities, and assembles the
MCP content returned to the client.
"""

import json
from awslabs.nova_canvas_mcp_server.consts import (
    DEFAULT_CFG_SCALE,
    DEFAULT_HEIGHT,
    DEFAULT_NUMBER_OF_IMAGES,
    DEFAULT_QUALITY,
    DEFAULT_SEED,
    DEFAULT_WIDTH,
    GENERATE_IMAGE_TOOL_NAME,
    IMAGE_DIMENSION_STEP,
    IMAGE_MIME_TYPE,
    MAX_CFG_SCALE,
    MAX_IMAGE_DIMENSION,
    MAX_NUMBER_OF_IMAGES,
    MAX_PROMPT_LENGTH_NOVA,
    MIN_CFG_SCALE,
    MIN_IMAGE_DIMENSION,
    NOVA_CANVAS_MODEL_ID,
    NOVA_MAX_SEED,
    RESPONSE_LEADING_TEXT,
    RESPONSE_TRAILING_TEXT,
)
from awslabs.nova_canvas_mcp_server.errors import (
    EmptyResultError,
    ImageGenerationError,
    InternalError,
    InvalidParamsError,
    UnknownToolError,
)
from awslabs.nova_canvas_mcp_server.models.nova_models import (
    GenerationRequest,
    ImageGenerationConfig,
    NovaCanvasResponse,
    TextImageRequest,
    TextToImageParams,
)
from awslabs.nova_canvas_mcp_server.services.bedrock_common import invoke_bedrock_model
from loguru import logger
from mcp.types import ImageContent, TextContent, Tool
from pydantic import ValidationError
from typing import TYPE_CHECKING, Any, Awaitable, Callable, List, Optional, Union


if TYPE_CHECKING:
    from mypy_boto3_bedrock_runtime import BedrockRuntimeClient
else:
    BedrockRuntimeClient = object


ResponseContent = List[Union[TextContent, ImageContent]]
Notifier = Callable[[str, str], Awaitable[None]]


GENERATE_IMAGE_TOOL = Tool(
    name=GENERATE_IMAGE_TOOL_NAME,
    description=(
        'Generate image(s) using Amazon Nova Canvas model. The returned data is '
        'Base64-encoded string that represent each image that was generated.'
    ),
    inputSchema={
        'type': 'object',
        'properties': {
            'prompt': {
                'type': 'string',
                'minLength': 1,
                'maxLength': MAX_PROMPT_LENGTH_NOVA,
                'description': 'Text description of the image to generate (1-1024 characters)',
            },
            'negativePrompt': {
                'type': 'string',
                'minLength': 1,
                'maxLength': MAX_PROMPT_LENGTH_NOVA,
                'description': 'Optional text description of what to avoid in the image (1-1024 characters)',
            },
            'width': {
                'type': 'integer',
                'minimum': MIN_IMAGE_DIMENSION,
                'maximum': MAX_IMAGE_DIMENSION,
                'multipleOf': IMAGE_DIMENSION_STEP,
                'default': DEFAULT_WIDTH,
                'description': 'Width of the generated image (320-4096, divisible by 16, default: 1024)',
            },
            'height': {
                'type': 'integer',
                'minimum': MIN_IMAGE_DIMENSION,
                'maximum': MAX_IMAGE_DIMENSION,
                'multipleOf': IMAGE_DIMENSION_STEP,
                'default': DEFAULT_HEIGHT,
                'description': 'Height of the generated image (320-4096, divisible by 16, default: 1024)',
            },
            'quality': {
                'type': 'string',
                'enum': ['standard', 'premium'],
                'default': DEFAULT_QUALITY,
                'description': 'Quality of the generated image (default: standard)',
            },
            'cfg_scale': {
                'type': 'number',
                'minimum': MIN_CFG_SCALE,
                'maximum': MAX_CFG_SCALE,
                'default': DEFAULT_CFG_SCALE,
                'description': 'How closely to follow the prompt (1.1-10, default: 6.5)',
            },
            'seed': {
                'type': 'integer',
                'minimum': 0,
                'maximum': NOVA_MAX_SEED,
                'default': DEFAULT_SEED,
                'description': 'Seed for reproducible generation (0-858993459, default: 12)',
            },
            'numberOfImages': {
                'type': 'integer',
                'minimum': 1,
                'maximum': MAX_NUMBER_OF_IMAGES,
                'default': DEFAULT_NUMBER_OF_IMAGES,
                'description': 'Number of images to generate (1-5, default: 1)',
            },
        },
        'required': ['prompt'],
    },
)


def _format_validation_error(error: ValidationError) -> List[str]:
    """Turn pydantic errors into `argument: reason` messages, keyed by the argument name as sent."""
    violations = []
    for detail in error.errors():
        field = '.'.join(str(part) for part in detail['loc'])
        if detail['type'] == 'value_error':
            message = str(detail['ctx']['error'])
        else:
            message = detail['msg']
        violations.append(f'{field}: {message}' if field else message)
    return violations


def validate_generation_request(arguments: Optional[Any]) -> GenerationRequest:
    """Validate generate_image tool arguments and apply defaults.

    Every field is checked independently and all failures are reported
    together. The aspect ratio and pixel count constraints are checked only
    when every field is valid.

    Args:
        arguments: The tool call argument mapping. None is treated as empty.

    Returns:
        GenerationRequest: The fully populated request.

    Raises:
        InvalidParamsError: If any argument violates its constraints.
    """
    try:
        request = GenerationRequest.model_validate({} if arguments is None else arguments)
    except ValidationError as e:
        violations = _format_validation_error(e)
        logger.error(
            f'Parameter validation failed: {violations}',
            extra={'violations_count': len(violations)}
        )
        raise InvalidParamsError(violations)

    logger.debug(
        'Request validation successful',
        extra={
            'dimensions': f'{request.width}x{request.height}',
            'quality': request.quality.value,
            'num_images': request.number_of_images,
            'prompt_length': len(request.prompt),
        }
    )
    return request


def build_request_body(request: GenerationRequest) -> dict:
    """Build the Nova Canvas TEXT_IMAGE request body for a validated request."""
    text_params = TextToImageParams(text=request.prompt, negativeText=request.negative_prompt)
    config = ImageGenerationConfig(
        numberOfImages=request.number_of_images,
        height=request.height,
        width=request.width,
        quality=request.quality,
        cfgScale=request.cfg_scale,
        seed=request.seed,
    )
    return TextImageRequest(
        textToImageParams=text_params, imageGenerationConfig=config
    ).to_api_dict()


async def generate_images(
    request: GenerationRequest,
    bedrock_runtime_client: BedrockRuntimeClient,
) -> List[str]:
    """Generate images with Amazon Nova Canvas.

    The images are returned in the order Bedrock produced them. Their count
    is not checked against ``number_of_images``.

    Args:
        request: The validated generation request.
        bedrock_runtime_client: BedrockRuntimeClient object.

    Returns:
        List of base64-encoded PNG images.

    Raises:
        UpstreamFailureError: If the Bedrock call fails.
        EmptyResultError: If Bedrock returns no images.
    """
    model_response = NovaCanvasResponse.model_validate(
        await invoke_bedrock_model(
            model_id=NOVA_CANVAS_MODEL_ID,
            request_body=build_request_body(request),
            bedrock_client=bedrock_runtime_client,
        )
    )

    if not model_response.images:
        logger.error(
            'No image data in response',
            extra={'model': 'nova-canvas', 'upstream_error': model_response.error}
        )
        raise EmptyResultError(model_response.error)

    logger.info(
        f'Received {len(model_response.images)} images from Nova Canvas API',
        extra={'images_count': len(model_response.images), 'model': 'nova-canvas'}
    )
    return model_response.images


def build_response_content(prompt: str, images: List[str]) -> ResponseContent:
    """Assemble the MCP content returned for generated images.

    The content is a leading text item quoting the prompt, one PNG image item
    per generated image in order, and a trailing text item.
    """
    content: ResponseContent = [
        TextContent(type='text', text=RESPONSE_LEADING_TEXT.format(prompt=prompt))
    ]
    content.extend(
        ImageContent(type='image', data=image, mimeType=IMAGE_MIME_TYPE) for image in images
    )
    content.append(TextContent(type='text', text=RESPONSE_TRAILING_TEXT))
    return content


async def _notify(notify: Optional[Notifier], level: str, message: str) -> None:
    if notify is not None:
        await notify(level, message)


async def handle_tool_call(
    name: str,
    arguments: Optional[Any],
    bedrock_runtime_client: BedrockRuntimeClient,
    notify: Optional[Notifier] = None,
) -> ResponseContent:
    """Handle a tool call end to end.

    Args:
        name: Name of the tool being called.
        arguments: The tool call argument mapping.
        bedrock_runtime_client: BedrockRuntimeClient object.
        notify: Optional coroutine function receiving (level, message) progress
            notifications for the client.

    Returns:
        The response content for the generated images.

    Raises:
        UnknownToolError: If the tool is not generate_image. No request is made.
        InvalidParamsError: If the arguments fail validation.
        UpstreamFailureError: If the Bedrock call fails.
        EmptyResultError: If Bedrock returns no images.
        InternalError: For any other failure.
    """
    if name != GENERATE_IMAGE_TOOL_NAME:
        logger.warning(f'Unknown tool requested: {name}')
        raise UnknownToolError(name)

    try:
        request = validate_generation_request(arguments)
        await _notify(
            notify,
            'info',
            'Configuration: '
            + json.dumps(
                {
                    'width': request.width,
                    'height': request.height,
                    'quality': request.quality.value,
                    'numberOfImages': request.number_of_images,
                    'cfgScale': request.cfg_scale,
                    'seed': request.seed,
                }
            ),
        )

        await _notify(notify, 'info', 'Sending request to Bedrock API...')
        images = await generate_images(request, bedrock_runtime_client)
        await _notify(notify, 'info', 'Received response from Bedrock API')

        content = build_response_content(request.prompt, images)
        await _notify(notify, 'info', 'Successfully generated image')
        return content

    except ImageGenerationError as e:
        logger.error(f'Image generation failed ({e.kind}): {e.message}')
        await _notify(notify, 'error', e.message)
        raise

    except Exception as e:
        logger.exception(f'Unexpected error in handle_tool_call: {str(e)}')
        error = InternalError(str(e))
        await _notify(notify, 'error', error.message)
        raise error from e
