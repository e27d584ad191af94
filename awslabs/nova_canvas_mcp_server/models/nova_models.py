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
"""Pydantic models for Amazon Nova Canvas text-to-image generation.

This module defines the validated tool input, the Bedrock request body it is
turned into, and the Bedrock response body.
"""

from awslabs.nova_canvas_mcp_server.consts import (
    DEFAULT_CFG_SCALE,
    DEFAULT_HEIGHT,
    DEFAULT_NUMBER_OF_IMAGES,
    DEFAULT_SEED,
    DEFAULT_WIDTH,
    IMAGE_DIMENSION_STEP,
    MAX_ASPECT_RATIO,
    MAX_CFG_SCALE,
    MAX_IMAGE_DIMENSION,
    MAX_NUMBER_OF_IMAGES,
    MAX_PIXEL_COUNT,
    MAX_PROMPT_LENGTH_NOVA,
    MIN_ASPECT_RATIO,
    MIN_CFG_SCALE,
    MIN_IMAGE_DIMENSION,
    NOVA_MAX_SEED,
)
from enum import Enum
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional


class Quality(str, Enum):
    """Quality options for Nova Canvas image generation.

    Attributes:
        STANDARD: Standard quality image generation.
        PREMIUM: Premium quality image generation with enhanced details.
    """
    STANDARD = 'standard'
    PREMIUM = 'premium'


class TaskType(str, Enum):
    """Nova Canvas task types used by this server."""
    TEXT_IMAGE = 'TEXT_IMAGE'


def dimension_violations(width: int, height: int) -> List[str]:
    """Check the constraints that involve both image dimensions.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A message per violated constraint; empty when both hold.
    """
    violations = []
    aspect_ratio = width / height
    if not MIN_ASPECT_RATIO <= aspect_ratio <= MAX_ASPECT_RATIO:
        violations.append('Aspect ratio must be between 1:4 and 4:1')
    if width * height >= MAX_PIXEL_COUNT:
        violations.append(f'Total pixel count must be less than {MAX_PIXEL_COUNT:,}')
    return violations


class GenerationRequest(BaseModel):
    """Validated arguments of the generate_image tool.

    Field aliases are the tool argument names, so a request can be built
    straight from the tool call arguments and dumped back into them.
    Numeric fields are strict: strings and booleans are type violations.

    Attributes:
        prompt: Text description of the image to generate (1-1024 characters).
        negative_prompt: Text describing what to exclude (1-1024 characters).
        width: Image width in pixels (320-4096, divisible by 16).
        height: Image height in pixels (320-4096, divisible by 16).
        quality: Quality of the generated image.
        cfg_scale: How strongly the image adheres to the prompt (1.1-10.0).
        seed: Seed for reproducible generation (0-858,993,459).
        number_of_images: Number of images to generate (1-5).
    """
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(..., min_length=1, max_length=MAX_PROMPT_LENGTH_NOVA)
    negative_prompt: Optional[str] = Field(
        default=None,
        alias='negativePrompt',
        min_length=1,
        max_length=MAX_PROMPT_LENGTH_NOVA,
    )
    width: int = Field(
        default=DEFAULT_WIDTH,
        strict=True,
        ge=MIN_IMAGE_DIMENSION,
        le=MAX_IMAGE_DIMENSION,
        multiple_of=IMAGE_DIMENSION_STEP,
    )
    height: int = Field(
        default=DEFAULT_HEIGHT,
        strict=True,
        ge=MIN_IMAGE_DIMENSION,
        le=MAX_IMAGE_DIMENSION,
        multiple_of=IMAGE_DIMENSION_STEP,
    )
    quality: Quality = Quality.STANDARD
    cfg_scale: float = Field(
        default=DEFAULT_CFG_SCALE,
        strict=True,
        ge=MIN_CFG_SCALE,
        le=MAX_CFG_SCALE,
        validation_alias=AliasChoices('cfg_scale', 'cfgScale'),
    )
    seed: int = Field(default=DEFAULT_SEED, strict=True, ge=0, le=NOVA_MAX_SEED)
    number_of_images: int = Field(
        default=DEFAULT_NUMBER_OF_IMAGES,
        strict=True,
        ge=1,
        le=MAX_NUMBER_OF_IMAGES,
        alias='numberOfImages',
    )

    @model_validator(mode='after')
    def validate_dimensions(self) -> 'GenerationRequest':
        """Validate aspect ratio and total pixel count.

        Runs only once every field has passed its own checks.

        Raises:
            ValueError: If the aspect ratio or pixel count is out of bounds.
        """
        violations = dimension_violations(self.width, self.height)
        if violations:
            raise ValueError(', '.join(violations))
        return self

    def to_arguments(self) -> Dict[str, Any]:
        """Dump the request back into tool argument form."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class TextToImageParams(BaseModel):
    """Text prompts of a TEXT_IMAGE request."""
    text: str
    negativeText: Optional[str] = None


class ImageGenerationConfig(BaseModel):
    """Generation settings of a Nova Canvas request."""
    numberOfImages: int
    height: int
    width: int
    quality: Quality
    cfgScale: float
    seed: int


class TextImageRequest(BaseModel):
    """Nova Canvas TEXT_IMAGE request body."""
    taskType: TaskType = TaskType.TEXT_IMAGE
    textToImageParams: TextToImageParams
    imageGenerationConfig: ImageGenerationConfig

    def to_api_dict(self) -> Dict[str, Any]:
        """Convert the request to the JSON-ready dict sent to Bedrock.

        Unset optional fields such as ``negativeText`` are left out.
        """
        return self.model_dump(mode='json', exclude_none=True)


class NovaCanvasResponse(BaseModel):
    """Nova Canvas response body.

    Attributes:
        images: Base64-encoded PNG images, in generation order.
        error: Reason reported by the service when no images were produced.
    """
    images: List[str] = Field(default_factory=list)
    error: Optional[str] = None

    @field_validator('images', mode='before')
    @classmethod
    def default_missing_images(cls, v: Any) -> Any:
        """Treat a null images list as empty."""
        return [] if v is None else v
