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
# Constants
SERVER_NAME = 'awslabs-nova-canvas-mcp-server'
NOVA_CANVAS_MODEL_ID = 'amazon.nova-canvas-v1:0'
GENERATE_IMAGE_TOOL_NAME = 'generate_image'

# Nova Canvas defaults
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 1024
DEFAULT_QUALITY = 'standard'
DEFAULT_CFG_SCALE = 6.5
DEFAULT_SEED = 12
DEFAULT_NUMBER_OF_IMAGES = 1
DEFAULT_OUTPUT_DIR = 'output'  # Under workspace_dir, or the current directory

# Nova Canvas limits
MAX_PROMPT_LENGTH_NOVA = 1024
MIN_IMAGE_DIMENSION = 320
MAX_IMAGE_DIMENSION = 4096
IMAGE_DIMENSION_STEP = 16
MIN_CFG_SCALE = 1.1
MAX_CFG_SCALE = 10.0
NOVA_MAX_SEED = 858993459
MAX_NUMBER_OF_IMAGES = 5
MIN_ASPECT_RATIO = 0.25  # 1:4
MAX_ASPECT_RATIO = 4.0  # 4:1
MAX_PIXEL_COUNT = 4194304  # exclusive

# Response content
IMAGE_MIME_TYPE = 'image/png'
RESPONSE_LEADING_TEXT = "This is the image generated for your request '{prompt}'."
RESPONSE_TRAILING_TEXT = 'This is the end of the image generation.'

# AWS configuration
DEFAULT_AWS_REGION = 'us-east-1'
DEFAULT_AWS_PROFILE = 'default'

# AWS SDK Retry Configuration (following AWS best practices)
# See: https://docs.aws.amazon.com/prescriptive-guidance/latest/cloud-design-patterns/retry-backoff.html
BEDROCK_MAX_RETRY_ATTEMPTS = 3  # Total of 4 attempts (1 initial + 3 retries)
BEDROCK_RETRY_MODE = 'adaptive'  # AWS SDK handles exponential backoff with jitter
BEDROCK_CONNECT_TIMEOUT = 10  # Seconds to wait for connection
BEDROCK_READ_TIMEOUT = 300  # Seconds to wait for response (up to 5 images per request)
BEDROCK_MAX_POOL_CONNECTIONS = 50  # Connection pool size for concurrent requests


# Nova Canvas Prompt Best Practices
PROMPT_INSTRUCTIONS = """
# Amazon Nova Canvas Prompting Best Practices

## General Guidelines

- Prompts must be no longer than 1024 characters. For very long prompts, place the least important details near the end.
- Do not use negation words like "no", "not", "without" in your prompt. The model doesn't understand negation and will result in the opposite of what you intend.
- Use negative prompts (via the `negativePrompt` parameter) to specify objects or characteristics to exclude from the image.
- Omit negation words from your negative prompts as well.

## Effective Prompt Structure

An effective prompt often includes short descriptions of:

1. The subject
2. The environment
3. (optional) The position or pose of the subject
4. (optional) Lighting description
5. (optional) Camera position/framing
6. (optional) The visual style or medium ("photo", "illustration", "painting", etc.)

## Image Dimensions

- `width` and `height` must each be between 320 and 4096 pixels and divisible by 16.
- The aspect ratio must be between 1:4 and 4:1.
- The total pixel count (`width` x `height`) must be less than 4,194,304.

## Refining Results

When the output is close to what you want but not perfect:

1. Use a consistent `seed` value and make small changes to your prompt or negative prompt.
2. Once the prompt is refined, generate more variations using the same prompt but different `seed` values.

## Examples

### Example 1: Stock Photo
**Prompt:** "realistic editorial photo of female teacher standing at a blackboard with a warm smile"
**Negative Prompt:** "crossed arms"

### Example 2: Story Illustration
**Prompt:** "whimsical and ethereal soft-shaded story illustration: A woman in a large hat stands at the ship's railing looking out across the ocean"
**Negative Prompt:** "clouds, waves"

### Example 3: Pre-visualization for TV/Film
**Prompt:** "drone view of a dark river winding through a stark Iceland landscape, cinematic quality"
"""
