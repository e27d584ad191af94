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
"""Image utilities for decoding and saving generated images."""

import base64
import os
import uuid
from awslabs.nova_canvas_mcp_server.consts import DEFAULT_OUTPUT_DIR
from io import BytesIO
from loguru import logger
from PIL import Image
from typing import List, Optional, Tuple


def decode_base64_image(base64_str: str) -> bytes:
    """Decode a base64 string to image bytes.

    Args:
        base64_str: Base64-encoded image string.

    Returns:
        Raw image bytes.

    Raises:
        ValueError: If the base64 string is invalid.
    """
    try:
        return base64.b64decode(base64_str, validate=True)
    except Exception as e:
        raise ValueError(f'Failed to decode base64 image: {str(e)}')


def get_image_dimensions(image_data: bytes) -> Tuple[int, int]:
    """Return the (width, height) of an encoded image.

    Raises:
        ValueError: If the data is not a readable image.
    """
    try:
        with Image.open(BytesIO(image_data)) as image:
            return image.size
    except Exception as e:
        raise ValueError(f'Failed to open image data: {str(e)}')


def save_images(
    base64_images: List[str],
    workspace_dir: Optional[str] = None,
    filename_prefix: str = 'nova_canvas',
) -> List[str]:
    """Save base64-encoded PNG images to the workspace output directory.

    Args:
        base64_images: List of base64-encoded image data.
        workspace_dir: Directory where images should be saved. If None, uses current directory.
        filename_prefix: Prefix for generated filenames.

    Returns:
        List of absolute file paths to the saved images, in input order.

    Raises:
        IOError: If directory creation or file writing fails.
    """
    output_dir = os.path.join(workspace_dir or os.getcwd(), DEFAULT_OUTPUT_DIR)
    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        raise IOError(f'Failed to create output directory {output_dir}: {str(e)}')

    run_id = uuid.uuid4().hex[:8]
    saved_paths: List[str] = []
    for i, base64_image_data in enumerate(base64_images):
        if len(base64_images) > 1:
            image_filename = f'{filename_prefix}_{run_id}_{i + 1}.png'
        else:
            image_filename = f'{filename_prefix}_{run_id}.png'

        image_data = decode_base64_image(base64_image_data)
        image_path = os.path.abspath(os.path.join(output_dir, image_filename))
        try:
            with open(image_path, 'wb') as file:
                file.write(image_data)
        except OSError as e:
            logger.error(f'Failed to save image {i + 1}: {str(e)}')
            raise IOError(f'Failed to save image {i + 1}: {str(e)}')

        saved_paths.append(image_path)
        logger.debug(f'Saved image to: {image_path}')

    logger.info(f'Successfully saved {len(saved_paths)} image(s)')
    return saved_paths
