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
"""Tests for the image utilities."""

import os
import pytest
from awslabs.nova_canvas_mcp_server.utils.image_utils import (
    decode_base64_image,
    get_image_dimensions,
    save_images,
)


class TestDecodeBase64Image:
    """Tests for the decode_base64_image function."""

    def test_valid(self):
        """Test decoding valid base64."""
        assert decode_base64_image('aGVsbG8=') == b'hello'

    def test_invalid(self):
        """Test that invalid base64 raises ValueError."""
        with pytest.raises(ValueError, match='Failed to decode base64 image'):
            decode_base64_image('not base64!')


class TestGetImageDimensions:
    """Tests for the get_image_dimensions function."""

    def test_png(self, sample_base64_images):
        """Test reading the size of a PNG image."""
        assert get_image_dimensions(decode_base64_image(sample_base64_images[0])) == (64, 32)

    def test_not_an_image(self):
        """Test that non-image data raises ValueError."""
        with pytest.raises(ValueError, match='Failed to open image data'):
            get_image_dimensions(b'hello')


class TestSaveImages:
    """Tests for the save_images function."""

    def test_single_image(self, temp_workspace_dir, sample_base64_images):
        """Test saving one image."""
        paths = save_images(sample_base64_images[:1], workspace_dir=temp_workspace_dir)

        assert len(paths) == 1
        assert os.path.isabs(paths[0])
        assert os.path.basename(paths[0]).startswith('nova_canvas_')
        assert paths[0].endswith('.png')
        assert os.path.exists(paths[0])

    def test_multiple_images_numbered(self, temp_workspace_dir, sample_base64_images):
        """Test that multiple images get numbered filenames in order."""
        paths = save_images(
            sample_base64_images, workspace_dir=temp_workspace_dir, filename_prefix='test'
        )

        assert len(paths) == 5
        for i, path in enumerate(paths):
            assert path.endswith(f'_{i + 1}.png')
            assert os.path.basename(path).startswith('test_')

    def test_defaults_to_current_directory(self, temp_workspace_dir, sample_base64_images, monkeypatch):
        """Test that the output directory is created under the current directory."""
        monkeypatch.chdir(temp_workspace_dir)

        paths = save_images(sample_base64_images[:1])

        assert os.path.dirname(paths[0]) == os.path.join(os.getcwd(), 'output')

    def test_invalid_image_data(self, temp_workspace_dir):
        """Test that invalid base64 data raises ValueError."""
        with pytest.raises(ValueError):
            save_images(['not base64!'], workspace_dir=temp_workspace_dir)
