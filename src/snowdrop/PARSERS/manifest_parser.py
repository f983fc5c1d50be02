# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
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

"""
Parser for the project's MANIFEST file.
"""
import logging
import os
from typing import Optional

import yaml
from pydantic import ValidationError

from ..MODELS.application import Application
from ..errors import ManifestError

logger = logging.getLogger(__name__)

MANIFEST_FILE = "MANIFEST"


def current_manifest_path(cwd: Optional[str] = None) -> str:
    """
    Returns the path of the MANIFEST in the given (or current) directory.
    """
    return os.path.join(cwd or os.getcwd(), MANIFEST_FILE)


class ManifestParser:
    """
    Parser for MANIFEST files.

    A MANIFEST is a YAML mapping, for example::

        name: my-spring-boot
        env:
          - name: SPRING_PROFILES_ACTIVE
            value: openshift
    """

    def parse(self, manifest_path: str) -> Application:
        """
        Parses a MANIFEST from a path.

        :param manifest_path: Path to the MANIFEST.
        :return: The application it describes, or a default Application when the file does not exist.
        :raises ManifestError: If the file exists but cannot be decoded.
        """
        if not os.path.exists(manifest_path):
            logger.info("No MANIFEST found at %s, using defaults", manifest_path)
            return Application()

        try:
            with open(manifest_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(f"Unable to read {manifest_path}: {e}") from e
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> Application:
        """
        Parses a MANIFEST from a string.

        :param content: YAML content of the MANIFEST.
        :return: The parsed application.
        :raises ManifestError: On invalid YAML or unexpected field types.
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ManifestError(f"MANIFEST is not valid YAML: {e}") from e

        if not data:
            return Application()
        if not isinstance(data, dict):
            raise ManifestError(f"MANIFEST must be a mapping, got {type(data).__name__}")

        # Keys left empty, e.g. `env:`, keep their default
        data = {key: value for key, value in data.items() if value is not None}
        try:
            return Application.model_validate(data)
        except ValidationError as e:
            raise ManifestError(f"Invalid MANIFEST: {e}") from e
