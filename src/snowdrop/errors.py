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
Exceptions raised by the snowdrop tool.

Every failure is fatal to the command being run: the CLI reports the message
and exits with status 1.
"""


class SnowdropError(Exception):
    """Base class for all errors raised by snowdrop."""


class ManifestError(SnowdropError):
    """The MANIFEST file exists but could not be decoded."""


class ClusterConfigError(SnowdropError):
    """The kubeconfig could not be loaded or the clients could not be built."""


class TemplateError(SnowdropError):
    """A resource template is unknown or rendered into invalid YAML."""


class ProvisioningError(SnowdropError):
    """A lookup, create or delete call against the cluster failed."""
