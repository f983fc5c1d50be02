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
Rendering of resource templates into YAML and resource bodies.
"""
import logging
from typing import Any, Dict, Optional

import yaml
from jinja2 import DictLoader, Environment, StrictUndefined, TemplateNotFound
from jinja2.exceptions import TemplateError as JinjaTemplateError

from ..MODELS.application import (
    Application,
    Image,
    M2_DATA_CLAIM,
    ODO_LABEL_NAME,
    ODO_LABEL_VALUE,
    SUPERVISORD_CMDS,
)
from ..errors import TemplateError
from .resources import TEMPLATES

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Renders the named resource templates against an application and an image.
    """

    def __init__(self):
        self.env = Environment(
            loader=DictLoader(TEMPLATES),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals.update(
            supervisord_cmds=SUPERVISORD_CMDS,
            odo_label_name=ODO_LABEL_NAME,
            odo_label_value=ODO_LABEL_VALUE,
            m2_claim=M2_DATA_CLAIM,
        )

    def render(self, name: str, app: Application, image: Optional[Image] = None, **extra: Any) -> str:
        """
        Renders a template into YAML text.

        :param name: Template name: imagestream, service, route or deploymentconfig.
        :param app: The application.
        :param image: The image the resource is about, if any.
        :param extra: Additional template variables.
        :return: The YAML document.
        :raises TemplateError: If the template is unknown or fails to render.
        """
        try:
            template = self.env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateError(f"Unknown template '{name}'") from e

        context = dict(extra, app=app)
        if image is not None:
            context["image"] = image

        try:
            content = template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Unable to render template '{name}': {e}") from e

        logger.debug("Rendered %s template:\n%s", name, content)
        return content

    def render_resource(self, name: str, app: Application, image: Optional[Image] = None, **extra: Any) -> Dict[str, Any]:
        """
        Renders a template and decodes it into a resource body.

        :return: The resource as a dictionary, ready to submit to the API.
        :raises TemplateError: If the rendered YAML is invalid or is not a resource.
        """
        content = self.render(name, app, image=image, **extra)
        try:
            resource = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise TemplateError(f"Template '{name}' rendered invalid YAML: {e}") from e

        if not isinstance(resource, dict) or "kind" not in resource:
            raise TemplateError(f"Template '{name}' did not render a resource")
        return resource
