"""
Models describing the Spring Boot application being scaffolded and the images it runs on.
"""
from typing import List, Optional, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Label placed on the development DeploymentConfig, used to find it again
ODO_LABEL_NAME = "io.openshift.odo"
ODO_LABEL_VALUE = "inject-supervisord"

# Claim holding the maven repository of the development pod
M2_DATA_CLAIM = "m2-data"

SUPERVISORD_IMAGE_NAME = "copy-supervisord"
SUPERVISORD_IMAGE_REPO = "quay.io/snowdrop/supervisord"
JAVA_S2I_IMAGE_NAME = "dev-s2i"
JAVA_S2I_IMAGE_REPO = "quay.io/snowdrop/spring-boot-s2i"

# Commands exposed by supervisord inside the development pod
SUPERVISORD_CMDS = (
    "run-java:/usr/local/s2i/run;"
    "run-node:/usr/libexec/s2i/run;"
    "compile-java:/usr/local/s2i/assemble;"
    "build:/deployments/buildapp"
)


def _to_str(value: Any) -> Any:
    # YAML turns `1.0` or `8080` into numbers
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Image(BaseModel):
    """
    An image the development pod is built from, tracked by an ImageStream.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    repo: str
    tag: str = "latest"
    annotation_cmds: bool = Field(default=False, alias="annotationCmds")

    @field_validator("tag", mode="before")
    @classmethod
    def coerce_tag(cls, value: Any) -> Any:
        return _to_str(value)


class EnvVar(BaseModel):
    """
    An environment variable injected into the application container.
    """
    name: str
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, value: Any) -> Any:
        return _to_str(value)


class Application(BaseModel):
    """
    The application whose development environment is provisioned.

    Built from the MANIFEST (or left at its defaults when there is none) and
    then completed in place as the namespace, name and images get resolved.
    """
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    name: str = ""
    version: str = "1.0"
    namespace: str = ""
    replica: int = 1
    port: int = 8080
    cpu: str = "100m"
    memory: str = "250Mi"
    supervisord_name: str = Field(default=SUPERVISORD_IMAGE_NAME, alias="supervisordName")

    env: List[EnvVar] = []
    images: List[Image] = []

    @field_validator("version", "cpu", "memory", mode="before")
    @classmethod
    def coerce_strings(cls, value: Any) -> Any:
        return _to_str(value)

    def supervisord_image(self) -> Optional[Image]:
        """
        Returns the image providing supervisord, i.e. the one carrying the command annotations.
        """
        for image in self.images:
            if image.annotation_cmds or image.name == self.supervisord_name:
                return image
        return None

    def runtime_image(self) -> Optional[Image]:
        """
        Returns the image the application container runs on.
        """
        supervisord = self.supervisord_image()
        for image in self.images:
            if image != supervisord:
                return image
        return None


def create_type_image(name: str, repo: str, annotation_cmds: bool) -> Image:
    """
    Builds an Image.

    :param name: Name of the image, also used as the ImageStream name.
    :param repo: Docker repository the ImageStream imports from.
    :param annotation_cmds: Whether the supervisord commands annotation is set on the tag.
    :return: The image.
    """
    return Image(name=name, repo=repo, annotation_cmds=annotation_cmds)


def default_images() -> List[Image]:
    """
    The supervisord image and the Java S2I image of Spring Boot.
    """
    return [
        create_type_image(SUPERVISORD_IMAGE_NAME, SUPERVISORD_IMAGE_REPO, True),
        create_type_image(JAVA_S2I_IMAGE_NAME, JAVA_S2I_IMAGE_REPO, False),
    ]
