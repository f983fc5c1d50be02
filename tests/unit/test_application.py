"""
Unit tests for the application model.
"""
import pytest
from pydantic import ValidationError
from snowdrop.MODELS.application import (
    Application,
    create_type_image,
    default_images,
    JAVA_S2I_IMAGE_NAME,
    SUPERVISORD_IMAGE_NAME,
)


class TestApplication:
    """Tests for Application and Image."""

    def test_defaults(self):
        app = Application()
        assert app.port == 8080
        assert app.replica == 1
        assert app.supervisord_name == SUPERVISORD_IMAGE_NAME

    def test_create_type_image(self):
        image = create_type_image("dev-s2i", "quay.io/snowdrop/spring-boot-s2i", False)
        assert image.name == "dev-s2i"
        assert image.repo == "quay.io/snowdrop/spring-boot-s2i"
        assert image.annotation_cmds is False

    def test_image_is_immutable(self):
        image = create_type_image("dev-s2i", "quay.io/snowdrop/spring-boot-s2i", False)
        with pytest.raises(ValidationError):
            image.name = "other"

    def test_supervisord_and_runtime_images(self):
        app = Application(images=default_images())
        assert app.supervisord_image().name == SUPERVISORD_IMAGE_NAME
        assert app.runtime_image().name == JAVA_S2I_IMAGE_NAME

    def test_no_images(self):
        app = Application()
        assert app.supervisord_image() is None
        assert app.runtime_image() is None
