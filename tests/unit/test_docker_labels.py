import os
import pytest

from ecs_platform.errors import MissingFieldError
from ecs_platform.utilities import DockerLabelExtractor

TESTDATA = os.path.join(os.path.dirname(__file__), "testdata")


def dockerfile_path(name):
    return os.path.join(TESTDATA, name)


def test_extract_fails_on_empty_path():
    with pytest.raises(MissingFieldError) as e:
        DockerLabelExtractor("").extract()
    assert e.value.field == "path"


def test_extract_fails_on_invalid_path():
    with pytest.raises(OSError):
        DockerLabelExtractor(dockerfile_path("Dockerfile.invalid-name")).extract()


@pytest.mark.parametrize("name, want", [
    ("Dockerfile.empty", {}),
    ("Dockerfile.no-labels", {}),
    ("Dockerfile.public-api", {
        "traefik.frontend.passHostHeader": "true",
        "traefik.frontend.entryPoints": "http",
        "traefik.protocol": "http",
        "traefik.backend": "api",
        "traefik.frontend.rule": "PathPrefix:/v1/auth,/v1/admin,/v1/client,/v1/user,/v1/public,/health",
        "testfield": "foo=bar",
    }),
])
def test_extract(name, want):
    assert DockerLabelExtractor(dockerfile_path(name)).extract() == want


def test_extract_later_labels_overwrite_earlier(tmp_path):
    dockerfile = tmp_path / "Dockerfile"
    dockerfile.write_text('LABEL version="1"\nLABEL version="2"\n')

    assert DockerLabelExtractor(str(dockerfile)).extract() == {"version": "2"}


def test_extract_keeps_keys_starting_with_label_letters(tmp_path):
    dockerfile = tmp_path / "Dockerfile"
    dockerfile.write_text("LABEL BACKEND=api\n")

    assert DockerLabelExtractor(str(dockerfile)).extract() == {"BACKEND": "api"}
