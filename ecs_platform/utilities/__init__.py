from .docker_labels import DockerLabelExtractor
