import logging
from typing import Dict

from ecs_platform.errors import MissingFieldError

logger = logging.getLogger(__name__)

LABEL_PREFIX = "LABEL "


class DockerLabelExtractor:
    """
    Reads the LABEL instructions out of a Dockerfile
    """
    def __init__(self, path: str) -> None:
        self.path = path

    def _validate(self) -> None:
        if not self.path:
            raise MissingFieldError("path")

    def extract(self) -> Dict[str, str]:
        """
        Return the labels in the Dockerfile. Each ``LABEL key=value`` line is
        split on its first ``=`` and the value has its surrounding double
        quotes removed; lines without ``=`` are skipped.
        """
        self._validate()

        with open(self.path) as dockerfile:
            lines = dockerfile.read().split("\n")

        labels = {}
        for line in lines:
            if not line.startswith(LABEL_PREFIX):
                continue

            key, sep, value = line[len(LABEL_PREFIX):].partition("=")
            if not sep:
                continue
            labels[key] = value.strip('"')

        logger.info(f"Extracted {len(labels)} labels from {self.path}")
        return labels
