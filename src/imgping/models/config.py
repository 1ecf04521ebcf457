"""Run configuration with fixed defaults."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ENDPOINT = "http://127.0.0.1:8995/ping"


@dataclass(slots=True)
class RunConfig:
    images_dir: str = "IMAGES"
    output_path: str = "api_responses.csv"
    endpoint: str = DEFAULT_ENDPOINT
    payload_field: str = "image_base64"
    # Admission limit: pipelines allowed past discovery at once
    concurrency: int = 10
    extensions: tuple[str, ...] = (
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".bmp",
    )
