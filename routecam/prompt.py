"""Prompt assembly — system rubric + one user message carrying the photo."""
from typing import Any

from routecam.constants import DEFAULT_ROUTE_COLOR, IMAGE_DETAIL, SYSTEM_PROMPT, USER_DIRECTIVE
from routecam.errors import EmptyPayloadError
from routecam.imaging.normalizer import EncodedImage

# Chat-completion message: {"role": ..., "content": str | list[part]}
ChatMessage = dict[str, Any]


def build_messages(
    image: EncodedImage, route_color: str | None = DEFAULT_ROUTE_COLOR
) -> list[ChatMessage]:
    """Return [system, user]; the user message embeds exactly one image."""
    match image.data:
        case b"":
            raise EmptyPayloadError("encoded image is empty")
        case _:
            pass

    color = (route_color or "").strip() or DEFAULT_ROUTE_COLOR
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": USER_DIRECTIVE.format(color=color)},
                {
                    "type": "image_url",
                    "image_url": {"url": image.data_uri, "detail": IMAGE_DETAIL},
                },
            ],
        },
    ]
