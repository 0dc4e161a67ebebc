"""Wire payload construction.

Turns a caller's message and delivery options into the JSON body sent
to a webhook endpoint. Values are copied as-is; validation happens at
registration time, not here.
"""

from __future__ import annotations

from hookline.models import DeliveryOptions, WebhookMessage, WebhookPayload


def build_payload(
    message: WebhookMessage,
    options: DeliveryOptions | None = None,
) -> WebhookPayload:
    """Build the wire payload for a delivery.

    content and embeds come from the message, username and avatar_url from
    the options. tts is false unless the options set it. Fields left unset
    here are dropped by WebhookPayload.to_wire().

    Args:
        message: Caller-supplied message.
        options: Presentation overrides, if any.

    Returns:
        WebhookPayload ready for serialization.

    Example:
        ```python
        payload = build_payload(WebhookMessage(content="hi"), DeliveryOptions())
        payload.to_wire()  # {"content": "hi", "tts": False}
        ```
    """
    if options is None:
        options = DeliveryOptions()

    return WebhookPayload(
        content=message.content,
        embeds=message.embeds,
        username=options.username,
        avatar_url=options.avatar_url,
        tts=bool(options.tts),
    )


__all__ = ["build_payload"]
