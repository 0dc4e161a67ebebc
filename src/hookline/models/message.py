"""Message, option and wire payload models.

WebhookMessage and DeliveryOptions are what callers hand to the
dispatcher. WebhookPayload is the JSON body actually POSTed to the
endpoint. In all of them None means "not set": unset fields are left out
of the serialized output, while explicit values such as False or "" are kept.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EmbedFooter(BaseModel):
    """Footer line of an embed."""

    model_config = ConfigDict(extra="forbid")

    text: str
    icon_url: str | None = None


class EmbedMedia(BaseModel):
    """Image or thumbnail reference of an embed."""

    model_config = ConfigDict(extra="forbid")

    url: str
    height: int | None = None
    width: int | None = None


class EmbedAuthor(BaseModel):
    """Author block of an embed."""

    model_config = ConfigDict(extra="forbid")

    name: str
    url: str | None = None
    icon_url: str | None = None


class EmbedField(BaseModel):
    """A name/value pair rendered inside an embed."""

    model_config = ConfigDict(extra="forbid")

    name: str
    value: str
    inline: bool | None = None


class Embed(BaseModel):
    """Rich content block attached to a message.

    Attributes:
        title: Embed title.
        description: Main embed text.
        url: Link attached to the title.
        color: Sidebar color as an integer (0xRRGGBB).
        timestamp: ISO-8601 timestamp shown in the footer.
        footer: Footer text and icon.
        image: Large image.
        thumbnail: Small image.
        author: Author line.
        fields: Name/value pairs.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    url: str | None = None
    color: int | None = None
    timestamp: str | None = None
    footer: EmbedFooter | None = None
    image: EmbedMedia | None = None
    thumbnail: EmbedMedia | None = None
    author: EmbedAuthor | None = None
    fields: list[EmbedField] | None = None


class WebhookMessage(BaseModel):
    """Caller-supplied message to deliver.

    Attributes:
        content: Plain text body.
        embeds: Rich content blocks.
    """

    model_config = ConfigDict(extra="forbid")

    content: str | None = Field(default=None, description="Plain text body")
    embeds: list[Embed] | None = Field(default=None, description="Rich content blocks")

    def to_record(self) -> dict[str, Any]:
        """Serialize for storage in a delivery log entry."""
        return self.model_dump(mode="json", exclude_none=True)


class DeliveryOptions(BaseModel):
    """Per-delivery presentation overrides.

    Attributes:
        username: Display name override.
        avatar_url: Avatar image override.
        tts: Read the message aloud. Sent as false when not set.
    """

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, description="Display name override")
    avatar_url: str | None = Field(default=None, description="Avatar image override")
    tts: bool | None = Field(default=None, description="Text-to-speech flag")


class WebhookPayload(BaseModel):
    """JSON body POSTed to a webhook endpoint.

    Serialize with to_wire(): keys whose value is unset are omitted entirely,
    receivers reject explicit nulls for these fields.
    """

    model_config = ConfigDict(extra="forbid")

    content: str | None = None
    embeds: list[Embed] | None = None
    username: str | None = None
    avatar_url: str | None = None
    tts: bool = False

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with unset fields removed."""
        return self.model_dump(mode="json", exclude_none=True)


__all__ = [
    "DeliveryOptions",
    "Embed",
    "EmbedAuthor",
    "EmbedField",
    "EmbedFooter",
    "EmbedMedia",
    "WebhookMessage",
    "WebhookPayload",
]
