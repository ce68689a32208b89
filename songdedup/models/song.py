"""Song record model consumed by the duplicate engine."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

Timestamp = Union[datetime, str]


class SongRecord(BaseModel):
    """A song as seen by the duplicate engine.

    Records belong to the caller. The model is frozen so the engine can only
    read fields and hand references back.

    Timestamps are kept as given (datetime or raw string). Ranking parses
    them leniently, so a malformed date never blocks a scan.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Identifier
    id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("id", "slug"),
        description="Stable unique identifier (slug)",
    )

    # Content
    title: str
    lyrics: Optional[str] = None

    # Media flags
    has_audio: bool = Field(
        False, validation_alias=AliasChoices("has_audio", "hasAudio")
    )
    has_image: bool = Field(
        False, validation_alias=AliasChoices("has_image", "hasImage")
    )

    # Metadata
    created_at: Optional[Timestamp] = Field(
        None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    updated_at: Optional[Timestamp] = Field(
        None, validation_alias=AliasChoices("updated_at", "updatedAt")
    )

    @property
    def media_score(self) -> int:
        """2 for audio plus 1 for an image."""
        return (2 if self.has_audio else 0) + (1 if self.has_image else 0)

    @classmethod
    def from_song_dict(cls, song: Dict[str, Any]) -> "SongRecord":
        """Build a record from a stored song payload.

        Stored songs carry the audio and image themselves (URLs or data
        URIs) under "audio" and "image"; only their presence matters here.

        Args:
            song: Song payload with slug, title, lyrics, audio, image,
                createdAt and updatedAt keys (all but slug optional).

        Returns:
            SongRecord for the payload.
        """
        return cls(
            id=song.get("slug") or song.get("id"),
            title=song.get("title") or "",
            lyrics=song.get("lyrics"),
            has_audio=bool(song.get("audio") or song.get("hasAudio")),
            has_image=bool(song.get("image") or song.get("hasImage")),
            created_at=_coerce_timestamp(song.get("createdAt")),
            updated_at=_coerce_timestamp(song.get("updatedAt")),
        )


def _coerce_timestamp(value: Any) -> Optional[Timestamp]:
    if value is None or isinstance(value, (datetime, str)):
        return value
    # Numbers are JavaScript epoch milliseconds
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return str(value)
    return str(value)
