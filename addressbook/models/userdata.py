"""
Per-User Data Models

The schemas of a user's address book and preferences belong to the host
application. The core only needs a few fields of them (the sample flag,
the file path); everything else is carried through untouched, so both
models allow extra keys.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class GuiSettings(BaseModel):
    """Window geometry remembered between sessions."""
    model_config = ConfigDict(extra="allow")

    window_width: float = 740.0
    window_height: float = 600.0
    window_x: Optional[int] = None
    window_y: Optional[int] = None


class UserPrefs(BaseModel):
    """
    A user's preferences.

    `is_sample` is True while the address book still holds the seeded
    sample data; the host clears it on the first real edit.
    """
    model_config = ConfigDict(extra="allow")

    gui_settings: GuiSettings = Field(default_factory=GuiSettings)
    address_book_file_path: Optional[str] = Field(
        default=None,
        description="Where this user's address book lives"
    )
    is_sample: bool = Field(
        default=False,
        description="Address book holds seeded sample data"
    )


class AddressBook(BaseModel):
    """
    A user's address book.

    Persons are opaque records owned by the host's entity model.
    """
    model_config = ConfigDict(extra="allow")

    persons: list[dict[str, Any]] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.persons


def sample_address_book() -> AddressBook:
    """Address book installed for a user who has none yet."""
    return AddressBook(
        tags=["finance", "hr", "operations"],
        persons=[
            {
                "name": "Alex Yeoh",
                "id": "alexyeoh01",
                "phone": "87438807",
                "tags": ["finance"],
            },
            {
                "name": "Bernice Yu",
                "id": "berniceyu02",
                "phone": "99272758",
                "tags": ["hr"],
            },
            {
                "name": "Charlotte Oliveiro",
                "id": "charlotte03",
                "phone": "93210283",
                "tags": ["operations"],
            },
        ],
    )
