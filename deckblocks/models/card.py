from dataclasses import dataclass, field
from typing import Any

IMAGE_SIZES = frozenset({"small", "normal", "large", "png", "art_crop", "border_crop"})


@dataclass(frozen=True, slots=True)
class Card:
    """
    A card as returned by Scryfall.

    Only `type_line` is interpreted by deck logic. Everything else is
    display metadata carried through untouched.

    Attributes:
        id: Scryfall card id (one specific printing)
        name: Card name
        type_line: Free-text type line (e.g., "Legendary Creature — Human Wizard")
        oracle_id: Id shared by every printing of the same card
        raw: Full Scryfall payload, kept for persistence
    """

    id: str
    name: str
    type_line: str = ""
    mana_cost: str | None = None
    cmc: float = 0.0
    oracle_id: str | None = None
    oracle_text: str | None = None
    colors: tuple[str, ...] = ()
    set_code: str | None = None
    set_name: str | None = None
    rarity: str | None = None
    image_uris: dict[str, str] = field(default_factory=dict, compare=False, hash=False)
    card_faces: tuple[dict[str, Any], ...] = field(default=(), compare=False, hash=False)
    raw: dict[str, Any] = field(default_factory=dict, compare=False, hash=False, repr=False)

    @classmethod
    def from_scryfall(cls, payload: dict[str, Any]) -> "Card":
        """
        Build a Card from a Scryfall card object.

        Raises:
            KeyError: If the payload has no id or name
        """
        faces = tuple(payload.get("card_faces") or ())
        type_line = payload.get("type_line")
        if not type_line and faces:
            # Reversible cards carry type lines on their faces only
            type_line = " // ".join(f.get("type_line", "") for f in faces if f.get("type_line"))

        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            type_line=type_line or "",
            mana_cost=payload.get("mana_cost"),
            cmc=float(payload.get("cmc") or 0.0),
            oracle_id=payload.get("oracle_id"),
            oracle_text=payload.get("oracle_text"),
            colors=tuple(payload.get("colors") or ()),
            set_code=payload.get("set"),
            set_name=payload.get("set_name"),
            rarity=payload.get("rarity"),
            image_uris=dict(payload.get("image_uris") or {}),
            card_faces=faces,
            raw=dict(payload),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to a Scryfall-shaped payload."""
        if self.raw:
            return dict(self.raw)
        return {
            "id": self.id,
            "name": self.name,
            "type_line": self.type_line,
            "mana_cost": self.mana_cost,
            "cmc": self.cmc,
            "oracle_id": self.oracle_id,
            "oracle_text": self.oracle_text,
            "colors": list(self.colors),
            "set": self.set_code,
            "set_name": self.set_name,
            "rarity": self.rarity,
            "image_uris": dict(self.image_uris),
            "card_faces": list(self.card_faces),
        }

    def image_url(self, size: str = "normal") -> str:
        """
        Get an image URL for this card.

        Falls back to the "normal" size, then to the front face images
        for double-faced cards. Returns an empty string if no image exists.
        """
        if size not in IMAGE_SIZES:
            raise ValueError(f"Invalid image size: {size}. Must be one of {sorted(IMAGE_SIZES)}")

        if self.image_uris:
            return self.image_uris.get(size) or self.image_uris.get("normal", "")

        if self.card_faces:
            face_images = self.card_faces[0].get("image_uris") or {}
            if face_images:
                return str(face_images.get(size) or face_images.get("normal", ""))

        return ""
