"""
Domain errors.

Read-only lookups (search, autocomplete, prints) never raise these to their
callers; they degrade to empty results. Exact lookups, imports and storage
writes raise them so the caller can tell the user what went wrong.
"""


class DeckBlocksError(Exception):
    """Base class for all domain errors."""


class FormatError(DeckBlocksError):
    """
    Raised when deck list text fails validation.

    Carries every line error so the user can fix them in one pass.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid deck format: " + "; ".join(self.errors))


class CardNotFoundError(DeckBlocksError):
    """Raised when an exact name or id lookup has no match."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"Card not found: {query}")


class GatewayTransportError(DeckBlocksError):
    """Raised when the card data service cannot be reached or errors out."""


class EmptyImportError(DeckBlocksError):
    """Raised when a well-formed deck list resolves to zero cards."""

    def __init__(self, unresolved: list[str] | None = None) -> None:
        self.unresolved = list(unresolved or [])
        super().__init__("No valid cards were found in the imported text")


class StorageError(DeckBlocksError):
    """Raised when a deck cannot be written to the persistence store."""
