"""Failures raised at the engine's API boundary."""


class InvalidParameterError(ValueError):
    """A malformed query: a caller bug, never a zero-probability event."""


class DeckTooSmallError(ValueError):
    """Deck has fewer cards than the configured minimum for mulligan analysis."""

    def __init__(self, deck_size: int, minimum: int):
        self.deck_size = deck_size
        self.minimum = minimum
        super().__init__(
            f"Deck must have at least {minimum} cards for mulligan analysis "
            f"(got {deck_size})"
        )
