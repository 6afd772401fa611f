"""
Deck validation results.

Rule violations are data, never exceptions: in-progress decks are
expected to be illegal and callers render the errors.
"""

from dataclasses import dataclass, field
from enum import Enum


class ValidationKind(str, Enum):
    NO_COMMANDER = "no-commander"
    INVALID_COMMANDER = "invalid-commander"
    DECK_SIZE_BELOW_MINIMUM = "deck-size-below-minimum"
    DECK_SIZE_ABOVE_MAXIMUM = "deck-size-above-maximum"
    DECK_ABOVE_OPTIMAL = "deck-above-optimal"
    SINGLETON_VIOLATION = "singleton-violation"
    COPY_LIMIT_EXCEEDED = "copy-limit-exceeded"
    COPY_LIMIT_REACHED = "copy-limit-reached"
    CARD_NOT_LEGAL = "card-not-legal"
    COLOR_IDENTITY_VIOLATION = "color-identity-violation"
    SIDEBOARD_EXCEEDS_MAXIMUM = "sideboard-exceeds-maximum"


@dataclass(frozen=True, slots=True)
class ValidationError:
    """
    One rule violation.

    card_id and card_name are None for deck-wide problems such as size.
    """

    kind: ValidationKind
    detail: str
    card_id: str | None = None
    card_name: str | None = None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    errors: tuple[ValidationError, ...] = ()
    warnings: tuple[ValidationError, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors

    def of_kind(self, kind: ValidationKind) -> list[ValidationError]:
        return [error for error in self.errors if error.kind == kind]


@dataclass(slots=True)
class ValidationCollector:
    """Mutable accumulator used while an adapter walks a deck."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    def error(
        self,
        kind: ValidationKind,
        detail: str,
        card_id: str | None = None,
        card_name: str | None = None,
    ) -> None:
        self.errors.append(ValidationError(kind, detail, card_id, card_name))

    def warn(self, kind: ValidationKind, detail: str) -> None:
        self.warnings.append(ValidationError(kind, detail))

    def result(self) -> ValidationResult:
        return ValidationResult(errors=tuple(self.errors), warnings=tuple(self.warnings))
