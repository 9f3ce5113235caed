"""
Reason catalog for screening decisions.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..config import ScreeningConfig
from ..schemas import OTHER_REASON, Decision, Outcome, Role, ValidationError


@dataclass(frozen=True)
class ReasonCatalog:
    """
    The canonical set of decision reasons.

    Reasons depend on the outcome and may be overridden per role.
    """

    exclude: tuple[str, ...]
    include: tuple[str, ...]
    include_requires_reason: bool = True
    role_overrides: dict[Role, dict[Outcome, tuple[str, ...]]] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Optional[ScreeningConfig] = None) -> "ReasonCatalog":
        """Build the catalog from the screening config section."""
        config = config or ScreeningConfig()

        overrides: dict[Role, dict[Outcome, tuple[str, ...]]] = {}
        for role_code, lists in config.role_reasons.items():
            role = Role.parse(role_code)
            overrides[role] = {
                Outcome.parse(outcome): tuple(reasons) for outcome, reasons in lists.items()
            }

        return cls(
            exclude=tuple(config.exclude_reasons),
            include=tuple(config.include_reasons),
            include_requires_reason=config.include_requires_reason,
            role_overrides=overrides,
        )

    def reasons_for(self, role: Optional[Role], outcome: Outcome) -> tuple[str, ...]:
        """Reasons offered for an outcome to a reviewer in the given role."""
        if role is not None:
            override = self.role_overrides.get(role, {}).get(outcome)
            if override is not None:
                return override
        return self.include if outcome is Outcome.INCLUDE else self.exclude

    def build_decision(
        self,
        role: Optional[Role],
        outcome,
        reason: Optional[str],
        notes: Optional[str] = "",
    ) -> Decision:
        """
        Validate form input and build a Decision.

        Raises:
            ValidationError: missing outcome, missing or unknown reason,
                or `other` without notes
        """
        if outcome is None or outcome == "":
            raise ValidationError("Please select Include or Exclude")
        outcome = Outcome.parse(outcome)
        reason = (reason or "").strip()
        notes = (notes or "").strip()

        if not reason:
            if outcome is Outcome.INCLUDE and not self.include_requires_reason:
                return Decision(outcome=outcome, reason="", notes=notes)
            raise ValidationError("Please select a reason")

        allowed = self.reasons_for(role, outcome)
        if reason not in allowed:
            raise ValidationError(
                f'"{reason}" is not a valid reason to mark an article {outcome.label.lower()}'
            )

        if reason == OTHER_REASON and not notes:
            raise ValidationError('Please provide additional notes for "other"')

        return Decision(outcome=outcome, reason=reason, notes=notes)
