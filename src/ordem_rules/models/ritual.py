"""Ritual definitions for the Ordem Paranormal rules engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ordem_rules.models.enums import CastMode, Element


class RitualCost(BaseModel):
    """PE cost of a ritual and of its enhanced casting modes.

    Attributes:
        base_pe: Cost of a NORMAL cast.
        disciple_extra_pe: Extra PE for a DISCIPLE cast, None when the
            ritual has no disciple version.
        true_extra_pe: Extra PE for a TRUE cast, None when the ritual has
            no true version.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_pe: int = Field(ge=0)
    disciple_extra_pe: int | None = Field(default=None, ge=0)
    true_extra_pe: int | None = Field(default=None, ge=0)

    def extra_for(self, mode: CastMode) -> int | None:
        """Get the extra PE a mode costs.

        Args:
            mode: The casting mode.

        Returns:
            0 for NORMAL, the mode's extra PE, or None when not offered.
        """
        if mode == CastMode.DISCIPLE:
            return self.disciple_extra_pe
        if mode == CastMode.TRUE:
            return self.true_extra_pe
        return 0


class Ritual(BaseModel):
    """A ritual definition.

    Example:
        >>> ritual = Ritual(
        ...     name="Cicatrização",
        ...     circle=1,
        ...     element=Element.DEATH,
        ...     cost=RitualCost(base_pe=1, disciple_extra_pe=2, true_extra_pe=8),
        ...     true_required_circle=3,
        ... )
        >>> ritual.required_circle(CastMode.TRUE)
        3
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    circle: int = Field(ge=1, le=4)
    element: Element
    cost: RitualCost
    disciple_required_circle: int | None = Field(default=None, ge=1, le=4)
    true_required_circle: int | None = Field(default=None, ge=1, le=4)
    true_affinities: tuple[Element, ...] = ()

    @model_validator(mode="after")
    def validate_mode_circles(self) -> "Ritual":
        """Ensure enhanced modes never require a lower circle than the ritual.

        Raises:
            ValueError: If a mode requires a circle below the ritual's own.
        """
        for mode_circle in (self.disciple_required_circle, self.true_required_circle):
            if mode_circle is not None and mode_circle < self.circle:
                msg = f"Mode circle {mode_circle} is below ritual circle {self.circle}"
                raise ValueError(msg)
        return self

    def offers(self, mode: CastMode) -> bool:
        """Check whether the ritual can be cast in a mode."""
        return self.cost.extra_for(mode) is not None

    def required_circle(self, mode: CastMode) -> int:
        """Get the circle a caster must reach to use a mode.

        Args:
            mode: The casting mode.

        Returns:
            The mode's required circle, defaulting to the ritual's circle.
        """
        if mode == CastMode.DISCIPLE and self.disciple_required_circle is not None:
            return self.disciple_required_circle
        if mode == CastMode.TRUE and self.true_required_circle is not None:
            return self.true_required_circle
        return self.circle


__all__ = [
    "RitualCost",
    "Ritual",
]
