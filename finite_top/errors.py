from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from .continuity import ContinuityWitness


class AxiomViolation(ValueError):
    """A candidate carrier/opens pair that was expected to be a topology is not one."""

    def __init__(self, message: str, violations: Sequence[str] = ()):
        self.violations: Tuple[str, ...] = tuple(violations)
        if self.violations:
            message = f"{message} ({'; '.join(self.violations)})"
        super().__init__(message)


class NotContinuous(ValueError):
    """Raised when a map fails certification; carries the full failing witness."""

    def __init__(self, witness: "ContinuityWitness", message: str = "map is not continuous"):
        self.witness = witness
        count = len(witness.failures)
        super().__init__(f"{message}: {count} open set(s) have non-open preimages")


class ShapeMismatch(ValueError):
    """Source/target spaces or equality witnesses of composed maps do not line up."""


class RelationLawViolation(ValueError):
    """A relation handed to the quotient builder is not an equivalence relation."""

    LAWS = ("reflexivity", "symmetry", "transitivity", "ambient-agreement")

    def __init__(self, law: str, message: str):
        if law not in self.LAWS:
            raise ValueError(f"Unknown relation law {law!r}")
        self.law = law
        super().__init__(message)
