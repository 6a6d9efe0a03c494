from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Optional, Tuple, TypeVar

A = TypeVar("A")    # arrow type of an entry
M = TypeVar("M")    # metadata type of an entry
L = TypeVar("L")    # leg arrow type of a report
LM = TypeVar("LM")  # leg metadata type of a report

ROLE_LEG = "leg"
ROLE_MEDIATOR = "mediator"


@dataclass(frozen=True)
class UniversalEntry(Generic[A, M]):
    """One cone/cocone leg or one mediator candidate, with its verdict."""
    role: str
    name: str
    arrow: Optional[A] = None
    holds: bool = True
    failure: Optional[str] = None
    metadata: Optional[M] = None

    def failure_text(self) -> str:
        return self.failure or f"{self.role} {self.name} failed."


def make_leg(
    name: str,
    arrow: Optional[A] = None,
    metadata: Optional[M] = None,
    *,
    holds: bool = True,
    failure: Optional[str] = None,
) -> UniversalEntry[A, M]:
    return UniversalEntry(role=ROLE_LEG, name=name, arrow=arrow, holds=holds, failure=failure, metadata=metadata)


def make_mediator(
    name: str,
    arrow: Optional[A] = None,
    metadata: Optional[M] = None,
    *,
    holds: bool = True,
    failure: Optional[str] = None,
) -> UniversalEntry[A, M]:
    return UniversalEntry(
        role=ROLE_MEDIATOR, name=name, arrow=arrow, holds=holds, failure=failure, metadata=metadata
    )


@dataclass(frozen=True)
class UniversalPropertyReport(Generic[L, LM, A, M]):
    """Outcome of a universal-property check, shared by every limit/colimit construction.

    `holds` is the conjunction over all legs and mediators; `failures` lists, in order, the
    failure text of every failing entry. Use `make_report` to build one.
    """
    legs: Tuple[UniversalEntry[L, LM], ...]
    mediators: Tuple[UniversalEntry[A, M], ...]
    holds: bool
    failures: Tuple[str, ...]

    @property
    def mediator(self) -> Optional[A]:
        """Arrow of the first holding mediator, if any."""
        for entry in self.mediators:
            if entry.holds and entry.arrow is not None:
                return entry.arrow
        return None


def make_report(
    legs: Iterable[UniversalEntry[L, LM]] = (),
    mediators: Iterable[UniversalEntry[A, M]] = (),
) -> UniversalPropertyReport[L, LM, A, M]:
    legs = tuple(legs)
    mediators = tuple(mediators)
    entries = legs + mediators
    return UniversalPropertyReport(
        legs=legs,
        mediators=mediators,
        holds=all(e.holds for e in entries),
        failures=tuple(e.failure_text() for e in entries if not e.holds),
    )
