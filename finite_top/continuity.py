from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from .errors import NotContinuous, ShapeMismatch
from .initial_final import FinalLeg, InitialLeg, final_topology, initial_topology
from .space import Eq, Space, Subset, SubsetCodec, contains, format_subset

NOTE_DIRECT = "computed directly"
NOTE_STRUCTURED = "via structured verification"
NOTE_IDENTITY = "identity"
NOTE_COMPOSED = "via composition"


@dataclass(frozen=True)
class ContinuityFailure:
    """An open set of the target whose preimage is not open in the source."""
    open_set: Subset
    preimage: Subset


@dataclass(frozen=True)
class PreimageRecord:
    open_set: Subset
    preimage: Subset
    is_open: bool


@dataclass(frozen=True)
class ContinuityDiagnostics:
    preimages: Tuple[PreimageRecord, ...]
    note: str


@dataclass(frozen=True)
class ContinuityWitness:
    """Verdict of a continuity check.

    `verify` re-runs the check against the live spaces, so derived witnesses (identity,
    composition) stay checkable instead of trusting a cached verdict.
    """
    holds: bool
    failures: Tuple[ContinuityFailure, ...]
    verify: Callable[[], bool]
    diagnostics: Optional[ContinuityDiagnostics] = None

    def describe(self, source: Optional[Space] = None, target: Optional[Space] = None) -> List[str]:
        return [
            f"preimage {format_subset(source, f.preimage)} of open {format_subset(target, f.open_set)} is not open"
            for f in self.failures
        ]


def preimage_table(
    source: Space,
    target: Space,
    eq_source: Eq,
    eq_target: Eq,
    fn: Callable[[Any], Any],
) -> List[PreimageRecord]:
    """For every open V of `target`: (V, fn^-1(V), whether fn^-1(V) is open in `source`)."""
    src = SubsetCodec(eq_source, source.carrier)
    open_masks = set()
    for U in source.opens:
        m = src.try_encode(U)
        if m is not None:
            open_masks.add(m)

    images = [fn(x) for x in src.carrier]
    records: List[PreimageRecord] = []
    for V in target.opens:
        mask = 0
        for i, y in enumerate(images):
            if contains(eq_target, V, y):
                mask |= 1 << i
        records.append(PreimageRecord(open_set=tuple(V), preimage=src.decode(mask), is_open=mask in open_masks))
    return records


def is_continuous(
    source: Space,
    target: Space,
    eq_source: Eq,
    eq_target: Eq,
    fn: Callable[[Any], Any],
) -> bool:
    return all(r.is_open for r in preimage_table(source, target, eq_source, eq_target, fn))


def continuity_witness(
    source: Space,
    target: Space,
    eq_source: Eq,
    eq_target: Eq,
    fn: Callable[[Any], Any],
    *,
    note: str = NOTE_DIRECT,
) -> ContinuityWitness:
    """Decide continuity and record every violating open set. Never raises."""
    records = preimage_table(source, target, eq_source, eq_target, fn)
    failures = tuple(ContinuityFailure(open_set=r.open_set, preimage=r.preimage) for r in records if not r.is_open)
    return ContinuityWitness(
        holds=not failures,
        failures=failures,
        verify=lambda: is_continuous(source, target, eq_source, eq_target, fn),
        diagnostics=ContinuityDiagnostics(preimages=tuple(records), note=note),
    )


def certify(
    source: Space,
    target: Space,
    eq_source: Eq,
    eq_target: Eq,
    fn: Callable[[Any], Any],
    *,
    note: str = NOTE_DIRECT,
) -> ContinuityWitness:
    """Like `continuity_witness`, but raises `NotContinuous` (with the witness) on failure."""
    witness = continuity_witness(source, target, eq_source, eq_target, fn, note=note)
    if not witness.holds:
        raise NotContinuous(witness)
    return witness


@dataclass(frozen=True, eq=False)
class ContinuousMap:
    """A certified continuous map. Immutable; compared by identity."""
    source: Space
    target: Space
    eq_source: Eq
    eq_target: Eq
    fn: Callable[[Any], Any]
    witness: ContinuityWitness

    def __call__(self, x: Any) -> Any:
        return self.fn(x)


@dataclass(frozen=True)
class InitialRequest:
    """Ask `make_continuous_map` for the initial topology on `carrier` as the source."""
    carrier: Tuple[Any, ...]
    legs: Tuple[InitialLeg, ...] = ()


@dataclass(frozen=True)
class FinalRequest:
    """Ask `make_continuous_map` for the final topology on `carrier` as the target."""
    carrier: Tuple[Any, ...]
    legs: Tuple[FinalLeg, ...] = ()


def make_continuous_map(
    source: Union[Space, InitialRequest],
    target: Union[Space, FinalRequest],
    eq_source: Eq,
    eq_target: Eq,
    fn: Callable[[Any], Any],
    *,
    note: str = NOTE_DIRECT,
) -> ContinuousMap:
    """Certify `fn` and wrap it; raises `NotContinuous` if it is not continuous.

    An `InitialRequest` source is resolved to the initial topology for its legs plus `fn`
    itself (when the target is an explicit space); a `FinalRequest` target is resolved to
    the final topology for its legs plus `fn` out of the resolved source.
    """
    if isinstance(source, InitialRequest):
        legs = list(source.legs)
        if isinstance(target, Space):
            legs.append(InitialLeg(target=target, eq_target=eq_target, fn=fn))
        if not legs:
            raise ValueError(
                "initial topology request requires explicit legs when the codomain topology is inferred"
            )
        source = initial_topology(eq_source, source.carrier, legs)
    if isinstance(target, FinalRequest):
        final_legs = list(target.legs) + [FinalLeg(source=source, eq_source=eq_source, fn=fn)]
        target = final_topology(eq_target, target.carrier, final_legs)

    witness = certify(source, target, eq_source, eq_target, fn, note=note)
    return ContinuousMap(
        source=source,
        target=target,
        eq_source=eq_source,
        eq_target=eq_target,
        fn=fn,
        witness=witness,
    )


def identity(eq: Eq, space: Space) -> ContinuousMap:
    """Identity map; continuity holds without a check but stays re-verifiable."""

    def fn(x: Any) -> Any:
        return x

    records = tuple(PreimageRecord(open_set=tuple(U), preimage=tuple(U), is_open=True) for U in space.opens)
    witness = ContinuityWitness(
        holds=True,
        failures=(),
        verify=lambda: is_continuous(space, space, eq, eq, fn),
        diagnostics=ContinuityDiagnostics(preimages=records, note=NOTE_IDENTITY),
    )
    return ContinuousMap(source=space, target=space, eq_source=eq, eq_target=eq, fn=fn, witness=witness)


def compose(g: ContinuousMap, f: ContinuousMap) -> ContinuousMap:
    """g ∘ f. Requires f.target/g.source (and their witnesses) to be the same objects.

    Continuity of a composite of certified maps is not rechecked; the derived witness
    carries no preimage table, `verify()` re-runs the full check on demand.
    """
    if f.target is not g.source:
        raise ShapeMismatch("compose: target/source topology mismatch")
    if f.eq_target is not g.eq_source:
        raise ShapeMismatch("compose: equality witness mismatch")

    f_fn = f.fn
    g_fn = g.fn

    def fn(x: Any) -> Any:
        return g_fn(f_fn(x))

    source, target = f.source, g.target
    eq_source, eq_target = f.eq_source, g.eq_target
    witness = ContinuityWitness(
        holds=f.witness.holds and g.witness.holds,
        failures=(),
        verify=lambda: is_continuous(source, target, eq_source, eq_target, fn),
        diagnostics=ContinuityDiagnostics(preimages=(), note=NOTE_COMPOSED),
    )
    return ContinuousMap(
        source=source,
        target=target,
        eq_source=eq_source,
        eq_target=eq_target,
        fn=fn,
        witness=witness,
    )


def maps_equal(eq: Eq, points: Sequence[Any], f: Callable[[Any], Any], g: Callable[[Any], Any]) -> bool:
    """Pointwise equality of two functions over `points`, judged by `eq`."""
    return all(eq(f(x), g(x)) for x in points)


def inclusion_map(eq: Eq, sub: Space, space: Space) -> ContinuousMap:
    """Inclusion of a subspace, sending each point to its representative in `space`."""

    def fn(x: Any) -> Any:
        for y in space.carrier:
            if eq(x, y):
                return y
        raise ValueError(f"inclusion: point {x!r} is not in the ambient carrier")

    for x in sub.carrier:
        if not contains(eq, space.carrier, x):
            raise ValueError(f"inclusion: point {x!r} is not in the ambient carrier")
    return make_continuous_map(sub, space, eq, eq, fn)
