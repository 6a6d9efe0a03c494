"""finite_top: exhaustive topology engine for finite point sets.

Core components:

- **Space**: carrier + explicit opens, checked against the topology axioms through an
  equality witness (`space`).
- **Generators**: discrete, indiscrete, base, subbase, product, coproduct and subspace
  topologies (`generators`), plus initial/final topologies (`initial_final`).
- **ContinuousMap**: certified maps with re-verifiable witnesses, identity and
  composition (`continuity`); quotients by maps and equivalence relations (`quotient`).
- **Universal constructions**: products, coproducts, (co)equalizers, pullbacks and
  pushouts, each with a `factor_through_*` report (`universal`, `products`,
  `equalizers`, `pullbacks`).
- **Diagnostics**: separation/connectedness/closure properties and the specialization
  preorder (`properties`), batch re-verification (`registry`, `packs`).

Command line:
- `python -m finite_top.check_spaces --spaces spaces.yaml`
"""

__all__ = [
    "config",
    "errors",
    "space",
    "partitions",
    "generators",
    "initial_final",
    "continuity",
    "quotient",
    "universal",
    "limits",
    "products",
    "equalizers",
    "pullbacks",
    "properties",
    "registry",
    "packs",
    "check_spaces",
]
