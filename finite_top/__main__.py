from __future__ import annotations

HELP = """finite_top: finite point-set topology engine

Common commands:
  python -m finite_top.check_spaces --spaces configs/spaces.yaml
  python -m finite_top.check_spaces --spaces configs/spaces.yaml --config configs/engine.yaml --format json

"""


def main() -> None:
    print(HELP)


if __name__ == "__main__":
    main()
