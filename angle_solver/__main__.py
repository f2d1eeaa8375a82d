import argparse
import logging
import sys
from typing import List, Optional, Sequence

from angle_solver import (
    GeometryDataError,
    SolveOptions,
    generate_wolfram_url,
    load_geometry,
    solve,
)
from angle_solver.model import Angle

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _format_value(value: Optional[float]) -> str:
    if value is None:
        return "?"
    return f"{value:g}°"


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Solve the target angles of a geometry diagram")
    parser.add_argument("path", help="Path to the diagram JSON file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        help="Cap on theorem engine passes (default: from solver config)",
    )
    parser.add_argument(
        "--wolfram",
        action="store_true",
        help="Print a Wolfram|Alpha link for the simplified equation system",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    logger.info("Loading diagram from %s", args.path)
    try:
        model = load_geometry(args.path)
    except FileNotFoundError:
        logger.error("File not found: %s", args.path)
        raise SystemExit(1)
    except GeometryDataError as exc:
        for error in exc.errors:
            logger.error("Invalid diagram: %s", error)
        raise SystemExit(1)

    steps: List[str] = []

    def _record(angle: Angle, reason: str, rule: str) -> None:
        steps.append(f"[{rule}] {angle.name}: {reason}")

    results = solve(model, SolveOptions(set_angle=_record, max_iterations=args.max_iterations))

    for step in steps:
        print(step)

    print(f"Solved: {results.solved}")
    print(f"Score: {results.score}")
    print(f"Execution time: {results.execution_time:.2f} ms")
    for target in model.target_angles():
        value = results.theorems.solved_angles.get(target.name)
        if value is None:
            value = results.solved_angles_with_equations.get(target.name)
        if value is None:
            value = target.known_value
        print(f"{target.name} = {_format_value(value)}")

    agreement = results.agreement
    if not agreement["agreed"]:
        print(
            f"Strategies disagree: {len(agreement['conflicts'])} angle conflict(s), "
            f"{len(agreement['solver_conflicts'])} solver conflict(s)"
        )

    if args.wolfram:
        name_to_symbol = {n: s for s, names in results.symbol_to_names.items() for n in names}
        targets = sorted({name_to_symbol[t.name] for t in model.target_angles() if t.name in name_to_symbol})
        print(generate_wolfram_url(results.simplified_equations, targets))


if __name__ == "__main__":
    main(sys.argv[1:])
