"""Solve every bundled diagram under ``examples/data`` and print a summary."""

from pathlib import Path

from angle_solver import GeometryDataError, SolveOptions, load_geometry, solve

DATA_DIR = Path(__file__).parent / "data"


def _log_step(angle, reason, rule):
    print(f"    solved {angle.name}: {angle.value}° ({rule})")


def main() -> None:
    print("=" * 80)
    print("ANGLE SOLVER EXAMPLES")
    print("=" * 80)

    passed = []
    failed = []
    paths = sorted(DATA_DIR.glob("*.json"))
    for index, path in enumerate(paths, start=1):
        print(f"\n[{index}/{len(paths)}] {path.stem}")
        print("-" * 60)
        try:
            model = load_geometry(path)
        except GeometryDataError as exc:
            print(f"  validation failed: {', '.join(exc.errors)}")
            failed.append(path.stem)
            continue

        targets = model.target_angles()
        known = [a for a in model.angles if a.known_value is not None]
        print(f"  Angles: {len(model.angles)} total, {len(known)} with known values, {len(targets)} targets")
        print(f"  Triangles: {len(model.triangles)}")
        print(f"  Lines: {len(model.lines)}")

        results = solve(model, SolveOptions(set_angle=_log_step))
        solved_values = dict(results.solved_angles_with_equations)
        solved_values.update(results.theorems.solved_angles)
        target_solved = sum(1 for t in targets if t.known_value is not None or t.name in solved_values)

        print("\n  Results:")
        print(f"    Iterations: {results.theorems.iterations}")
        print(f"    Time: {results.execution_time:.2f}ms")
        if targets:
            print(f"    Targets: {target_solved}/{len(targets)} solved")
        print(f"    Score: {results.score}")
        print(f"    Strategies agree: {results.agreement['agreed']}")

        if targets and target_solved == len(targets):
            passed.append(path.stem)
        else:
            failed.append(path.stem)

    print("\n" + "=" * 80)
    print(f"Total: {len(paths)}  Passed: {len(passed)}  Failed: {len(failed)}")
    for name in failed:
        print(f"  - {name}")


if __name__ == "__main__":
    main()
