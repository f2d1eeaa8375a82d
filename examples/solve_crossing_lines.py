"""Example: two lines crossing at O with one angle given."""

from angle_solver import load_geometry, solve, generate_wolfram_url

DIAGRAM = {
    "points": [
        {"id": "O", "x": 0, "y": 0},
        {"id": "A", "x": -100, "y": 0},
        {"id": "B", "x": 100, "y": 0},
        {"id": "C", "x": -82, "y": 57},
        {"id": "D", "x": 82, "y": -57},
    ],
    "angles": [
        {"id": "O", "p": ["A", "C"], "v": 35},
        {"id": "O", "p": ["C", "B"]},
        {"id": "O", "p": ["B", "D"], "t": 1},
        {"id": "O", "p": ["A", "D"], "t": 1},
    ],
    "lines": [["A", "O", "B"], ["C", "O", "D"]],
}


def main() -> None:
    model = load_geometry(DIAGRAM)
    results = solve(model)
    print("Solved:", results.solved)
    for name, value in sorted(results.theorems.solved_angles.items()):
        print(f"{name} = {value}°")
    print("Simplified equations:")
    for equation in results.simplified_equations:
        print("  ", equation)
    print(generate_wolfram_url(results.simplified_equations, []))


if __name__ == "__main__":
    main()
