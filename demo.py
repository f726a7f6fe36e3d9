"""
Demonstration script for the turnmaze solvers.
"""

import logging

from turnmaze import RuleSet, SolverKind, format_result, run

MAZES = {
    "corridor": """
        6,3
        000000
        111111
        000000
    """,
    "l_shape": """
        5,5
        00000
        11111
        00001
        00001
        00000
    """,
    "winding": """
        7,7
        0000000
        1110111
        0010100
        0110110
        0100010
        0111111
        0000000
    """,
    "walled_off": """
        5,3
        00000
        11011
        00000
    """,
    "exit_in_wall": """
        4,3
        0000
        1110
        0000
    """,
}


def demo() -> None:
    """Solve every sample maze with both solvers."""
    for name, text in MAZES.items():
        lines = [line.strip() for line in text.strip().splitlines()]
        print(f"Maze '{name}':")
        for kind in SolverKind:
            answer = run(lines, RuleSet(solver=kind))
            print(f"  {kind.value:>5}: {answer}")
        print()


def turns_only_demo() -> None:
    """Count only direction changes by making straight steps free."""
    lines = [line.strip() for line in MAZES["winding"].strip().splitlines()]
    for kind in SolverKind:
        answer = run(lines, RuleSet(solver=kind, step_cost=0))
        print(f"Turns needed ({kind.value}): {answer}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    demo()
    turns_only_demo()
