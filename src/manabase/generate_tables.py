#!/usr/bin/env python3
"""
Generate manabase requirement tables from the exact hypergeometric model.

Prints the minimum sources needed per mana pattern and turn, and how they
differ from Frank Karsten's published table.
"""

import argparse
import re
from typing import Dict, List, Optional, Tuple

from .engine import ManabaseEngine
from .turn_analysis import karsten_sources
from .types import GOOD_THRESHOLD, MAX_TABLE_TURN


def parse_pattern(pattern: str) -> Tuple[int, int, str]:
    """
    Parse mana pattern string into (colored_pips, generic_mana, label).

    Examples:
        "C" -> (1, 0, "C")
        "1C" -> (1, 1, "1C")
        "2CC" -> (2, 2, "2CC")
        "CCC" -> (3, 0, "CCC")

    Args:
        pattern: Pattern string (e.g., "1C", "2CC", "CCC")

    Returns:
        Tuple of (colored_pips, generic_mana, label)
    """
    match = re.match(r"^(\d*)(C+)$", pattern.strip().upper())
    if not match:
        raise ValueError(
            f"Invalid pattern: {pattern}. Expected format like C, 1C, 2CC, CCC"
        )

    generic_str, colored_str = match.groups()
    generic_mana = int(generic_str) if generic_str else 0
    return len(colored_str), generic_mana, pattern.strip().upper()


def generate_table(
    engine: ManabaseEngine,
    deck_size: int,
    patterns: List[Tuple[int, int, str]] = None,
    max_turn: int = MAX_TABLE_TURN,
    on_play: bool = True,
    target_probability: float = GOOD_THRESHOLD,
) -> Dict[str, Dict[int, Optional[int]]]:
    """
    Compute a complete table for a deck size.

    Returns:
        Nested dict: {pattern_label: {turn: minimum_sources}}; None where the
        spell cannot be cast that turn, -1 where the target is unreachable
    """
    if patterns is None:
        patterns = [(1, 0, "C"), (2, 0, "CC"), (3, 0, "CCC")]

    table = {}
    for colored_pips, generic_mana, label in patterns:
        table[label] = {}
        cmc = colored_pips + generic_mana

        for turn in range(1, max_turn + 1):
            # Can't cast spell before its CMC
            if turn < cmc:
                table[label][turn] = None
                continue
            table[label][turn] = engine.turn_analyzer.find_minimum_sources(
                deck_size,
                colored_pips,
                turn,
                target_probability=target_probability,
                on_play=on_play,
            )

    return table


def format_table(
    deck_size: int,
    table: Dict[str, Dict[int, Optional[int]]],
    max_turn: int = MAX_TABLE_TURN,
    compare: bool = True,
) -> str:
    """Render a table; with `compare`, show the delta against the published table."""
    lines = [f"{'=' * 70}", f"RESULTS FOR {deck_size}-CARD DECK", f"{'=' * 70}"]

    for label, row_values in table.items():
        colored_pips, generic_mana, _ = parse_pattern(label)
        lines.append("")
        lines.append(
            f"{label} (CMC={colored_pips + generic_mana}, need {colored_pips} "
            f"colored source{'s' if colored_pips > 1 else ''}):"
        )
        lines.append("-" * 70)

        header = "Turn |"
        row = "Srcs |"
        delta = "Diff |"
        for turn in range(1, max_turn + 1):
            header += f" {turn:^4} |"
            value = row_values.get(turn)
            row += "  -   |" if value is None else f" {value:^4} |"
            published = karsten_sources(colored_pips, turn)
            if value is None or value < 0 or published is None:
                delta += "  -   |"
            else:
                delta += f" {value - published:^+4} |"
        lines.extend([header, row])
        if compare:
            lines.append(delta)

    return "\n".join(lines)


def main(argv: List[str] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Exact manabase source-count tables (hypergeometric model)"
    )
    parser.add_argument(
        "--deck-size",
        type=int,
        default=60,
        help="Deck size (default: 60)",
    )
    parser.add_argument(
        "--patterns",
        type=str,
        default="C,CC,CCC",
        help="Comma-separated mana patterns (e.g., C,CC,1C,2C,CCC)",
    )
    parser.add_argument(
        "--on-draw",
        action="store_true",
        help="Compute for the player on the draw",
    )
    parser.add_argument(
        "--target",
        type=float,
        default=GOOD_THRESHOLD,
        help="Target probability (default: 0.90)",
    )
    parser.add_argument(
        "--max-turn",
        type=int,
        default=MAX_TABLE_TURN,
        help="Last turn to compute (default: 10)",
    )
    args = parser.parse_args(argv)

    patterns = [parse_pattern(p) for p in args.patterns.split(",") if p.strip()]
    engine = ManabaseEngine.from_env()
    table = generate_table(
        engine,
        args.deck_size,
        patterns=patterns,
        max_turn=args.max_turn,
        on_play=not args.on_draw,
        target_probability=args.target,
    )
    print(format_table(args.deck_size, table, max_turn=args.max_turn))


if __name__ == "__main__":
    main()
