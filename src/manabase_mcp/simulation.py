from typing import Any, Dict, Optional

from fastmcp import Context

from manabase.types import MonteCarloParams

from .log_decorator import log_tool_calls
from .mcp import mcp
from .utils import config, engine, to_jsonable


@mcp.tool
@log_tool_calls
async def simulate_land_drops(
    deck_size: int,
    land_count: int,
    target_turn: int,
    iterations: Optional[int] = None,
    mulligan_strategy: str = "none",
    on_play: bool = True,
    max_mulligans: int = 2,
    seed: Optional[int] = None,
    ctx: Context = None,
) -> Dict[str, Any]:
    """
    Monte Carlo simulation: how often does the deck hit a land drop every
    turn up to `target_turn`?

    mulligan_strategy: none | aggressive (keep 2-5 lands) | conservative
    (keep 1-6) | optimal (keep within 2 of 40% of hand size).
    Mulligans follow the London rule: draw 7, bottom one card per mulligan.

    Returns success_rate (%), average_turn and standard_deviation over
    successful runs, a 95% confidence interval and the per-turn distribution
    (index 0 counts failed runs).

    Related Tools:
    - analyze_turn() for the exact single-turn answer
    """
    params = MonteCarloParams(
        deck_size=deck_size,
        land_count=land_count,
        target_turn=target_turn,
        iterations=iterations if iterations is not None else config.mc_iterations,
        mulligan_strategy=mulligan_strategy,
        on_play=on_play,
        max_mulligans=max_mulligans,
        seed=seed,
    )
    return to_jsonable(await engine.simulate_async(params))
