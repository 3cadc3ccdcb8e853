"""Example: Build the leaderboard and fill an HTML page with it."""

from __future__ import annotations

import asyncio
from pathlib import Path

from pixel_leaderboard import run_leaderboard
from pixel_leaderboard.formatter import apply_to_html

PAGE = Path(__file__).parent / "index.html"


async def main() -> None:
    board = await run_leaderboard()
    if board is None:
        # Leave the page's placeholders alone.
        return

    for slot in board.slots:
        print(f"#{slot.rank} {slot.display_name} {slot.xp_text}")

    if not board.fetch.complete:
        print(f"Partial data after {board.fetch.pages_fetched} page(s)")

    print(apply_to_html(PAGE.read_text(encoding="utf-8"), board.slots))


if __name__ == "__main__":
    asyncio.run(main())
