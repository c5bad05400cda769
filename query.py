#!/usr/bin/env python3
"""Ad hoc runner for ChefInBox.

Run a full recipe session from the terminal without any UI.

Usage:
    python query.py "pomodoro, basilico, mozzarella"
    python query.py --servings 4 "uova, farina"
    python query.py --image images/fridge.jpg            # detect ingredients from a photo
    python query.py --image https://example.com/p.png --servings 6 "pasta"
    python query.py --debug "riso, zafferano"            # also print the session as JSON

Flow:
1. Analyse the image (if given) and merge the detected ingredients
2. Add the typed, comma-separated ingredients
3. Generate recipes for the requested servings and render them as markdown
"""

import asyncio
import sys
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown

from chefinbox.services.images import load_image_source
from chefinbox.session.orchestrator import RecipeSession
from chefinbox.utils.exceptions import ChefInBoxError
from chefinbox.utils.formatting import format_session_markdown
from chefinbox.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--debug] [--servings N] [--image PATH_OR_URL] "ingredient, ingredient, ..."'


def parse_ingredient_text(text: str) -> list[str]:
    """Split comma-separated user input into trimmed, non-empty names."""
    return [part.strip() for part in text.split(",") if part.strip()]


async def run_session(
    ingredient_text: str,
    servings: Optional[int] = None,
    image_source: Optional[str] = None,
    session: Optional[RecipeSession] = None,
) -> RecipeSession:
    """Drive one session end to end and return it for rendering."""
    session = session or RecipeSession()
    if servings is not None:
        session.set_servings(servings - session.servings)

    if image_source:
        image_bytes, mime_type = await load_image_source(image_source)
        logger.info(f"Loaded image ({len(image_bytes) / 1024:.1f} KB, {mime_type})")
        with console.status("Analysing the photo..."):
            await session.request_analysis(image_bytes, mime_type)
        if session.error:
            return session

    for name in parse_ingredient_text(ingredient_text):
        session.add_ingredient(name)

    if not len(session.registry):
        console.print("[yellow]No ingredients to cook with.[/yellow]")
        return session

    with console.status(f"Adapting the recipes for {session.servings} people..."):
        await session.request_generation()
    return session


def run_query(
    ingredient_text: str,
    servings: Optional[int] = None,
    image_source: Optional[str] = None,
    debug: bool = False,
) -> int:
    """Run a session and print the result. Returns the process exit code."""
    try:
        session = asyncio.run(run_session(ingredient_text, servings=servings, image_source=image_source))
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 0
    except ChefInBoxError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        return 1

    snapshot = session.snapshot()
    if debug:
        console.print("[bold cyan]Debug Mode: Session snapshot[/bold cyan]")
        console.print_json(data=snapshot.model_dump(mode="json", by_alias=True))
        console.print()

    console.print(Markdown(format_session_markdown(snapshot)))
    return 1 if snapshot.error else 0


def main(argv: list[str]) -> int:
    debug_mode = False
    servings = None
    image_source = None
    idx = 0

    while idx < len(argv) and argv[idx].startswith("--"):
        flag = argv[idx]
        if flag == "--debug":
            debug_mode = True
            idx += 1
        elif flag in ("--servings", "--image"):
            if idx + 1 >= len(argv):
                print(f"Error: {flag} flag requires a value")
                return 2
            value = argv[idx + 1]
            if flag == "--servings":
                try:
                    servings = int(value)
                except ValueError:
                    print(f"Error: --servings expects an integer, got: {value}")
                    return 2
            else:
                image_source = value
            idx += 2
        else:
            print(f"Unknown flag: {flag}")
            print(USAGE)
            return 2

    ingredient_text = " ".join(argv[idx:])
    if not ingredient_text.strip() and not image_source:
        print("Error: provide ingredients, an image, or both")
        print(USAGE)
        return 2

    return run_query(ingredient_text, servings=servings, image_source=image_source, debug=debug_mode)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
