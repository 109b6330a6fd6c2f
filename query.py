#!/usr/bin/env python3
"""Ad hoc terminal runner for the Recipe Book.

Browse and edit the recipe collection, or chat with the assistant, without a UI.

Usage:
    python query.py list
    python query.py list --search tomato
    python query.py show <ID>
    python query.py add --title "Pancakes" --ingredients "2 eggs\n1 cup flour" --steps "Mix\nFry" [--image photo.jpg]
    python query.py edit <ID> [--title ...] [--ingredients ...] [--steps ...] [--image photo.jpg]
    python query.py delete <ID>
    python query.py chat

In chat mode, answer a suggestion with "yes" (save it), "change" or "no".
Anything else is sent to the assistant as a new request.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from src.app.factory import initialize_recipe_book
from src.chat.session import ChatSession
from src.models.models import ActionResult, Decision, ImageUpload, Recipe, RecipeDraft
from src.orchestrator.lines import decode_lines
from src.utils.errors import RecipeValidationError
from src.utils.logger import logger

console = Console()

NOTICE_STYLES = {"success": "green", "warning": "yellow", "error": "red"}

DECISION_WORDS = {
    "yes": Decision.ACCEPT,
    "y": Decision.ACCEPT,
    "save": Decision.ACCEPT,
    "change": Decision.MODIFY,
    "modify": Decision.MODIFY,
    "no": Decision.REJECT,
    "n": Decision.REJECT,
}


def print_notice(result: ActionResult) -> None:
    style = NOTICE_STYLES[result.notice.level]
    console.print(f"[{style}]{result.notice.message}[/{style}]")


def print_recipes(recipes: list[Recipe]) -> None:
    if not recipes:
        console.print("[yellow]No recipes yet.[/yellow]")
        return
    table = Table(title="Recipe Book")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Ingredients", justify="right")
    table.add_column("Image")
    for recipe in recipes:
        table.add_row(
            recipe.id,
            recipe.title,
            str(len(decode_lines(recipe.ingredients))),
            "✓" if recipe.image_url else "",
        )
    console.print(table)


def print_recipe(recipe: Recipe) -> None:
    lines = [f"# {recipe.title}", "", "## Ingredients"]
    lines.extend(f"- {item}" for item in decode_lines(recipe.ingredients))
    lines.extend(["", "## Steps"])
    lines.extend(f"{number}. {step}" for number, step in enumerate(decode_lines(recipe.steps), start=1))
    if recipe.image_url:
        lines.extend(["", f"Image: {recipe.image_url}"])
    console.print(Markdown("\n".join(lines)))


def load_image(image_path: Optional[str]) -> Optional[ImageUpload]:
    if not image_path:
        return None
    image_file = Path(image_path)
    if not image_file.exists():
        console.print(f"[red]✗ Error: Image file not found: {image_path}[/red]")
        sys.exit(1)
    logger.info(f"Loading image: {image_file.name}...")
    return ImageUpload(data=image_file.read_bytes(), filename=image_file.name)


def unescape(text: Optional[str]) -> Optional[str]:
    """Allow literal \\n in command line values to separate lines."""
    return text.replace("\\n", "\n") if text is not None else None


async def run_chat(chat: ChatSession) -> None:
    for message in chat.messages:
        console.print(Markdown(message.content))

    while True:
        try:
            text = console.input("[bold magenta]you> [/bold magenta]").strip()
        except EOFError:
            return
        if text.lower() in ("quit", "exit"):
            return

        pending = chat.pending()
        decision = DECISION_WORDS.get(text.lower())
        if pending and decision is not None:
            with console.status("Working..."):
                reply = await chat.resolve(pending[-1].id, decision)
        else:
            try:
                with console.status("Thinking of a recipe..."):
                    reply = await chat.send(text)
            except RecipeValidationError as e:
                console.print(f"[yellow]{e.message}[/yellow]")
                continue

        console.print(Markdown(reply.content))


async def main(args: argparse.Namespace) -> int:
    recipe_book, chat = initialize_recipe_book()

    if args.command == "chat":
        await run_chat(chat)
        return 0

    result = await recipe_book.refresh()
    if not result.ok:
        print_notice(result)
        return 1

    if args.command == "list":
        print_recipes(recipe_book.search(args.search) if args.search else recipe_book.recipes)
        return 0

    if args.command == "show":
        recipe = recipe_book.find(args.id)
        if recipe is None:
            console.print("[red]Recipe not found.[/red]")
            return 1
        print_recipe(recipe)
        return 0

    if args.command == "add":
        draft = RecipeDraft(title=args.title, ingredients=unescape(args.ingredients), steps=unescape(args.steps))
        result = await recipe_book.save_recipe(draft, image=load_image(args.image))
    elif args.command == "edit":
        current = recipe_book.find(args.id)
        if current is None:
            console.print("[red]Recipe not found.[/red]")
            return 1
        draft = RecipeDraft(
            title=args.title if args.title is not None else current.title,
            ingredients=unescape(args.ingredients) if args.ingredients is not None else current.ingredients,
            steps=unescape(args.steps) if args.steps is not None else current.steps,
        )
        result = await recipe_book.save_recipe(draft, image=load_image(args.image), recipe_id=args.id)
    else:
        result = await recipe_book.delete_recipe(args.id)

    print_notice(result)
    if result.recipe is not None and args.command != "delete":
        print_recipe(result.recipe)
    return 0 if result.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recipe Book terminal runner")
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List recipes, newest first")
    list_cmd.add_argument("--search", help="Filter by title or ingredient")

    show_cmd = commands.add_parser("show", help="Show one recipe")
    show_cmd.add_argument("id")

    add_cmd = commands.add_parser("add", help="Create a recipe")
    add_cmd.add_argument("--title", required=True)
    add_cmd.add_argument("--ingredients", default="")
    add_cmd.add_argument("--steps", default="")
    add_cmd.add_argument("--image", help="Path to a JPEG/PNG/WEBP/GIF image")

    edit_cmd = commands.add_parser("edit", help="Edit a recipe")
    edit_cmd.add_argument("id")
    edit_cmd.add_argument("--title")
    edit_cmd.add_argument("--ingredients")
    edit_cmd.add_argument("--steps")
    edit_cmd.add_argument("--image", help="Replace the image")

    delete_cmd = commands.add_parser("delete", help="Delete a recipe and its image")
    delete_cmd.add_argument("id")

    commands.add_parser("chat", help="Ask the assistant for recipe ideas")
    return parser


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main(build_parser().parse_args())))
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        sys.exit(0)
    except ValueError as e:
        # Missing configuration is fatal at startup
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)
