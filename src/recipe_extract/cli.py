#!/usr/bin/env python3
"""CLI for recipe-extract: turn recipe photos, text or web pages into recipes.

Argument parsing, the Rich progress and result display, and mapping errors
to exit codes live here. Extraction itself is RecipeExtractionService's job.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from .config import VALID_MODELS, ExtractionConfig
from .exceptions import (
    ConfigurationError,
    IngestError,
    NoRecipeDetectedError,
    NoTextExtractedError,
    RecipeExtractError,
)
from .models import IngredientSection, ParsedRecipe
from .pipeline import RecipeExtractionService
from .services import ServiceFactory

# Create global Rich console for styled output
console = Console()


def setup_logging(log_file: str = "recipe_extract.log", debug: bool = False) -> None:
    """Set up logging configuration for the application.

    Configures logging to output detailed logs to a file only.
    Console output is handled separately via Rich.

    Args:
        log_file: Path to the log file. Defaults to "recipe_extract.log".
        debug: Log at DEBUG level instead of INFO.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.FileHandler(log_file, mode="w")],
    )


def create_progress() -> Progress:
    """Create a Rich progress bar with standard configuration."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Extract structured recipes from photos, text files or web pages",
        prog="recipe-extract",
    )
    parser.add_argument("inputs", nargs="*", help="Recipe page images, in page order")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--text", type=str, help="Read recipe text from this file")
    source.add_argument("--url", type=str, help="Fetch the recipe from this web page")
    parser.add_argument(
        "--refine", action="store_true", help="Refine the on-device parse with one model call"
    )
    parser.add_argument(
        "--model-only",
        action="store_true",
        help="Extract from images with the vision model only (requires an API key)",
    )
    parser.add_argument(
        "--model", type=str, choices=sorted(VALID_MODELS), help="OpenAI model to use"
    )
    parser.add_argument(
        "--target-language", type=str, help="Translate the result for display, e.g. 'de'"
    )
    parser.add_argument(
        "--detect-only",
        action="store_true",
        help="Only report whether the input looks like a recipe",
    )
    parser.add_argument("--json", action="store_true", help="Print the recipe as JSON")
    parser.add_argument("--output-dir", type=str, help="Save the recipe as JSON in this directory")
    parser.add_argument("--config", type=str, help="Path to a TOML configuration file")
    parser.add_argument(
        "--log-file", type=str, default="recipe_extract.log", help="Log file path"
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed command-line arguments.
    """
    return build_parser().parse_args(argv)


def load_config(args: argparse.Namespace) -> ExtractionConfig:
    """Build the configuration with CLI arguments taking priority."""
    config = ExtractionConfig.load(args.config)
    overrides: dict[str, object] = {}
    if args.model:
        overrides["model"] = args.model
    if args.output_dir:
        overrides["output_dir"] = Path(args.output_dir)
    if overrides:
        config.update(**overrides)
    return config


def read_images(paths: Sequence[str]) -> list[bytes]:
    """Read image files, failing early on a missing path."""
    images = []
    for raw_path in paths:
        path = Path(raw_path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {raw_path}")
        images.append(path.read_bytes())
    return images


def display_recipe(recipe: ParsedRecipe) -> None:
    """Display a recipe as Rich panels and a table."""
    console.print()
    details = []
    if recipe.servings:
        details.append(f"Serves {recipe.servings}")
    if recipe.prep_time_minutes:
        details.append(f"Prep {recipe.prep_time_minutes} min")
    if recipe.cook_time_minutes:
        details.append(f"Cook {recipe.cook_time_minutes} min")
    header = f"[bold cyan]{recipe.title or 'Untitled recipe'}[/bold cyan]"
    if details:
        header += f"\n[dim]{' · '.join(details)}[/dim]"
    if recipe.description:
        header += f"\n\n{recipe.description}"
    console.print(Panel.fit(header, title="[bold]Recipe[/bold]", border_style="cyan"))

    if recipe.has_ingredients:
        table = Table(title="Ingredients", show_header=True, header_style="bold cyan")
        table.add_column("Section", style="cyan")
        table.add_column("Amount", justify="right")
        table.add_column("Unit")
        table.add_column("Ingredient", style="green")
        for section in IngredientSection:
            for item in recipe.ingredients(section):
                table.add_row(section.value, item.amount, item.unit, item.name)
        console.print(table)

    if recipe.instructions:
        steps = "\n".join(f"{i}. {step}" for i, step in enumerate(recipe.instructions, 1))
        console.print(Panel(steps, title="[bold]Instructions[/bold]", border_style="blue"))

    if recipe.tips:
        tips = "\n".join(f"- {tip}" for tip in recipe.tips)
        console.print(Panel(tips, title="[bold]Tips[/bold]", border_style="green"))
    console.print()


def display_error(title: str, message: str) -> None:
    """Display an error panel."""
    console.print()
    console.print(
        Panel(
            message,
            title=f"[bold red]{title}[/bold red]",
            border_style="red",
        )
    )
    console.print()


async def _run_pipeline(
    service: RecipeExtractionService, args: argparse.Namespace, images: list[bytes]
) -> ParsedRecipe:
    with create_progress() as progress:
        task = progress.add_task("Extracting...", total=None)

        def on_progress(stage: str, current: int, total: int) -> None:
            progress.update(task, description=f"{stage}...", completed=current - 1, total=total)

        if args.url:
            recipe = await service.extract_from_url(
                args.url, refine=args.refine, progress_callback=on_progress
            )
        elif args.text:
            text = Path(args.text).read_text(encoding="utf-8")
            recipe = await service.extract_from_text(
                text, refine=args.refine, progress_callback=on_progress
            )
        elif args.model_only:
            progress.update(task, description="Vision model...")
            recipe = await service.extract_with_model(images)
        else:
            recipe = await service.extract(
                images, refine=args.refine, progress_callback=on_progress
            )
        progress.update(task, description="Done", completed=1, total=1)
    return recipe


async def _detect(service: RecipeExtractionService, args: argparse.Namespace) -> bool:
    if args.url:
        from .ingest import fetch_page_text

        text = await fetch_page_text(args.url, service.factory.http_client)
    elif args.text:
        text = Path(args.text).read_text(encoding="utf-8")
    else:
        raise ConfigurationError("--detect-only needs --text or --url")
    return await service.detect_recipe(text)


async def main_async(argv: Sequence[str] | None = None) -> int:
    """Main async function.

    Orchestrates the extraction workflow:
    1. Parse arguments and build configuration
    2. Run the pipeline (or the model-only path)
    3. Optionally translate, display and save the recipe

    Returns:
        Process exit code
    """
    args = parse_args(argv)
    if not (args.inputs or args.text or args.url):
        display_error("Error", "Give image paths, --text FILE or --url URL.")
        return 2

    config = load_config(args)
    setup_logging(args.log_file, debug=config.debug_mode)
    start_time = time.time()

    factory = ServiceFactory(config=config)
    service = RecipeExtractionService(factory)
    try:
        if args.detect_only:
            is_recipe = await _detect(service, args)
            verdict = "[green]Recipe[/green]" if is_recipe else "[yellow]Not a recipe[/yellow]"
            console.print(verdict)
            return 0 if is_recipe else 1

        images = read_images(args.inputs) if not (args.text or args.url) else []
        recipe = await _run_pipeline(service, args, images)

        if args.target_language:
            recipe = await service.translate_recipe(recipe, args.target_language)

        if args.json:
            console.print_json(json.dumps(recipe.to_payload(), ensure_ascii=False))
        else:
            display_recipe(recipe)

        if args.output_dir:
            path = factory.create_repository().save(recipe, media=images)
            if path is not None:
                console.print(f"[green]✓[/green] Saved recipe: [cyan]{path}[/cyan]")

        elapsed_time = time.time() - start_time
        logging.info(f"Extracted '{recipe.title}' in {elapsed_time:.1f}s")
        return 0
    finally:
        await factory.aclose()


def main() -> None:
    """Entry point for the recipe-extract CLI command.

    Launches the async main function and turns known failures into error
    panels and a non-zero exit code.
    """
    try:
        exit_code = asyncio.run(main_async())
    except KeyboardInterrupt:
        console.print()
        console.print(
            Panel(
                "[yellow]Processing interrupted by user[/yellow]",
                title="[bold yellow]Interrupted[/bold yellow]",
                border_style="yellow",
            )
        )
        console.print()
        raise SystemExit(130) from None
    except FileNotFoundError as e:
        display_error("Error", f"[bold red]{e}[/bold red]\n\n[dim]Check the path and try again.[/dim]")
        raise SystemExit(1) from None
    except NoTextExtractedError as e:
        display_error("No Text", f"No text could be read from the input.\n\n[dim]{e}[/dim]")
        raise SystemExit(3) from None
    except NoRecipeDetectedError as e:
        display_error("No Recipe", f"No recipe was found in the input.\n\n[dim]{e}[/dim]")
        raise SystemExit(4) from None
    except (ConfigurationError, IngestError) as e:
        display_error("Error", str(e))
        raise SystemExit(1) from None
    except RecipeExtractError as e:
        display_error("Extraction Failed", str(e))
        logging.exception("Extraction failed")
        raise SystemExit(1) from None
    except Exception as e:  # Intentional catch-all for CLI entry point
        display_error(
            "Error",
            f"[bold red]An unexpected error occurred:[/bold red]\n\n"
            f"{e!s}\n\n"
            f"[dim]Check the log file for detailed error information.[/dim]",
        )
        logging.exception("Unexpected error during processing")
        raise
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
