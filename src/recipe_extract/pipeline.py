"""Staged extraction from photographed or scraped recipe text.

Stages run in order over one PipelineContext: text recognition, OCR
correction, translation to English, recipe classification, the on-device
field extraction, optional model refinement and the merge of the
two parses. Everything before refinement works offline. A failed or slow
refinement is recorded on the context and the on-device parse is kept.

Example:
    >>> from recipe_extract.pipeline import RecipeExtractionService
    >>> service = RecipeExtractionService(ServiceFactory(config))
    >>> recipe = await service.extract([page_one, page_two], refine=True)
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import (
    ConfigurationError,
    NoRecipeDetectedError,
    NoTextExtractedError,
    RecipeExtractError,
    RemoteModelError,
    RemoteRefinementError,
)
from .ingest import fetch_page_text
from .ocr import recognize_all
from .sequencing import cap_instructions

if TYPE_CHECKING:
    from .config import ExtractionConfig
    from .models import LanguageTag, ParsedRecipe
    from .services.factory import ServiceFactory

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """Shared state passed through pipeline stages.

    Attributes:
        config: Extraction configuration
        images: Encoded source images (empty for text input)
        source_text: Text input used when there are no images
        from_ocr: Whether the text came from OCR and needs correction
        refine: Whether to request one remote refinement

        raw_text: Recognized or given text (populated by RecognitionStage)
        corrected_text: Text after OCR correction (populated by CorrectionStage)
        language: Detected language tag (populated by TranslationStage)
        english_text: Text used for extraction (populated by TranslationStage)
        is_recipe: Classifier verdict, advisory (populated by ClassificationStage)
        baseline: On-device parse (populated by BaselineExtractionStage)
        refined: Remote parse (populated by RefinementStage)
        recipe: Final merged recipe (populated by MergeStage)
        errors: Non-fatal errors recorded along the way

    Example:
        >>> context = PipelineContext(config=ExtractionConfig(), images=[photo])
    """

    # Required inputs
    config: ExtractionConfig
    images: list[bytes] = field(default_factory=list)
    source_text: str = ""
    from_ocr: bool = False
    refine: bool = False

    # Populated by stages
    raw_text: str = ""
    corrected_text: str = ""
    language: LanguageTag | None = None
    english_text: str = ""
    is_recipe: bool | None = None
    baseline: ParsedRecipe | None = None
    refined: ParsedRecipe | None = None
    recipe: ParsedRecipe | None = None
    errors: list[RecipeExtractError] = field(default_factory=list)

    # Progress tracking
    progress_callback: Callable[[str, int, int], None] | None = None

    def report_progress(self, stage: str, current: int, total: int) -> None:
        """Report progress to callback if set.

        Args:
            stage: Name of the current stage
            current: Current step number
            total: Total number of steps
        """
        if self.progress_callback:
            self.progress_callback(stage, current, total)


class PipelineStage(ABC):
    """Abstract base class for pipeline stages.

    Each stage performs a specific transformation on the pipeline context.
    Stages are stateless: all state lives in the context.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this stage."""
        ...

    @abstractmethod
    async def execute(self, ctx: PipelineContext, factory: ServiceFactory) -> None:
        """Execute this pipeline stage.

        Args:
            ctx: Pipeline context with shared state
            factory: Service factory for creating dependencies
        """
        ...


class RecognitionStage(PipelineStage):
    """Stage 1: Recognize text in the source images.

    Images are recognized concurrently; a failed image is logged and skipped.

    Populates:
        - ctx.raw_text: Recognized text, pages separated by a blank line

    Raises:
        NoTextExtractedError: If no text is available at all
    """

    @property
    def name(self) -> str:
        """Stage name."""
        return "Recognition"

    async def execute(self, ctx: PipelineContext, factory: ServiceFactory) -> None:
        """Recognize text or pass the given text through."""
        if not ctx.images:
            if not ctx.source_text.strip():
                raise NoTextExtractedError("No text given")
            ctx.raw_text = ctx.source_text
            return

        logger.info(f"Recognizing text in {len(ctx.images)} image(s)")
        texts = await recognize_all(
            factory.create_recognizer(),
            ctx.images,
            max_concurrent=ctx.config.max_concurrent_ocr,
        )
        ctx.raw_text = "\n\n".join(texts)
        ctx.from_ocr = True


class CorrectionStage(PipelineStage):
    """Stage 2: Repair OCR errors.

    Spell repair uses an English word list, so it only runs on text that is
    English or looks English; the other correction steps always run.

    Populates:
        - ctx.corrected_text: Corrected text (the raw text when not from OCR)
    """

    @property
    def name(self) -> str:
        """Stage name."""
        return "Correction"

    async def execute(self, ctx: PipelineContext, factory: ServiceFactory) -> None:
        """Correct OCR text."""
        if not ctx.from_ocr:
            ctx.corrected_text = ctx.raw_text
            return

        identifier = factory.create_language_identifier()
        spell_check = identifier.is_english(ctx.raw_text)
        if not spell_check:
            logger.info("Text is not English, skipping spell repair")
        ctx.corrected_text = factory.create_corrector().correct(
            ctx.raw_text, spell_check=spell_check
        )


class TranslationStage(PipelineStage):
    """Stage 3: Translate the text to English.

    Never fails: without any working translator the text passes through.

    Populates:
        - ctx.language: Detected language tag, or None
        - ctx.english_text: English text for the extractors
    """

    @property
    def name(self) -> str:
        """Stage name."""
        return "Translation"

    async def execute(self, ctx: PipelineContext, factory: ServiceFactory) -> None:
        """Detect the language and translate."""
        identifier = factory.create_language_identifier()
        ctx.language = identifier.detect(ctx.corrected_text)
        logger.info(f"Detected language: {ctx.language or 'unknown'}")

        translator = factory.create_translator(identifier)
        ctx.english_text = await translator.translate_detected(ctx.corrected_text, ctx.language)


class ClassificationStage(PipelineStage):
    """Stage 4: Score the text as recipe content.

    The verdict is advisory: extraction continues either way.

    Populates:
        - ctx.is_recipe: Classifier verdict
    """

    @property
    def name(self) -> str:
        """Stage name."""
        return "Classification"

    async def execute(self, ctx: PipelineContext, factory: ServiceFactory) -> None:
        """Classify the English text."""
        ctx.is_recipe = factory.create_classifier().is_recipe(ctx.english_text)
        if not ctx.is_recipe:
            logger.warning("Text does not look like a recipe, extracting anyway")


class BaselineExtractionStage(PipelineStage):
    """Stage 5: Rule-based extraction on-device.

    Populates:
        - ctx.baseline: Parsed recipe, or None when nothing was found and a
          refinement may still find it

    Raises:
        NoRecipeDetectedError: If nothing was found and no refinement follows
    """

    @property
    def name(self) -> str:
        """Stage name."""
        return "Baseline"

    async def execute(self, ctx: PipelineContext, factory: ServiceFactory) -> None:
        """Extract the baseline recipe."""
        try:
            ctx.baseline = factory.create_extractor().extract(ctx.english_text)
        except NoRecipeDetectedError:
            if not ctx.refine:
                raise
            logger.warning("Baseline found no recipe, relying on refinement")
            ctx.baseline = None


class RefinementStage(PipelineStage):
    """Stage 6: One optional remote refinement.

    Any remote failure or timeout is recorded in ``ctx.errors`` as a
    RemoteRefinementError and the baseline stands.

    Populates:
        - ctx.refined: Remote parse, or None
    """

    @property
    def name(self) -> str:
        """Stage name."""
        return "Refinement"

    async def execute(self, ctx: PipelineContext, factory: ServiceFactory) -> None:
        """Ask the remote model once."""
        if not ctx.refine:
            return

        refiner = factory.create_remote_model()
        if refiner is None:
            logger.warning("Refinement requested but no API key is configured")
            ctx.errors.append(RemoteRefinementError("Refinement unavailable: no API key"))
            return

        timeout = ctx.config.refinement_timeout
        try:
            ctx.refined = await asyncio.wait_for(
                refiner.parse_recipe_from_text(ctx.english_text), timeout=timeout
            )
        except TimeoutError:
            logger.warning(f"Refinement timed out after {timeout}s, keeping baseline")
            ctx.errors.append(RemoteRefinementError("Refinement timed out", timeout=timeout))
        except (RemoteModelError, NoRecipeDetectedError) as e:
            logger.warning(f"Refinement failed, keeping baseline: {e}")
            ctx.errors.append(
                RemoteRefinementError("Refinement failed", error=e.message, kind=type(e).__name__)
            )


class MergeStage(PipelineStage):
    """Stage 7: Combine baseline and refinement.

    Populates:
        - ctx.recipe: Final recipe

    Raises:
        NoRecipeDetectedError: If neither tier produced a recipe
    """

    @property
    def name(self) -> str:
        """Stage name."""
        return "Merge"

    async def execute(self, ctx: PipelineContext, factory: ServiceFactory) -> None:
        """Merge the two parses."""
        if ctx.baseline is not None and ctx.refined is not None:
            recipe = merge_recipes(ctx.baseline, ctx.refined)
        elif ctx.baseline is not None:
            recipe = ctx.baseline
        elif ctx.refined is not None:
            recipe = ctx.refined
        else:
            raise NoRecipeDetectedError(
                "No recipe found", characters=len(ctx.english_text), errors=len(ctx.errors)
            )

        max_steps = ctx.config.max_instructions
        if len(recipe.instructions) > max_steps:
            recipe = recipe.model_copy(
                update={"instructions": cap_instructions(recipe.instructions, max_steps)}
            )
        ctx.recipe = recipe


def merge_recipes(baseline: ParsedRecipe, refined: ParsedRecipe) -> ParsedRecipe:
    """Combine an on-device parse with a remote refinement, field by field.

    The refined value wins when it is non-empty (text and lists) or non-zero
    (numbers). Ingredients move as one field: the refined sections replace
    the baseline sections only when the refinement found any ingredient, so
    no ingredient ends up in two sections.

    Example:
        >>> merged = merge_recipes(
        ...     ParsedRecipe(title="X", servings=4), ParsedRecipe(title="Y")
        ... )
        >>> (merged.title, merged.servings)
        ('Y', 4)
    """

    def text(base: str, better: str) -> str:
        return better if better.strip() else base

    def number(base: int, better: int) -> int:
        return better if better > 0 else base

    def items(base: list[str], better: list[str]) -> list[str]:
        return list(better) if better else list(base)

    sections = (
        refined.ingredients_by_section if refined.has_ingredients else baseline.ingredients_by_section
    )
    return baseline.model_copy(
        update={
            "title": text(baseline.title, refined.title),
            "description": text(baseline.description, refined.description),
            "servings": number(baseline.servings, refined.servings),
            "prep_time_minutes": number(baseline.prep_time_minutes, refined.prep_time_minutes),
            "cook_time_minutes": number(baseline.cook_time_minutes, refined.cook_time_minutes),
            "ingredients_by_section": {
                section: list(section_items) for section, section_items in sections.items()
            },
            "instructions": items(baseline.instructions, refined.instructions),
            "tips": items(baseline.tips, refined.tips),
        }
    )


class ExtractionPipeline:
    """Orchestrates recipe extraction through a series of stages.

    Attributes:
        stages: Ordered list of pipeline stages to execute

    Example:
        >>> pipeline = ExtractionPipeline([TranslationStage(), BaselineExtractionStage()])
        >>> await pipeline.run(context, factory)
    """

    def __init__(self, stages: list[PipelineStage]) -> None:
        """Initialize the pipeline with stages.

        Args:
            stages: Ordered list of stages to execute
        """
        self.stages = stages

    async def run(self, ctx: PipelineContext, factory: ServiceFactory) -> None:
        """Execute all pipeline stages in order.

        Args:
            ctx: Pipeline context with inputs and shared state
            factory: Service factory for creating dependencies

        Raises:
            NoTextExtractedError: If no text could be recognized
            NoRecipeDetectedError: If no recipe could be extracted
        """
        total = len(self.stages)
        for index, stage in enumerate(self.stages, start=1):
            logger.info(f"Starting stage: {stage.name}")
            ctx.report_progress(stage.name, index, total)
            await stage.execute(ctx, factory)
            logger.info(f"Completed stage: {stage.name}")


def create_default_pipeline() -> ExtractionPipeline:
    """Create the default extraction pipeline.

    Returns:
        Pipeline with all standard stages:
        1. RecognitionStage - OCR (or given text)
        2. CorrectionStage - OCR error repair
        3. TranslationStage - language detection and translation
        4. ClassificationStage - advisory recipe check
        5. BaselineExtractionStage - on-device field extraction
        6. RefinementStage - optional remote refinement
        7. MergeStage - field-by-field merge
    """
    return ExtractionPipeline(
        [
            RecognitionStage(),
            CorrectionStage(),
            TranslationStage(),
            ClassificationStage(),
            BaselineExtractionStage(),
            RefinementStage(),
            MergeStage(),
        ]
    )


class RecipeExtractionService:
    """High-level entry points for recipe extraction.

    Attributes:
        factory: Service factory providing every collaborator
        pipeline: Pipeline run for each extraction

    Example:
        >>> service = RecipeExtractionService(ServiceFactory(config))
        >>> recipe = await service.extract_from_url("https://example.com/ramen")
    """

    def __init__(self, factory: ServiceFactory, pipeline: ExtractionPipeline | None = None) -> None:
        self.factory = factory
        self.pipeline = pipeline or create_default_pipeline()

    async def _run(self, ctx: PipelineContext) -> ParsedRecipe:
        await self.pipeline.run(ctx, self.factory)
        if ctx.recipe is None:
            raise NoRecipeDetectedError("Pipeline produced no recipe")
        for error in ctx.errors:
            logger.info(f"Degraded extraction: {error}")
        return ctx.recipe

    async def extract(
        self,
        images: Sequence[bytes],
        refine: bool = False,
        progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> ParsedRecipe:
        """Extract a recipe from photographed pages.

        Args:
            images: Encoded page images, in order
            refine: Request one remote refinement of the on-device parse
            progress_callback: Called with (stage, current, total)

        Raises:
            NoTextExtractedError: If no image yields text
            NoRecipeDetectedError: If no recipe could be extracted
        """
        if not images:
            raise NoTextExtractedError("No images given")
        ctx = PipelineContext(
            config=self.factory.config,
            images=list(images),
            refine=refine,
            progress_callback=progress_callback,
        )
        return await self._run(ctx)

    async def extract_from_text(
        self,
        text: str,
        refine: bool = False,
        from_ocr: bool = False,
        progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> ParsedRecipe:
        """Extract a recipe from text.

        Args:
            text: Recipe text in any language
            refine: Request one remote refinement of the on-device parse
            from_ocr: Run OCR correction on the text first
            progress_callback: Called with (stage, current, total)

        Raises:
            NoTextExtractedError: If the text is blank
            NoRecipeDetectedError: If no recipe could be extracted
        """
        ctx = PipelineContext(
            config=self.factory.config,
            source_text=text,
            from_ocr=from_ocr,
            refine=refine,
            progress_callback=progress_callback,
        )
        return await self._run(ctx)

    async def extract_from_url(
        self,
        url: str,
        refine: bool = False,
        progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> ParsedRecipe:
        """Extract a recipe from a web page.

        Raises:
            IngestError: If the page cannot be fetched
            NoRecipeDetectedError: If no recipe could be extracted
        """
        text = await fetch_page_text(url, self.factory.http_client)
        return await self.extract_from_text(
            text, refine=refine, progress_callback=progress_callback
        )

    async def extract_with_model(self, images: Sequence[bytes]) -> ParsedRecipe:
        """Extract a recipe from images with the remote vision model only.

        Model errors are not caught here: this path has no baseline to fall
        back on.

        Raises:
            ConfigurationError: If no API key is configured
            RemoteModelError: If the call fails
            MalformedModelResponseError: If the reply is not a recipe object
            NoRecipeDetectedError: If the model found nothing
        """
        self.factory.config.require_api_key()
        model = self.factory.create_remote_model()
        if model is None:
            raise ConfigurationError("Remote model is unavailable")
        recipe = await model.extract_from_images(images)
        max_steps = self.factory.config.max_instructions
        if len(recipe.instructions) > max_steps:
            recipe = recipe.model_copy(
                update={"instructions": cap_instructions(recipe.instructions, max_steps)}
            )
        return recipe

    async def detect_recipe(self, text: str) -> bool:
        """Whether a text holds a recipe, in any language."""
        identifier = self.factory.create_language_identifier()
        english = await self.factory.create_translator(identifier).translate_to_english(text)
        return self.factory.create_classifier().is_recipe(english)

    async def translate_recipe(self, recipe: ParsedRecipe, target: LanguageTag) -> ParsedRecipe:
        """Translate a finished recipe for display in another language."""
        return await self.factory.create_translator().translate_recipe(recipe, target)
