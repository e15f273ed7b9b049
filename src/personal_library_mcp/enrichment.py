"""
AI enrichment through MCP sampling.

The server has no model of its own. It asks the connected client's LLM for
book details, an author biography or a cover image, using the sampling
request of the MCP protocol. A client without the sampling capability simply
gets no enrichment.

Three operations:
1. ``suggest_details`` - title/author/year/description/genres as JSON
2. ``author_bio`` - a short paragraph, or a placeholder when unavailable
3. ``generate_cover`` - an image, returned as a data URL plus a filename
"""

import json
import logging
import re

from fastmcp import Context
from mcp.types import (
    ClientCapabilities,
    ImageContent,
    ModelHint,
    ModelPreferences,
    SamplingCapability,
    SamplingMessage,
    TextContent,
)
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import EnrichmentError
from .models.book import normalize_genres

logger = logging.getLogger(__name__)

BIO_PLACEHOLDER = (
    "No biography available: the connected client cannot generate one right now."
)

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w\- ]+")


class BookSuggestion(BaseModel):
    """Details the model proposes for a draft. Every field is optional."""

    title: str | None = None
    author: str | None = None
    year: int | None = Field(None, ge=0, le=9999)
    description: str | None = None
    genres: list[str] = Field(default_factory=list)

    @field_validator("genres", mode="before")
    @classmethod
    def clean_genres(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return normalize_genres(v)

    def as_draft_fields(self) -> dict:
        """Non-empty fields, ready for ``BookEditor.apply_suggestion``."""
        fields = self.model_dump(exclude_none=True)
        if not fields.get("genres"):
            fields.pop("genres", None)
        return fields


class GeneratedCover(BaseModel):
    data_url: str
    filename: str


# === Sampling plumbing ===


def sampling_supported(context: Context) -> bool:
    session = context.request_context.session
    return session.check_client_capability(ClientCapabilities(sampling=SamplingCapability()))


async def request_ai_generation(
    context: Context,
    prompt: str,
    system_prompt: str | None = None,
    max_tokens: int = 500,
    temperature: float = 0.7,
    intelligence_priority: float = 0.7,
    speed_priority: float = 0.5,
) -> TextContent | ImageContent:
    """
    Send one sampling request to the client and return its content.

    Args:
        context: The FastMCP request context (provides access to session)
        prompt: The user prompt to send to the LLM
        system_prompt: Optional system prompt to guide the LLM's behavior
        max_tokens: Maximum tokens to generate
        temperature: Controls randomness (0.0-1.0)
        intelligence_priority: How important is model capability (0.0-1.0)
        speed_priority: How important is fast response (0.0-1.0)

    Raises:
        EnrichmentError: If the client cannot sample or the request fails
    """
    if not sampling_supported(context):
        raise EnrichmentError("The connected client does not support AI sampling")

    model_preferences = ModelPreferences(
        hints=[ModelHint(name="claude")],
        intelligencePriority=intelligence_priority,
        speedPriority=speed_priority,
        costPriority=1.0 - (intelligence_priority + speed_priority) / 2,
    )
    messages = [SamplingMessage(role="user", content=TextContent(type="text", text=prompt))]

    logger.debug("Sending sampling request with prompt: %s...", prompt[:100])
    try:
        result = await context.request_context.session.create_message(
            messages=messages,
            max_tokens=max_tokens,
            system_prompt=system_prompt,
            temperature=temperature,
            model_preferences=model_preferences,
        )
    except Exception as e:
        logger.exception("Sampling request failed")
        raise EnrichmentError(f"AI request failed: {e}") from e

    if result is None or result.content is None:
        raise EnrichmentError("AI request returned no content")
    return result.content


async def _request_text(context: Context, prompt: str, **kwargs) -> str:
    content = await request_ai_generation(context, prompt, **kwargs)
    if content.type != "text" or not content.text.strip():
        raise EnrichmentError("AI request returned no text")
    return content.text.strip()


# === Operations ===


async def suggest_details(context: Context, title: str, author: str | None = None) -> BookSuggestion:
    """Ask for the details of a book identified by title (and author).

    Raises:
        EnrichmentError: If sampling is unavailable or the reply is not valid JSON
    """
    if not title.strip():
        raise EnrichmentError("A title is needed to look up book details")

    prompt = f"""Find the details of this book:

Title: {title}
{"Author: " + author if author else ""}

Reply with a single JSON object with exactly these keys:
"title" (string), "author" (string), "year" (integer, first publication),
"description" (string, 2-3 sentences, no spoilers), "genres" (array of short strings)."""

    system_prompt = """You are a careful librarian filling in a catalog record.
Answer with JSON only: no prose, no markdown."""

    text = await _request_text(
        context,
        prompt,
        system_prompt=system_prompt,
        max_tokens=600,
        temperature=0.2,
        intelligence_priority=0.8,
        speed_priority=0.4,
    )
    try:
        payload = json.loads(_FENCE_PATTERN.sub("", text))
        if not isinstance(payload, dict):
            raise EnrichmentError("AI reply was not a JSON object")
        suggestion = BookSuggestion.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Unusable book details from AI: %s", e)
        raise EnrichmentError("AI reply could not be read as book details") from e

    logger.info("Received AI details for %r", title)
    return suggestion


async def author_bio(context: Context, author: str) -> str:
    """A short biography of ``author``. Never raises; falls back to a placeholder."""
    if not author.strip():
        return BIO_PLACEHOLDER

    prompt = f"Write a short biography (one paragraph, under 120 words) of the author {author}."
    try:
        return await _request_text(
            context,
            prompt,
            system_prompt="You are a librarian writing concise, factual author notes.",
            max_tokens=300,
            temperature=0.5,
            intelligence_priority=0.6,
            speed_priority=0.7,
        )
    except EnrichmentError as e:
        logger.info("Author bio unavailable for %r: %s", author, e)
        return BIO_PLACEHOLDER


async def generate_cover(context: Context, title: str, author: str | None = None) -> GeneratedCover:
    """Ask the client for a cover illustration.

    Raises:
        EnrichmentError: If sampling fails or no image comes back
    """
    prompt = f"""Generate a book cover illustration for:

Title: {title}
{"Author: " + author if author else ""}

Artistic, evocative, portrait orientation, no text on the image."""

    content = await request_ai_generation(
        context,
        prompt,
        max_tokens=1000,
        temperature=0.9,
        intelligence_priority=0.5,
        speed_priority=0.5,
    )
    if not isinstance(content, ImageContent):
        raise EnrichmentError("AI request did not return an image")

    cover = GeneratedCover(
        data_url=f"data:{content.mimeType};base64,{content.data}",
        filename=cover_filename(title),
    )
    logger.info("Generated cover %s", cover.filename)
    return cover


def cover_filename(title: str) -> str:
    """Download name for a generated cover, derived from the title."""
    stem = _UNSAFE_FILENAME_CHARS.sub("", title).strip().replace(" ", "_")
    return f"{stem}_cover.png" if stem else "cover.png"
