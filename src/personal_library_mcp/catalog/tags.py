"""Genre tag editing on a draft.

Both operations return a new draft and leave the given one untouched; the
catalog itself is never involved.
"""

from ..models.book import BookDraft


def add_tag(draft: BookDraft, raw_input: str) -> BookDraft:
    """Append the trimmed tag unless it is empty or already present."""
    tag = raw_input.strip()
    if not tag or tag in draft.genres:
        return draft.model_copy()
    return draft.model_copy(update={"genres": [*draft.genres, tag]})


def remove_tag(draft: BookDraft, tag: str) -> BookDraft:
    """Drop the tag if present (exact, case-sensitive match)."""
    if tag not in draft.genres:
        return draft.model_copy()
    return draft.model_copy(update={"genres": [g for g in draft.genres if g != tag]})
