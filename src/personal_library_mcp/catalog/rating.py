"""Star rating input contract."""

MAX_STARS = 5


def toggle_rating(current: int, clicked_star: int, max_stars: int = MAX_STARS) -> int:
    """New rating after clicking a star.

    Clicking the star that matches the current rating clears it back to 0
    (unrated); any other star becomes the rating.

    Raises:
        ValueError: If the star is outside 0..max_stars
    """
    if not 0 <= clicked_star <= max_stars:
        raise ValueError(f"Star must be between 0 and {max_stars}, got {clicked_star}")
    if clicked_star == current:
        return 0
    return clicked_star
