"""Prompt text for accessibility alt text generation."""

ALT_TEXT_CHAR_TARGET = 125


def build_alt_text_prompt(char_target: int = ALT_TEXT_CHAR_TARGET) -> str:
    """Return the fixed instruction sent alongside every image."""
    return (
        "Write alt text for this image for use by screen reader users. "
        f"Keep it concise, ideally under {char_target} characters. "
        "Describe the main subject and what it is doing first. "
        "Prefer accuracy and brevity over completeness, and do not start with "
        "'Image of' or 'Picture of'. Reply with the alt text only."
    )
