"""
explanation_builder.py -- Templated explanations and LLM prompt assembly.

Template explanations name the detected emotion and the chosen verse. Their
length follows the user's response_length preference.

The LLM prompt only ever asks for a warmer rewording of a match that has
already been made. The model never chooses verses or infers emotions.
"""

import logging

from engine.models import EmotionAnalysis, EmotionCategory, ResponseLength, VerseMatchResponse
from engine.verse_index import get_category_info

logger = logging.getLogger(__name__)

FALLBACK_REASON: str = "fallback: no emotion keywords detected"


def _quote_keywords(keywords: list[str]) -> str:
    quoted = [f'"{kw}"' for kw in keywords]
    if len(quoted) <= 1:
        return "".join(quoted)
    return ", ".join(quoted[:-1]) + " and " + quoted[-1]


def build_match_explanation(
    category: EmotionCategory,
    primary_verse: str,
    keywords: list[str],
    length: ResponseLength = ResponseLength.MEDIUM,
    emotion: EmotionCategory | None = None,
) -> str:
    """Explain a category match in one to three sentences.

    `emotion` is the detected emotion when it differs from the table
    category that supplied the verses (e.g. worry served by anxiety).
    """
    detected = emotion or category
    info = get_category_info(detected)
    label = info["label"] if info else detected.value.capitalize()

    if length == ResponseLength.SHORT:
        return f"{label}: {primary_verse}."

    text = (
        f"It sounds like you may be feeling {detected.value}. "
        f"{primary_verse} was chosen to speak to that."
    )
    if length == ResponseLength.LONG and keywords:
        text += f" It was suggested because you mentioned {_quote_keywords(keywords)}."
    return text


def build_fallback_explanation(
    primary_verse: str,
    length: ResponseLength = ResponseLength.MEDIUM,
) -> str:
    """Explain a verse drawn from the fallback list."""
    if length == ResponseLength.SHORT:
        return f"A verse of comfort: {primary_verse}."
    text = (
        "No specific emotion came through in what you shared, "
        f"so here is a verse of general comfort: {primary_verse}."
    )
    if length == ResponseLength.LONG:
        text += " Tell me a little more about how you feel and I can find something closer."
    return text


def build_matching_reasons(analysis: EmotionAnalysis, category: EmotionCategory | None) -> list[str]:
    """List the keywords that drove the match, or the fallback reason."""
    if category is None:
        return [FALLBACK_REASON]
    if not analysis.keywords:
        detected = analysis.primary_emotion or category
        return [f"detected emotion: {detected.value}"]
    return [f'keyword "{kw}" indicates {category.value}' for kw in analysis.keywords]


def build_enrichment_messages(
    user_text: str,
    response: VerseMatchResponse,
) -> list[dict[str, str]]:
    """
    Assemble chat messages asking an LLM to reword an existing explanation.

    Returns a list of message dicts with 'role' and 'content' keys:
    - System message: the voice and the constraints
    - User message: what the user said and what was already chosen
    """
    system_content = chr(10).join([
        "You are Scripture Pal, a gentle companion who offers Bible verses.",
        "",
        "Rules:",
        "1. Do not choose a different verse. The verses below are final.",
        "2. Do not quote verse text; refer to verses only by the reference given.",
        "3. Speak warmly and briefly, in two or three sentences.",
        "4. Do not diagnose or label the user beyond the emotion named below.",
    ])

    lines = [
        f'The user said: "{user_text}"',
        "",
        f"Detected emotion: {response.category.value if response.category else 'none'}",
        f"Primary verse: {response.primary_verse}",
    ]
    if response.alternative_verses:
        lines.append(f"Alternative verses: {', '.join(response.alternative_verses)}")
    if response.explanation:
        lines.append(f"Current explanation: {response.explanation}")
    lines.append("")
    lines.append("Write a short, kind explanation of why this verse was offered.")

    logger.info(
        "Assembled enrichment prompt: category='%s', verse='%s'",
        response.category.value if response.category else None,
        response.primary_verse,
    )

    return [
        {"role": "system", "content": system_content},
        {"role": "user", "content": chr(10).join(lines)},
    ]
