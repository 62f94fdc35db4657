"""Rule-based classification of chunk text.

Everything here is pattern matching over the text itself: no model is
involved, so the same input always yields the same profile.
"""
from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable

from domain.entities import ContentProfile, ContentType, Difficulty

_FLAGS = re.IGNORECASE | re.ASCII

_WORD_RE = re.compile(r"\b[a-z]{3,}\b", re.ASCII)
MIN_KEYWORD_FREQUENCY = 3
MIN_KEYWORD_LENGTH = 5
MAX_KEYWORDS = 10

_PROGRAMMING_TERMS_RE = re.compile(
    r"\b(?:async|await|promise|function|class|interface|component|service|module|import|export"
    r"|const|let|var|if|else|for|while|try|catch|finally|return|this|super|extends|implements"
    r"|public|private|protected|static|readonly)\b",
    _FLAGS,
)
_LANGUAGES_RE = re.compile(
    r"\b(?:javascript|typescript|java|python|csharp|c#|html|css|sql|json|xml|yaml|markdown|bash"
    r"|shell|powershell|docker|kubernetes|react|angular|vue|node|express|nestjs|spring|dotnet"
    r"|entity framework|mongodb|postgresql|mysql|redis|aws|azure|gcp)\b",
    _FLAGS,
)
_FRAMEWORKS_RE = re.compile(
    r"\b(?:primeng|bootstrap|tailwind|rxjs|observables|http|router|forms|animations|testing|jest"
    r"|karma|cypress|webpack|vite|npm|yarn|git|github|docker|api|rest|graphql|oauth|jwt|cors"
    r"|middleware|interceptor|guard|resolver|pipe|directive|decorator)\b",
    _FLAGS,
)

_CONTENT_TYPE_RULES: tuple[tuple[ContentType, tuple[str, ...]], ...] = (
    (ContentType.CODE_EXAMPLE, ("`", "example:", "code:")),
    (ContentType.TUTORIAL, ("step", "tutorial", "guide", "how to")),
    (ContentType.REFERENCE, ("api", "reference", "method", "parameter")),
    (ContentType.CONCEPT, ("concept", "overview", "introduction", "what is")),
)

_BEGINNER_MARKERS = ("basic", "simple", "introduction", "getting started")
_INTERMEDIATE_MARKERS = ("advanced", "complex", "architecture", "pattern")
_ADVANCED_MARKERS = ("optimization", "performance", "scalability", "enterprise")
_COMPLEXITY_TERMS_RE = re.compile(
    r"\b(?:async|await|observable|promise|interface|generic|decorator|injection|middleware"
    r"|interceptor|resolver|guard|pipe|directive)\b",
    _FLAGS,
)

# Checked in order; the first matching signature names the language.
_LANGUAGE_SIGNATURES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("javascript", re.compile(r"\b(?:function|const|let|var|=>|console\.log|document\.)\b", _FLAGS)),
    ("typescript", re.compile(r"\b(?:interface|type|implements|extends|public|private|protected)\b", _FLAGS)),
    ("csharp", re.compile(r"\b(?:using|namespace|class|public|private|static|void|string|int)\b", _FLAGS)),
    ("html", re.compile(r"</?[a-z][\s\S]*>", _FLAGS)),
    ("css", re.compile(r"\b(?:color|margin|padding|display|position|background)\b", _FLAGS)),
    ("json", re.compile(r"^\s*\{[\s\S]*\}\s*$|^\s*\[[\s\S]*\]\s*$", re.MULTILINE)),
    ("bash", re.compile(r"\b(?:npm|node|git|docker|ls|cd|mkdir|rm)\b", _FLAGS)),
)

_CONCEPT_SIGNATURES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("async-programming", re.compile(r"\b(?:async|await|promise|asynchronous|concurrent)\b", _FLAGS)),
    ("object-oriented", re.compile(r"\b(?:class|object|inheritance|polymorphism|encapsulation)\b", _FLAGS)),
    ("functional-programming", re.compile(r"\b(?:function|pure|immutable|map|filter|reduce)\b", _FLAGS)),
    ("web-development", re.compile(r"\b(?:html|css|dom|browser|frontend|backend)\b", _FLAGS)),
    ("api-development", re.compile(r"\b(?:api|rest|graphql|endpoint|http|json)\b", _FLAGS)),
    ("testing", re.compile(r"\b(?:test|testing|unit|integration|mock|assert)\b", _FLAGS)),
    ("database", re.compile(r"\b(?:sql|database|query|table|entity|migration)\b", _FLAGS)),
    ("security", re.compile(r"\b(?:authentication|authorization|jwt|oauth|security|encryption)\b", _FLAGS)),
    ("performance", re.compile(r"\b(?:performance|optimization|caching|memory|speed)\b", _FLAGS)),
)


def extract_keywords(text: str, extra_terms: Iterable[str] = ()) -> list[str]:
    """Return declared terms followed by the most frequent significant words.

    A word counts when it is at least five letters long and occurs more
    than twice; at most ten are kept, most frequent first.
    """

    keywords: dict[str, None] = {}
    for term in extra_terms:
        cleaned = term.strip().lower()
        if cleaned:
            keywords.setdefault(cleaned, None)

    frequencies = Counter(_WORD_RE.findall(text.lower()))
    frequent = [
        (word, count)
        for word, count in frequencies.items()
        if count >= MIN_KEYWORD_FREQUENCY and len(word) >= MIN_KEYWORD_LENGTH
    ]
    frequent.sort(key=lambda item: item[1], reverse=True)
    for word, _count in frequent[:MAX_KEYWORDS]:
        keywords.setdefault(word, None)
    return list(keywords)


def extract_semantic_keywords(text: str) -> list[str]:
    keywords = dict.fromkeys(extract_keywords(text))
    for pattern in (_PROGRAMMING_TERMS_RE, _LANGUAGES_RE, _FRAMEWORKS_RE):
        for match in pattern.findall(text):
            keywords.setdefault(match.lower().replace("#", "sharp"), None)
    return list(keywords)


def classify_content_type(text: str) -> ContentType:
    lowered = text.lower()
    for content_type, markers in _CONTENT_TYPE_RULES:
        if any(marker in lowered for marker in markers):
            return content_type
    return ContentType.GENERAL


def assess_difficulty(text: str) -> Difficulty:
    lowered = text.lower()
    score = 0
    if any(marker in lowered for marker in _BEGINNER_MARKERS):
        score -= 1
    if any(marker in lowered for marker in _INTERMEDIATE_MARKERS):
        score += 1
    if any(marker in lowered for marker in _ADVANCED_MARKERS):
        score += 2
    score += math.floor(len(_COMPLEXITY_TERMS_RE.findall(text)) / 3)

    if score <= -1:
        return Difficulty.BEGINNER
    if score >= 2:
        return Difficulty.ADVANCED
    return Difficulty.INTERMEDIATE


def detect_language(text: str) -> str | None:
    for language, signature in _LANGUAGE_SIGNATURES:
        if signature.search(text):
            return language
    return None


def has_code(text: str) -> bool:
    # A single backtick covers both inline code and fences.
    return "`" in text


def extract_concepts(text: str) -> list[str]:
    return [concept for concept, signature in _CONCEPT_SIGNATURES if signature.search(text)]


class ContentClassifier:
    """Bundle the individual rules into one ``classify`` call."""

    def classify(self, text: str) -> ContentProfile:
        return ContentProfile(
            keywords=tuple(extract_keywords(text)),
            semantic_keywords=tuple(extract_semantic_keywords(text)),
            content_type=classify_content_type(text),
            difficulty=assess_difficulty(text),
            has_code=has_code(text),
            language=detect_language(text),
            concepts=tuple(extract_concepts(text)),
        )

    def document_keywords(self, text: str, extra_terms: Iterable[str] = ()) -> list[str]:
        return extract_keywords(text, extra_terms)


__all__ = [
    "ContentClassifier",
    "extract_keywords",
    "extract_semantic_keywords",
    "classify_content_type",
    "assess_difficulty",
    "detect_language",
    "has_code",
    "extract_concepts",
]
