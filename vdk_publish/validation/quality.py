"""Heuristic 0-10 quality rubric over length, structure, examples and clarity."""

from __future__ import annotations

import re
from dataclasses import dataclass

from vdk_publish.constants import MAX_QUALITY_SCORE
from vdk_publish.models import FormatKind

_HEADING_RE = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_BULLET_RE = re.compile(r"^\s*[-*+]\s+", re.MULTILINE)
_NUMBERED_RE = re.compile(r"^\s*\d+\.\s+", re.MULTILINE)
_TABLE_RE = re.compile(r"\|.*\|")
_FENCED_BLOCK_RE = re.compile(r"```.*?```", re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`]+`")
_WORD_RE = re.compile(r"\b\w+\b")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


@dataclass(frozen=True)
class StructureAnalysis:
    has_headings: bool
    has_lists: bool
    has_code_blocks: bool = False
    has_tables: bool = False
    line_count: int = 0


@dataclass(frozen=True)
class ClarityAnalysis:
    readability: float
    word_count: int = 0
    sentence_count: int = 0
    avg_words_per_sentence: float = 0.0


@dataclass(frozen=True)
class ContentMetrics:
    length: int
    structure: StructureAnalysis
    example_count: int
    clarity: ClarityAnalysis
    format: FormatKind


def analyze_structure(content: str) -> StructureAnalysis:
    return StructureAnalysis(
        has_headings=_HEADING_RE.search(content) is not None,
        has_lists=(
            _BULLET_RE.search(content) is not None
            or _NUMBERED_RE.search(content) is not None
        ),
        has_code_blocks="```" in content,
        has_tables=_TABLE_RE.search(content) is not None,
        line_count=len(content.split("\n")),
    )


def count_examples(content: str) -> int:
    fenced = _FENCED_BLOCK_RE.findall(content)
    inline = _INLINE_CODE_RE.findall(content)
    return len(fenced) + len(inline) // 3


def assess_clarity(content: str) -> ClarityAnalysis:
    words = _WORD_RE.findall(content.lower())
    sentences = [part for part in _SENTENCE_SPLIT_RE.split(content) if part.strip()]
    avg_words = len(words) / max(len(sentences), 1)
    readability = max(0.0, min(1.0, (20 - avg_words) / 20))
    return ClarityAnalysis(
        readability=readability,
        word_count=len(words),
        sentence_count=len(sentences),
        avg_words_per_sentence=avg_words,
    )


def collect_metrics(content: str, detected_format: FormatKind) -> ContentMetrics:
    return ContentMetrics(
        length=len(content),
        structure=analyze_structure(content),
        example_count=count_examples(content),
        clarity=assess_clarity(content),
        format=detected_format,
    )


class QualityScorer:
    def score(self, metrics: ContentMetrics) -> int:
        return min(
            self.length_points(metrics.length)
            + self.structure_points(metrics.structure)
            + self.example_points(metrics.example_count)
            + self.clarity_points(metrics.clarity.readability)
            + self.format_points(metrics.format),
            MAX_QUALITY_SCORE,
        )

    @staticmethod
    def length_points(length: int) -> int:
        return int(length > 200) + int(length > 1000)

    @staticmethod
    def structure_points(structure: StructureAnalysis) -> int:
        return int(structure.has_headings) + int(structure.has_lists)

    @staticmethod
    def example_points(example_count: int) -> int:
        return int(example_count > 0) + int(example_count > 2) + int(example_count > 5)

    @staticmethod
    def clarity_points(readability: float) -> int:
        return int(readability > 0.5) + int(readability > 0.8)

    @staticmethod
    def format_points(detected_format: FormatKind) -> int:
        return int(detected_format == FormatKind.VDK_BLUEPRINT)

    def score_content(self, content: str, detected_format: FormatKind) -> int:
        return self.score(collect_metrics(content, detected_format))
