"""Full-text search over indexed standards

Case-insensitive substring matching over metadata fields and content,
with a deterministic weighted score and context snippets. Matching runs
on the original text, so reported offsets index into it directly.
"""
import re
from typing import Iterable, List, Optional, Tuple

from domain_models import Metadata, Standard
from value_objects import FilterOptions, SearchMatch, SearchResult

DEFAULT_CONTEXT_LENGTH = 200
DEFAULT_MAX_CONTEXTS = 5


def query_pattern(query: str) -> re.Pattern:
    return re.compile(re.escape(query), re.IGNORECASE)


def find_occurrences(text: str, pattern: re.Pattern) -> List[Tuple[int, int]]:
    """(start, end) spans of every non-overlapping match in text"""
    if not pattern.pattern:
        return []
    return [match.span() for match in pattern.finditer(text)]


class ContextExtractor:
    """Builds fixed-width snippets around a match"""

    ELLIPSIS = "..."

    def __init__(self, context_length: int = DEFAULT_CONTEXT_LENGTH):
        self.context_length = context_length

    def extract(self, text: str, start: int, end: int) -> SearchMatch:
        """Window of context_length characters centred on start

        Clipped to the text bounds; an ellipsis marks each side where the
        window stops short of the text start or end.
        """
        half = self.context_length // 2
        window_start = max(0, start - half)
        window_end = min(len(text), start + half)

        snippet = text[window_start:window_end]
        if window_start > 0:
            snippet = self.ELLIPSIS + snippet
        if window_end < len(text):
            snippet = snippet + self.ELLIPSIS

        return SearchMatch(context=snippet, start_index=start, end_index=end)


class SearchScorer:
    """Weighted occurrence scoring

    A metadata field or tag equal to the query scores EXACT_FIELD_WEIGHT.
    A field containing the query scores PARTIAL_FIELD_WEIGHT for each
    occurrence, and content scores CONTENT_WEIGHT per occurrence.
    """

    EXACT_FIELD_WEIGHT = 10.0
    PARTIAL_FIELD_WEIGHT = 5.0
    CONTENT_WEIGHT = 1.0

    def score_metadata(self, metadata: Metadata, pattern: re.Pattern) -> Tuple[float, int]:
        """Score and occurrence count for the searchable metadata fields"""
        score, count = 0.0, 0
        for value in self._searchable_values(metadata):
            if pattern.fullmatch(value):
                score += self.EXACT_FIELD_WEIGHT
                count += 1
                continue
            occurrences = len(find_occurrences(value, pattern))
            score += occurrences * self.PARTIAL_FIELD_WEIGHT
            count += occurrences
        return score, count

    def score_content(self, occurrences: int) -> float:
        return occurrences * self.CONTENT_WEIGHT

    @staticmethod
    def _searchable_values(metadata: Metadata) -> List[str]:
        return [metadata.type, metadata.tier, metadata.process, metadata.author, *metadata.tags]


class StandardSearcher:
    """Filters, scans, scores and ranks a snapshot of standards"""

    def __init__(self, scorer: SearchScorer = None, extractor: ContextExtractor = None,
                 max_contexts: int = DEFAULT_MAX_CONTEXTS):
        self.scorer = scorer or SearchScorer()
        self.extractor = extractor or ContextExtractor()
        self.max_contexts = max_contexts

    def search(self, standards: Iterable[Standard], query: str,
               filters: Optional[FilterOptions] = None, limit: Optional[int] = None) -> List[SearchResult]:
        """Rank every matching standard, then keep the top ``limit``

        Ordering: score descending, earliest content match first (matches
        found only in metadata sort after any content match), then path.
        """
        filters = filters or FilterOptions()
        if not query:
            return []
        pattern = query_pattern(query)

        results = []
        for standard in standards:
            if not filters.matches(standard.metadata):
                continue
            result = self._score(standard, pattern)
            if result is not None:
                results.append(result)

        results.sort(key=self._rank_key)
        if limit is not None:
            results = results[:max(limit, 0)]
        return results

    def _score(self, standard: Standard, pattern: re.Pattern) -> Optional[SearchResult]:
        metadata_score, metadata_count = self.scorer.score_metadata(standard.metadata, pattern)
        spans = find_occurrences(standard.content, pattern)

        match_count = metadata_count + len(spans)
        if match_count == 0:
            return None

        matches = tuple(
            self.extractor.extract(standard.content, start, end)
            for start, end in spans[:self.max_contexts]
        )
        return SearchResult(
            standard=standard,
            score=metadata_score + self.scorer.score_content(len(spans)),
            match_count=match_count,
            matches=matches,
            first_offset=spans[0][0] if spans else None,
        )

    @staticmethod
    def _rank_key(result: SearchResult):
        first = result.first_offset if result.first_offset is not None else float('inf')
        return (-result.score, first, result.path)
