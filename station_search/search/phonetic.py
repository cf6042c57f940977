"""
Phonetic (sound-alike) matching

Codes follow the Soundex scheme: the first letter of the word followed by
three consonant-class digits. Only Latin letters are coded.
"""
import re
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from station_search.core.models import (
    MatchSpan,
    Record,
    SearchField,
    SearchResult,
    field_value,
)
from station_search.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

CODE_LENGTH = 4

_NON_ALPHA = re.compile(r'[^A-Za-z]')

# Vowels and h, w, y carry no digit but still break a run of equal digits
_DIGITS = {
    letter: digit
    for letters, digit in (
        ("bfpv", "1"),
        ("cgjkqsxz", "2"),
        ("dt", "3"),
        ("l", "4"),
        ("mn", "5"),
        ("r", "6"),
    )
    for letter in letters
}


def phonetic_code(word: str) -> str:
    """
    Compute the 4-character phonetic code of a word

    Args:
        word: Word to encode; non-alphabetic characters are stripped

    Returns:
        Uppercase code such as ``R163``, or ``""`` if nothing is left to encode
    """
    if not word or not isinstance(word, str):
        return ""

    cleaned = _NON_ALPHA.sub('', word).lower()
    if not cleaned:
        return ""

    first = cleaned[0]
    code = [first]
    previous = _DIGITS.get(first, "")

    for letter in cleaned[1:]:
        digit = _DIGITS.get(letter, "")
        if digit and digit != previous:
            code.append(digit)
        previous = digit

    return "".join(code).ljust(CODE_LENGTH, "0")[:CODE_LENGTH].upper()


def sounds_like(word1: str, word2: str) -> bool:
    """
    Check if two words share a phonetic code

    Args:
        word1: First word
        word2: Second word

    Returns:
        True if both codes are equal and non-empty
    """
    if not word1 or not word2:
        return False

    code1 = phonetic_code(word1)
    return code1 != "" and code1 == phonetic_code(word2)


def find_similar_sounding(target: str, words: Iterable[str]) -> List[str]:
    """Words that sound like ``target``, excluding ``target`` itself"""
    target_code = phonetic_code(target)
    if not target_code:
        return []

    return [
        word for word in words
        if word != target and phonetic_code(word) == target_code
    ]


def group_by_phonetic_code(words: Iterable[str]) -> Dict[str, List[str]]:
    """Group words by phonetic code; uncodable words are left out"""
    groups: Dict[str, List[str]] = {}
    for word in words:
        code = phonetic_code(word)
        if code:
            groups.setdefault(code, []).append(word)
    return groups


def build_phonetic_index(items: Iterable[T], extractor: Callable[[T], Optional[str]]) -> Dict[str, List[T]]:
    """
    Index items by the phonetic codes of the words in one of their values

    Args:
        items: Items to index
        extractor: Returns the text to index for an item (may be None)

    Returns:
        Mapping of code to the items having a word with that code, each item
        listed at most once per code
    """
    index: Dict[str, List[T]] = {}
    for item in items:
        text = extractor(item)
        if not text:
            continue
        for word in text.split():
            code = phonetic_code(word)
            if not code:
                continue
            bucket = index.setdefault(code, [])
            if not any(existing is item for existing in bucket):
                bucket.append(item)
    return index


class PhoneticMatcher:
    """
    Matches records whose field words sound like the query
    """

    def __init__(self, score: float = 0.5, min_word_length: int = 3):
        self.score = score
        self.min_word_length = min_word_length

    def match(
        self,
        records: Sequence[Record],
        query: str,
        fields: Optional[Sequence[SearchField]] = None
    ) -> List[SearchResult]:
        """
        Find records with a field word sharing the query's phonetic code

        Args:
            records: Records to search
            query: Raw query text; the whole trimmed query is encoded once
            fields: Fields whose words are compared (defaults to name, alt_name)

        Returns:
            Matching records in input order, each with the fixed phonetic score
        """
        query_code = phonetic_code((query or "").strip())
        if not query_code:
            return []

        fields = list(fields or (SearchField.NAME, SearchField.ALT_NAME))
        results = []

        for record in records:
            matches = []
            for field in fields:
                value = field_value(record, field)
                if value is None:
                    continue

                if any(
                    len(word) >= self.min_word_length and phonetic_code(word) == query_code
                    for word in value.split()
                ):
                    matches.append(MatchSpan(
                        field=field.value,
                        value=value,
                        start=0,
                        end=len(value) - 1,
                    ))

            if matches:
                results.append(SearchResult(record=record, score=self.score, matches=matches))

        logger.debug(f"Phonetic match for code {query_code}: {len(results)} results")
        return results
