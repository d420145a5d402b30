"""Language detection, tokenization and stemming helpers."""

import re
from typing import List

from nltk.stem import PorterStemmer
from nltk.tokenize import RegexpTokenizer

from govassist.schemas.enums import Language

SINHALA_PATTERN = re.compile(r"[\u0D80-\u0DFF]")
TAMIL_PATTERN = re.compile(r"[\u0B80-\u0BFF]")

_tokenizer = RegexpTokenizer(r"\w+")
_stemmer = PorterStemmer()


def detect_language(text: str) -> Language:
    """Detect the script of ``text``.

    Any Sinhala code point wins, then any Tamil code point, otherwise English.
    """
    if SINHALA_PATTERN.search(text):
        return Language.SI
    if TAMIL_PATTERN.search(text):
        return Language.TA
    return Language.EN


def tokenize(text: str) -> List[str]:
    """Lower-case ``text`` and split it on non-word characters."""
    return _tokenizer.tokenize(text.lower())


def stem_tokens(tokens: List[str]) -> List[str]:
    return [_stemmer.stem(token) for token in tokens]
