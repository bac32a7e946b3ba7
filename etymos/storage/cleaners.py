"""Composable data cleaning transformations.

Pure functions implementing ICleaner protocol.
Each cleaner is single-purpose, testable, and composable.
"""

import re
import unicodedata
from dataclasses import dataclass

from bs4 import BeautifulSoup, Comment

from etymos.rules.languages import (
    CODE_ALIASES,
    LANGUAGE_NAMES,
    is_proto_language,
    normalize_language_code,
)


@dataclass(frozen=True)
class HTMLCleaner:
    """Strip page chrome from scraped HTML, keeping inline markers.

    Underline, italics, emphasis and links survive because the heuristic
    extractor reads them as etymological markers.
    """

    name: str = "html_cleaner"
    version: str = "1.0.0"

    _DROP_TAGS = (
        "script", "style", "noscript", "nav", "header", "footer",
        "form", "iframe", "svg", "button", "aside",
    )
    _KEEP_ATTRS = frozenset({"href"})

    def clean(self, html: str, **params) -> str:
        """Return the body markup without scripts, navigation or attributes."""
        soup = BeautifulSoup(html or "", "lxml")

        for tag in soup.find_all(self._DROP_TAGS):
            tag.decompose()

        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()

        for tag in soup.find_all(True):
            tag.attrs = {k: v for k, v in tag.attrs.items() if k in self._KEEP_ATTRS}

        root = soup.body or soup
        return root.decode_contents().strip()

    def to_text(self, html: str) -> str:
        """Plain prose with whitespace collapsed."""
        soup = BeautifulSoup(html or "", "lxml")
        return re.sub(r"\s+", " ", soup.get_text(" ")).strip()

    def validate(self, html: str) -> bool:
        """Check the markup carries any text at all."""
        return bool(self.to_text(html))


@dataclass(frozen=True)
class TextNormalizer:
    """Normalize text with configurable operations."""

    name: str = "text_normalizer"
    version: str = "1.0.0"

    def clean(
        self,
        text: str,
        lowercase: bool = True,
        remove_punctuation: bool = False,
        normalize_whitespace: bool = True,
        unicode_form: str = "NFC",
        **params
    ) -> str:
        """Apply text normalization pipeline."""
        result = text

        if unicode_form in ('NFC', 'NFD', 'NFKC', 'NFKD'):
            result = unicodedata.normalize(unicode_form, result)

        if lowercase:
            result = result.lower()

        if remove_punctuation:
            result = re.sub(r'[^\w\s*-]', '', result)

        if normalize_whitespace:
            result = re.sub(r'\s+', ' ', result.strip())

        return result

    def validate(self, text: str) -> bool:
        """Check if text is valid."""
        return bool(text and text.strip())


@dataclass(frozen=True)
class FormCleaner:
    """Clean an extracted word form.

    Unwraps wiki links, drops quotes, glosses in parentheses and trailing
    punctuation. A leading ``*`` and a trailing ``-`` (reconstructed roots)
    are kept.
    """

    name: str = "form_cleaner"
    version: str = "1.0.0"

    def clean(self, form: str, **params) -> str:
        """Clean one candidate form."""
        cleaned = unicodedata.normalize('NFC', form or "")

        # [[target|label]] -> target, [[word]] -> word
        cleaned = re.sub(r'\[\[([^\]|]+)(?:\|[^\]]*)?\]\]', r'\1', cleaned)
        cleaned = re.sub(r'\{\{[^}]*\}\}', '', cleaned)
        cleaned = re.sub(r'\([^)]*\)', '', cleaned)
        cleaned = re.sub(r'["“”‘’«»]', '', cleaned)
        cleaned = re.sub(r'\s+', ' ', cleaned).strip()

        cleaned = re.sub(r'^[\s,.;:!?\'\[\]]+', '', cleaned)
        cleaned = re.sub(r'[\s,.;:!?\'\[\]]+$', '', cleaned)

        return cleaned

    def validate(self, form: str) -> bool:
        """Reject empty forms and leftover markup."""
        if not form or not form.strip():
            return False
        return not any(marker in form for marker in ('{{', '}}', '[[', ']]', '<', '>', '|'))


@dataclass(frozen=True)
class LanguageCodeCleaner:
    """Normalize language codes and names to canonical codes."""

    name: str = "language_code_cleaner"
    version: str = "1.0.0"

    def clean(self, code: str, **params) -> str:
        """Normalize language code; ``und`` when nothing matches."""
        return normalize_language_code(code)

    def validate(self, code: str) -> bool:
        """Check if the code is known."""
        if not code:
            return False
        lowered = code.strip().lower()
        return lowered in LANGUAGE_NAMES or lowered in CODE_ALIASES or is_proto_language(lowered)


# ═════════════════════════════════════════════════════════════════════════════
# Root keys
# ═════════════════════════════════════════════════════════════════════════════

_ROOT_TOKEN = re.compile(r"\*([^\s.,;:!?()\[\]{}\"'/*]+)")
_PIE_PREFIX = re.compile(r"^(?:Proto-Indo-European|PIE)\s+")
_QUALIFIER = re.compile(
    r"^(?:Proto-[A-Z][\w-]*|Old [A-Z]\w*|Middle [A-Z]\w*|Ancient [A-Z]\w*|[A-Z]\w*)\s+"
)
_TRAILING = re.compile(r"[\s.,;:!?]+$")


def normalize_root_key(label: str) -> str:
    """Canonical index key for a shared-root label.

    An embedded reconstructed root (``*wed-``) wins and keeps its asterisk.
    Otherwise one leading language qualifier is stripped and the rest is
    lowercased without trailing punctuation. The result is a fixed point:
    normalizing it again returns it unchanged.
    """
    if not label:
        return ""

    token = _ROOT_TOKEN.search(label)
    if token:
        return "*" + token.group(1).lower()

    key = _PIE_PREFIX.sub("", label.strip(), count=1)
    key = _QUALIFIER.sub("", key, count=1)
    key = key.strip().lower()
    return _TRAILING.sub("", key)


@dataclass(frozen=True)
class RootKeyNormalizer:
    """ICleaner wrapper around ``normalize_root_key``."""

    name: str = "root_key_normalizer"
    version: str = "1.0.0"

    def clean(self, label: str, **params) -> str:
        return normalize_root_key(label)

    def validate(self, key: str) -> bool:
        return bool(key) and normalize_root_key(key) == key
