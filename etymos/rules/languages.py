"""Language name/code tables and family membership.

Static data, loaded once at import. Codes follow the ISO 639-1 / Wiktionary
conventions (``ang`` Old English, ``gem-pro`` Proto-Germanic...). Modern
Greek is ``el``; ``gr`` is accepted as an alias.
"""

import re
from typing import Optional


PIE = "ine-pro"
UNDETERMINED = "und"
GENERIC_PROTO = "proto"


# ═════════════════════════════════════════════════════════════════════════════
# Code → display name
# ═════════════════════════════════════════════════════════════════════════════

LANGUAGE_NAMES: dict[str, str] = {
    # Germanic
    "en": "English", "de": "German", "nl": "Dutch", "da": "Danish",
    "sv": "Swedish", "no": "Norwegian", "is": "Icelandic", "fy": "West Frisian",
    "got": "Gothic", "ang": "Old English", "enm": "Middle English",
    "goh": "Old High German", "gmh": "Middle High German", "gml": "Middle Low German",
    "odt": "Old Dutch", "dum": "Middle Dutch", "ofs": "Old Frisian",
    "osx": "Old Saxon", "non": "Old Norse", "nds": "Low German",
    # Romance and Latin
    "es": "Spanish", "fr": "French", "it": "Italian", "pt": "Portuguese",
    "ro": "Romanian", "ca": "Catalan", "gl": "Galician", "la": "Latin",
    "la-vul": "Vulgar Latin", "la-lat": "Late Latin", "la-med": "Medieval Latin",
    "la-ecc": "Ecclesiastical Latin", "fro": "Old French", "frm": "Middle French",
    "xno": "Anglo-Norman", "pro": "Old Occitan", "osp": "Old Spanish",
    "roa-opt": "Old Portuguese", "roa-oit": "Old Italian",
    # Slavic and Baltic
    "ru": "Russian", "pl": "Polish", "cs": "Czech", "sk": "Slovak",
    "bg": "Bulgarian", "hr": "Croatian", "sr": "Serbian", "uk": "Ukrainian",
    "be": "Belarusian", "mk": "Macedonian", "sl": "Slovene", "bs": "Bosnian",
    "cu": "Old Church Slavonic", "orv": "Old East Slavic",
    "lt": "Lithuanian", "lv": "Latvian",
    # Celtic
    "ga": "Irish", "gd": "Scottish Gaelic", "cy": "Welsh", "br": "Breton",
    "kw": "Cornish", "sga": "Old Irish", "mga": "Middle Irish", "owl": "Old Welsh",
    "cel-gau": "Gaulish",
    # Greek
    "el": "Greek", "grc": "Ancient Greek", "gmy": "Mycenaean Greek",
    # Indo-Iranian and others
    "sa": "Sanskrit", "hi": "Hindi", "bn": "Bengali", "fa": "Persian",
    "ku": "Kurdish", "ae": "Avestan", "peo": "Old Persian", "pal": "Middle Persian",
    "hy": "Armenian", "sq": "Albanian", "hit": "Hittite", "txb": "Tocharian B",
    # Non-Indo-European
    "fi": "Finnish", "et": "Estonian", "hu": "Hungarian",
    "ar": "Arabic", "he": "Hebrew", "am": "Amharic", "mt": "Maltese",
    "arc": "Aramaic", "akk": "Akkadian",
    "zh": "Chinese", "bo": "Tibetan", "my": "Burmese",
    "ja": "Japanese", "ko": "Korean",
    "tr": "Turkish", "az": "Azerbaijani", "kk": "Kazakh", "ky": "Kyrgyz", "uz": "Uzbek",
    "ka": "Georgian", "eu": "Basque", "sw": "Swahili",
    # Reconstructed
    "ine-pro": "Proto-Indo-European", "gem-pro": "Proto-Germanic",
    "gmw-pro": "Proto-West-Germanic", "itc-pro": "Proto-Italic",
    "cel-pro": "Proto-Celtic", "sla-pro": "Proto-Slavic", "grk-pro": "Proto-Greek",
    "iir-pro": "Proto-Indo-Iranian", "ine-bsl-pro": "Proto-Balto-Slavic",
    "urj-pro": "Proto-Uralic", "sem-pro": "Proto-Semitic",
    GENERIC_PROTO: "Proto-language",
    UNDETERMINED: "Undetermined",
}


# ═════════════════════════════════════════════════════════════════════════════
# Code aliases seen in wiki templates
# ═════════════════════════════════════════════════════════════════════════════

CODE_ALIASES: dict[str, str] = {
    "ger": "de", "fre": "fr", "spa": "es", "ita": "it", "por": "pt",
    "dut": "nl", "lat": "la", "gr": "el", "gre": "el", "eng": "en",
    "rus": "ru", "pol": "pl", "cze": "cs", "swe": "sv", "nor": "no",
    "isl": "is", "fin": "fi", "hun": "hu", "tur": "tr", "ara": "ar",
    "heb": "he", "hin": "hi", "san": "sa", "chi": "zh", "jpn": "ja",
    "kor": "ko", "cat": "ca", "rum": "ro", "glg": "gl", "gle": "ga",
    "gla": "gd", "wel": "cy", "bre": "br", "cor": "kw", "ukr": "uk",
    "bel": "be", "bul": "bg", "mac": "mk", "srp": "sr", "hrv": "hr",
    "bos": "bs", "slo": "sk", "slv": "sl", "baq": "eu", "mlt": "mt",
    "alb": "sq", "lav": "lv", "lit": "lt", "est": "et",
    "vl": "la-vul", "ll": "la-lat", "ml": "la-med", "lla": "la-lat",
    "pie": PIE, "ine": PIE, "pgm": "gem-pro", "gem": "gem-pro",
    "itc": "itc-pro", "cel": "cel-pro",
}


# ═════════════════════════════════════════════════════════════════════════════
# Display name → code (free text, LLM output)
# ═════════════════════════════════════════════════════════════════════════════

_EXTRA_NAMES: dict[str, str] = {
    "PIE": PIE,
    "Indo-European": PIE,
    "Greek": "grc",
    "Old German": "goh",
    "Germanic": "gem-pro",
    "Frisian": "fy",
    "Saxon": "nds",
    "Norse": "non",
    "Slavonic": "cu",
    "Church Slavonic": "cu",
    "Anglo-French": "xno",
    "Late Latin": "la-lat",
    "Modern Latin": "la",
    "Classical Latin": "la",
    "Medieval Latin": "la-med",
    "Old Spanish": "osp",
    "Old Occitan": "pro",
    "Provençal": "pro",
    "Old Portuguese": "roa-opt",
    "Old Italian": "roa-oit",
}

LANGUAGE_NAME_CODES: dict[str, str] = {
    name: code
    for code, name in LANGUAGE_NAMES.items()
    if code not in (GENERIC_PROTO, UNDETERMINED)
}
# modern Greek in the table; a bare "Greek" in etymological prose is ancient
LANGUAGE_NAME_CODES.update(_EXTRA_NAMES)

_NAME_LOOKUP: dict[str, str] = {
    name.lower(): code for name, code in LANGUAGE_NAME_CODES.items()
}

_NAMES_BY_LENGTH: list[str] = sorted(LANGUAGE_NAME_CODES, key=len, reverse=True)

# Matches a language name as written in prose ("Old English", "Proto-Germanic")
LANGUAGE_NAME_PATTERN = (
    r"(?:"
    + "|".join(re.escape(name) for name in _NAMES_BY_LENGTH)
    + r"|Proto-[A-Z][A-Za-z]*(?:-[A-Z][A-Za-z]*)*)"
)

_LANGUAGE_NAME_RE = re.compile(rf"\b{LANGUAGE_NAME_PATTERN}\b")


# ═════════════════════════════════════════════════════════════════════════════
# Family membership
# ═════════════════════════════════════════════════════════════════════════════

FAMILY_GROUPS: dict[str, frozenset[str]] = {
    "indo_european": frozenset({
        "en", "de", "nl", "sv", "da", "no", "is", "fy", "got", "ang", "enm",
        "goh", "gmh", "gml", "odt", "dum", "ofs", "osx", "non", "nds",
        "fr", "es", "it", "pt", "ro", "ca", "gl", "la", "la-vul", "la-lat",
        "la-med", "la-ecc", "fro", "frm", "xno", "pro", "osp", "roa-opt", "roa-oit",
        "el", "grc", "gmy", "ru", "pl", "cs", "sk", "bg", "hr", "sr", "uk",
        "be", "mk", "sl", "bs", "cu", "orv", "lt", "lv",
        "ga", "gd", "cy", "br", "kw", "sga", "mga", "owl", "cel-gau",
        "sa", "hi", "bn", "fa", "ku", "ae", "peo", "pal", "hy", "sq", "hit", "txb",
    }),
    "semitic": frozenset({"ar", "he", "am", "mt", "arc", "akk"}),
    "sino_tibetan": frozenset({"zh", "bo", "my"}),
    "japonic": frozenset({"ja"}),
    "koreanic": frozenset({"ko"}),
    "uralic": frozenset({"fi", "et", "hu"}),
    "turkic": frozenset({"tr", "az", "kk", "ky", "uz"}),
    "kartvelian": frozenset({"ka"}),
    "basque": frozenset({"eu"}),
}

# Branches used to select sound-change rules
LANGUAGE_BRANCHES: dict[str, tuple[str, ...]] = {
    **{code: ("germanic", "indo_european") for code in ("en", "de", "nl", "da", "sv", "no")},
    **{code: ("romance", "indo_european") for code in ("es", "fr", "it", "pt", "ro", "ca")},
    "la": ("latin", "indo_european"),
    "el": ("hellenic", "indo_european"),
    "grc": ("hellenic", "indo_european"),
    **{code: ("slavic", "indo_european") for code in ("ru", "pl", "cs")},
    **{code: ("indo_aryan", "indo_european") for code in ("hi", "sa")},
    "ar": ("semitic",),
    "he": ("semitic",),
}

ROMANCE_LANGUAGES = frozenset({"es", "fr", "it", "pt", "ro", "ca"})
GERMANIC_LANGUAGES = frozenset({"en", "de", "nl", "da", "sv", "no"})

_PROTO_CODES = frozenset({GENERIC_PROTO, "pie"})


# ═════════════════════════════════════════════════════════════════════════════
# Lookups
# ═════════════════════════════════════════════════════════════════════════════

def is_proto_language(code: Optional[str]) -> bool:
    """True for reconstructed-language tags (``ine-pro``, ``gem-pro``, ``proto``)."""
    if not code:
        return False
    code = code.strip().lower()
    return code in _PROTO_CODES or code.endswith("-pro")


def is_proto_form(text: Optional[str], language: Optional[str] = None) -> bool:
    """True for reconstructed forms (``*wed-``) or words tagged as proto-language."""
    return bool(text and text.strip().startswith("*")) or is_proto_language(language)


def language_name(code: str) -> str:
    """Human-readable name, falling back to the upper-cased code."""
    return LANGUAGE_NAMES.get(code, code.upper())


def language_code_from_name(name: Optional[str]) -> Optional[str]:
    """Map a language name ("Old English", "latin") to its code.

    Tries an exact match first, then the longest name the text starts with.
    Unknown ``Proto-*`` names map to the generic proto tag.
    """
    if not name:
        return None

    normalized = re.sub(r"\s+", " ", name.strip().lower())
    if normalized in _NAME_LOOKUP:
        return _NAME_LOOKUP[normalized]

    for display in _NAMES_BY_LENGTH:
        candidate = display.lower()
        if normalized.startswith(candidate) and (
            len(normalized) == len(candidate) or not normalized[len(candidate)].isalpha()
        ):
            return _NAME_LOOKUP[candidate]

    if normalized.startswith("proto-") or normalized.startswith("proto "):
        return GENERIC_PROTO

    return None


def normalize_language_code(code: Optional[str]) -> str:
    """Normalize a code or name to the canonical code; ``und`` when unusable."""
    if not code:
        return UNDETERMINED

    raw = code.strip().rstrip(".")
    lowered = raw.lower()

    if lowered in LANGUAGE_NAMES:
        return lowered
    if lowered in CODE_ALIASES:
        return CODE_ALIASES[lowered]
    if lowered.endswith("-pro"):
        return lowered

    from_name = language_code_from_name(raw)
    if from_name:
        return from_name

    if re.fullmatch(r"[a-z]{2,3}(?:-[a-z]{2,5})*", lowered):
        return lowered

    if "proto" in lowered:
        return GENERIC_PROTO

    return UNDETERMINED


def find_language_name(text: str) -> Optional[tuple[str, str]]:
    """Last language name mentioned in ``text`` as ``(name, code)``."""
    last = None
    for match in _LANGUAGE_NAME_RE.finditer(text):
        last = match
    if last is None:
        return None
    name = last.group(0)
    return name, language_code_from_name(name) or GENERIC_PROTO


def language_family(code: str) -> Optional[str]:
    """Family group for a code, trying its base code for variants (``la-vul``)."""
    code = code.strip().lower()
    for family, members in FAMILY_GROUPS.items():
        if code in members:
            return family

    base = code.split("-", 1)[0]
    if base != code:
        for family, members in FAMILY_GROUPS.items():
            if base in members:
                return family

    return None


def language_branches(code: str) -> tuple[str, ...]:
    """Sound-change branches for a code; ``("unknown",)`` when unmapped."""
    return LANGUAGE_BRANCHES.get(code.strip().lower(), ("unknown",))
