"""Direct cognate concept table.

semantic field → concept → language → surface forms. Forms are lowercase.
"""

from typing import Iterator, NamedTuple


CONCEPT_TABLE: dict[str, dict[str, dict[str, tuple[str, ...]]]] = {
    "family_relations": {
        "mother": {
            "en": ("mother",), "de": ("mutter",), "es": ("madre",), "fr": ("mère",),
            "it": ("madre",), "la": ("mater",), "ru": ("мать",), "el": ("μητέρα",),
            "nl": ("moeder",), "pt": ("mãe",),
        },
        "father": {
            "en": ("father",), "de": ("vater",), "es": ("padre",), "fr": ("père",),
            "it": ("padre",), "la": ("pater",), "ru": ("отец",), "el": ("πατέρας",),
            "nl": ("vader",), "pt": ("pai",),
        },
        "brother": {
            "en": ("brother",), "de": ("bruder",), "es": ("hermano",), "fr": ("frère",),
            "it": ("fratello",), "la": ("frater",), "ru": ("брат",), "el": ("αδελφός",),
            "nl": ("broer",), "pt": ("irmão",),
        },
    },
    "numbers": {
        "one": {
            "en": ("one",), "de": ("ein", "eins"), "es": ("uno",), "fr": ("un",),
            "it": ("uno",), "la": ("unus",), "ru": ("один",), "el": ("ένα",),
        },
        "two": {
            "en": ("two",), "de": ("zwei",), "es": ("dos",), "fr": ("deux",),
            "it": ("due",), "la": ("duo",), "ru": ("два",), "el": ("δύο",),
        },
        "three": {
            "en": ("three",), "de": ("drei",), "es": ("tres",), "fr": ("trois",),
            "it": ("tre",), "la": ("tres",), "ru": ("три",), "el": ("τρία",),
        },
    },
    "body_parts": {
        "heart": {
            "en": ("heart",), "de": ("herz",), "es": ("corazón",), "fr": ("cœur",),
            "it": ("cuore",), "la": ("cor",), "ru": ("сердце",), "el": ("καρδιά",),
        },
        "head": {
            "en": ("head",), "de": ("kopf", "haupt"), "es": ("cabeza",), "fr": ("tête",),
            "it": ("testa",), "la": ("caput",), "ru": ("голова",), "el": ("κεφάλι",),
        },
    },
    "basic_concepts": {
        "water": {
            "en": ("water",), "de": ("wasser",), "es": ("agua",), "fr": ("eau",),
            "it": ("acqua",), "la": ("aqua",), "ru": ("вода",), "el": ("νερό",),
            "nl": ("water",), "pt": ("água",),
        },
        "fire": {
            "en": ("fire",), "de": ("feuer",), "es": ("fuego",), "fr": ("feu",),
            "it": ("fuoco",), "la": ("ignis",), "ru": ("огонь",), "el": ("φωτιά",),
        },
        "house": {
            "en": ("house",), "de": ("haus",), "es": ("casa",), "fr": ("maison",),
            "it": ("casa",), "la": ("domus",), "ru": ("дом",), "el": ("σπίτι",),
        },
        "night": {
            "en": ("night",), "de": ("nacht",), "es": ("noche",), "fr": ("nuit",),
            "it": ("notte",), "la": ("nox",), "ru": ("ночь",), "el": ("νύχτα",),
        },
        "name": {
            "en": ("name",), "de": ("name",), "es": ("nombre",), "fr": ("nom",),
            "it": ("nome",), "la": ("nomen",), "ru": ("имя",), "el": ("όνομα",),
        },
    },
}


class ConceptMatch(NamedTuple):
    field: str
    concept: str
    forms: dict[str, tuple[str, ...]]


def find_concepts(word: str, language: str) -> Iterator[ConceptMatch]:
    """Concepts whose forms in ``language`` include ``word`` (case-insensitive)."""
    needle = word.strip().lower()
    for field_name, concepts in CONCEPT_TABLE.items():
        for concept, forms in concepts.items():
            if needle in forms.get(language, ()):
                yield ConceptMatch(field_name, concept, forms)
