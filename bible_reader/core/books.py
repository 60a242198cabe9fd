"""OSIS book identifiers and lookup from free-form book strings.

Book strings seen in source data come in several shapes: OSIS ids ("1Sam"),
three-letter abbreviations ("1Sa", "Jhn", "Ezk") and English names
("1 Samuel", "Song of Solomon"). Lookup is case-insensitive and ignores
spaces and periods.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

# OSIS id -> (English name, alternative abbreviations)
OSIS_BOOKS: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    # Pentateuch
    "Gen": ("Genesis", ("Gn",)),
    "Exod": ("Exodus", ("Exo", "Ex")),
    "Lev": ("Leviticus", ("Lv",)),
    "Num": ("Numbers", ("Nm",)),
    "Deut": ("Deuteronomy", ("Deu", "Dt")),
    # History
    "Josh": ("Joshua", ("Jos",)),
    "Judg": ("Judges", ("Jdg",)),
    "Ruth": ("Ruth", ("Rut",)),
    "1Sam": ("1 Samuel", ("1Sa",)),
    "2Sam": ("2 Samuel", ("2Sa",)),
    "1Kgs": ("1 Kings", ("1Ki",)),
    "2Kgs": ("2 Kings", ("2Ki",)),
    "1Chr": ("1 Chronicles", ("1Ch",)),
    "2Chr": ("2 Chronicles", ("2Ch",)),
    "Ezra": ("Ezra", ("Ezr",)),
    "Neh": ("Nehemiah", ()),
    "Esth": ("Esther", ("Est",)),
    # Poetry/Wisdom
    "Job": ("Job", ()),
    "Ps": ("Psalms", ("Psa", "Psalm")),
    "Prov": ("Proverbs", ("Pro",)),
    "Eccl": ("Ecclesiastes", ("Ecc",)),
    "Song": ("Song of Solomon", ("Sng", "Sos", "Song of Songs")),
    # Major Prophets
    "Isa": ("Isaiah", ()),
    "Jer": ("Jeremiah", ()),
    "Lam": ("Lamentations", ()),
    "Ezek": ("Ezekiel", ("Ezk", "Eze")),
    "Dan": ("Daniel", ()),
    # Minor Prophets
    "Hos": ("Hosea", ()),
    "Joel": ("Joel", ("Jol", "Joe")),
    "Amos": ("Amos", ("Amo",)),
    "Obad": ("Obadiah", ("Oba",)),
    "Jonah": ("Jonah", ("Jon",)),
    "Mic": ("Micah", ()),
    "Nah": ("Nahum", ("Nam",)),
    "Hab": ("Habakkuk", ()),
    "Zeph": ("Zephaniah", ("Zep",)),
    "Hag": ("Haggai", ()),
    "Zech": ("Zechariah", ("Zec",)),
    "Mal": ("Malachi", ()),
    # Gospels/Acts
    "Matt": ("Matthew", ("Mat",)),
    "Mark": ("Mark", ("Mrk", "Mar")),
    "Luke": ("Luke", ("Luk",)),
    "John": ("John", ("Jhn", "Joh")),
    "Acts": ("Acts", ("Act",)),
    # Paul's Epistles
    "Rom": ("Romans", ()),
    "1Cor": ("1 Corinthians", ("1Co",)),
    "2Cor": ("2 Corinthians", ("2Co",)),
    "Gal": ("Galatians", ()),
    "Eph": ("Ephesians", ()),
    "Phil": ("Philippians", ("Php",)),
    "Col": ("Colossians", ()),
    "1Thess": ("1 Thessalonians", ("1Th",)),
    "2Thess": ("2 Thessalonians", ("2Th",)),
    "1Tim": ("1 Timothy", ("1Ti",)),
    "2Tim": ("2 Timothy", ("2Ti",)),
    "Titus": ("Titus", ("Tit",)),
    "Phlm": ("Philemon", ("Phm",)),
    # General Epistles + Revelation
    "Heb": ("Hebrews", ()),
    "Jas": ("James", ()),
    "1Pet": ("1 Peter", ("1Pe",)),
    "2Pet": ("2 Peter", ("2Pe",)),
    "1John": ("1 John", ("1Jn", "1Jo")),
    "2John": ("2 John", ("2Jn", "2Jo")),
    "3John": ("3 John", ("3Jn", "3Jo")),
    "Jude": ("Jude", ("Jud",)),
    "Rev": ("Revelation", ()),
    # Deuterocanon (present in versification data)
    "Tob": ("Tobit", ()),
    "Jdt": ("Judith", ()),
    "AddEsth": ("Additions to Esther", ("EsG", "EsthGr")),
    "Wis": ("Wisdom of Solomon", ()),
    "Sir": ("Sirach", ()),
    "Bar": ("Baruch", ()),
    "EpJer": ("Letter of Jeremiah", ("LJe",)),
    "PrAzar": ("Prayer of Azariah", ("S3Y",)),
    "Sus": ("Susanna", ()),
    "Bel": ("Bel and the Dragon", ()),
    "1Macc": ("1 Maccabees", ("1Ma",)),
    "2Macc": ("2 Maccabees", ("2Ma",)),
    "3Macc": ("3 Maccabees", ("3Ma",)),
    "4Macc": ("4 Maccabees", ("4Ma",)),
    "1Esd": ("1 Esdras", ("1Es",)),
    "2Esd": ("2 Esdras", ("2Es",)),
    "PrMan": ("Prayer of Manasseh", ("Man",)),
}


def _normalize(book: str) -> str:
    return book.replace(" ", "").replace(".", "").lower()


def _build_lookup() -> Dict[str, str]:
    lookup: Dict[str, str] = {}
    for osis_id, (name, aliases) in OSIS_BOOKS.items():
        for key in (osis_id, name, *aliases):
            lookup.setdefault(_normalize(key), osis_id)
    return lookup


_LOOKUP = _build_lookup()


def get_osis_id_from_book_string(book: str) -> Optional[str]:
    """Return the OSIS id for ``book`` or ``None`` when it is not a known book."""
    if not book:
        return None
    return _LOOKUP.get(_normalize(book))


__all__ = ["OSIS_BOOKS", "get_osis_id_from_book_string"]
