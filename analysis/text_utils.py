# analysis/text_utils.py
import re
from typing import List, Optional


YEARS_PATTERN = re.compile(r'(\d+)\+?\s*years?', re.IGNORECASE)


def word_pattern(term: str, flags: int = re.IGNORECASE) -> re.Pattern:
    """Word-bounded pattern for a literal term"""
    return re.compile(rf'\b{re.escape(term)}\b', flags)


def count_term(text: str, term: str) -> int:
    """Number of word-bounded occurrences of term in text"""
    return len(word_pattern(term).findall(text))


def find_contexts(text: str, term: str, window: int = 50) -> List[str]:
    """
    Snippets of up to `window` characters either side of each occurrence

    Snippets never cross a line break.
    """
    pattern = re.compile(
        rf'(.{{0,{window}}}\b{re.escape(term)}\b.{{0,{window}}})',
        re.IGNORECASE
    )
    return [match.strip() for match in pattern.findall(text)]


def extract_section(text: str, section_name: str) -> str:
    """
    Body of a `### <section_name>` markdown section

    The body runs until the next `###` heading or the end of the text.
    Returns an empty string when the section is missing.
    """
    pattern = re.compile(
        rf'###\s*{re.escape(section_name)}(.*?)(?=###|\Z)',
        re.IGNORECASE | re.DOTALL
    )
    match = pattern.search(text)
    return match.group(1).strip() if match else ''


def first_years(snippets: List[str]) -> Optional[int]:
    """First "N years" figure mentioned in the snippets"""
    for snippet in snippets:
        match = YEARS_PATTERN.search(snippet)
        if match:
            return int(match.group(1))
    return None
