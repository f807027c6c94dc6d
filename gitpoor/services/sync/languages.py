"""
File extension → language table
Used to tag each commit with the languages of the files it touched
"""
from typing import Iterable, List, Optional, Tuple

OTHER = "Other"

EXTENSION_LANGUAGES = {
    "ts": "TypeScript",
    "tsx": "TypeScript",
    "js": "JavaScript",
    "jsx": "JavaScript",
    "swift": "Swift",
    "py": "Python",
    "java": "Java",
    "kt": "Kotlin",
    "go": "Go",
    "c": "C",
    "cpp": "C++",
    "css": "CSS",
    "html": "HTML",
    "vue": "Vue",
    "svelte": "Svelte",
    "dart": "Dart",
    "rs": "Rust",
    "rb": "Ruby",
    "php": "PHP",
    "cs": "C#",
    "sh": "Shell",
    "bash": "Shell",
    "sql": "SQL",
    "md": "Markdown",
    "markdown": "Markdown",
    "yaml": "YAML",
    "yml": "YAML",
    "json": "JSON",
    "scss": "SCSS",
    "sass": "SASS",
    "less": "LESS",
    "h": "C/C++",
    "hpp": "C++",
    "lua": "Lua",
    "r": "R",
    "sol": "Solidity",
    "pl": "Perl",
}


def get_extension(filename: str) -> Optional[str]:
    """
    Extension of a path: text after the last ".", lowercased.

    A name without a dot (e.g. "Makefile") yields the whole name lowercased;
    an empty name yields None.
    """
    if not filename:
        return None
    extension = filename.rsplit(".", 1)[-1].lower()
    return extension or None


def infer_language(extension: str) -> str:
    return EXTENSION_LANGUAGES.get(extension, OTHER)


def classify_files(filenames: Iterable[str]) -> Tuple[List[str], List[str]]:
    """
    Derive (languages, extensions) from changed filenames.

    Both lists are de-duplicated in first-seen order; "Other" is never
    reported as a language.
    """
    languages: List[str] = []
    extensions: List[str] = []

    for filename in filenames:
        extension = get_extension(filename)
        if not extension:
            continue
        if extension not in extensions:
            extensions.append(extension)
        language = infer_language(extension)
        if language != OTHER and language not in languages:
            languages.append(language)

    return languages, extensions
