"""Tests for extension → language classification."""
from gitpoor.services.sync.languages import classify_files, get_extension, infer_language


def test_get_extension():
    assert get_extension("src/App.TSX") == "tsx"
    assert get_extension("archive.tar.gz") == "gz"
    assert get_extension("Makefile") == "makefile"
    assert get_extension("") is None
    assert get_extension("trailing.") is None


def test_infer_language():
    assert infer_language("py") == "Python"
    assert infer_language("yml") == "YAML"
    assert infer_language("h") == "C/C++"
    assert infer_language("lock") == "Other"


def test_classify_files_dedupes_in_first_seen_order():
    languages, extensions = classify_files([
        "web/index.tsx",
        "web/util.ts",
        "api/main.py",
        "package-lock.json",
        "poetry.lock",
        "api/models.py",
    ])

    assert languages == ["TypeScript", "Python", "JSON"]
    assert extensions == ["tsx", "ts", "py", "json", "lock"]


def test_other_is_never_reported_as_language():
    languages, extensions = classify_files(["LICENSE", "data.bin"])

    assert languages == []
    assert extensions == ["license", "bin"]
