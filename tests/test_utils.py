import pytest

from app.utils import extract_json_object, generate_id, infer_media_kind, sanitize_filename


def test_generate_id_is_unique_and_prefixed():
    ids = [generate_id("p") for _ in range(50)]
    assert len(set(ids)) == 50
    assert all(value.startswith("p") for value in ids)
    tokens = [int(value[1:]) for value in ids]
    assert tokens == sorted(tokens)


def test_sanitize_filename_replaces_unsafe_characters():
    assert sanitize_filename("my reel (final).MP4") == "my_reel__final_.MP4"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("poster.JPG", "image"),
        ("logo.svg", "image"),
        ("still.webp", "image"),
        ("teaser.mov", "video"),
        ("cut.MP4", "video"),
        ("notes.pdf", "unknown"),
        ("README", "unknown"),
    ],
)
def test_infer_media_kind_uses_extension_only(name, expected):
    assert infer_media_kind(name) == expected


def test_extract_json_object_from_markdown():
    payload = """
    Here is your payload:
    ```json
    {"highlight": {"id": "h1"}}
    ```
    """
    assert extract_json_object(payload) == {"highlight": {"id": "h1"}}


def test_extract_json_object_requires_an_object():
    with pytest.raises(ValueError, match="No JSON object"):
        extract_json_object("no json here")
