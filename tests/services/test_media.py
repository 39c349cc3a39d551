"""Tests for media cleanup helpers."""

from pulse_stage.services.media import (
    LoggingMediaStore,
    cleanup_media,
    extract_inline_images,
    media_path,
)


class FlakyStore:
    def __init__(self) -> None:
        self.deleted: list[str] = []

    def delete(self, path: str) -> None:
        if path.endswith("bad.png"):
            raise OSError("permission denied")
        self.deleted.append(path)


def test_extract_inline_images():
    html = '<p>a</p><img alt="x" src="https://cdn.test/one.png"><p><img src="https://cdn.test/two.gif" /></p>'

    assert extract_inline_images(html) == ["https://cdn.test/one.png", "https://cdn.test/two.gif"]
    assert extract_inline_images(None) == []
    assert extract_inline_images("<p>plain</p>") == []


def test_media_path_uses_file_name():
    assert media_path("https://cdn.test/medias/abc.png") == "medias/abc.png"
    assert media_path("abc.png") == "medias/abc.png"


def test_cleanup_skips_failures_and_duplicates(caplog):
    store = FlakyStore()

    deleted = cleanup_media(
        store,
        ["https://cdn.test/a.png", "https://cdn.test/bad.png", "https://cdn.test/a.png", ""],
    )

    assert deleted == 1
    assert store.deleted == ["medias/a.png"]
    assert "Failed to delete media medias/bad.png" in caplog.text


def test_logging_store_accepts_deletes(caplog):
    caplog.set_level("INFO")

    assert cleanup_media(LoggingMediaStore(), ["https://cdn.test/a.png"]) == 1
    assert "skipping delete of medias/a.png" in caplog.text


def test_extract_inline_images_single_quoted_src():
    assert extract_inline_images("<p><img src='https://cdn.test/x.png'></p>") == ["https://cdn.test/x.png"]


def test_extract_inline_images_tag_across_lines():
    html = '<p>caption</p>\n<img\n  alt="y"\n  src="https://cdn.test/y.png"\n>'

    assert extract_inline_images(html) == ["https://cdn.test/y.png"]


def test_extract_inline_images_ignores_img_without_src():
    assert extract_inline_images('<img alt="none"><img src="https://cdn.test/z.png">') == [
        "https://cdn.test/z.png"
    ]
