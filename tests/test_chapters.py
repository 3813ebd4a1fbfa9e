import pytest

from novel_api.core.exceptions import NotFound
from novel_api.services import chapter_service


def test_chapter_list_is_numeric(client, novel_tree):
    response = client.get("/api/Foo Novel/chapterlist")
    assert response.status_code == 200
    assert response.json() == {"chapters": ["Chapter 1", "Chapter 2", "Chapter 10"]}


def test_chapter_list_for_missing_novel(client, novel_tree):
    response = client.get("/api/Missing Novel/chapterlist")
    assert response.status_code == 404


def test_chapter_list_without_markdown_directory(client, novel_tree):
    assert client.get("/api/Empty Novel/chapterlist").status_code == 404


def test_read_chapter(client, novel_tree):
    response = client.get("/api/Foo Novel/10")
    assert response.status_code == 200
    assert response.json() == {"content": "# Chapter 10\n\nText of chapter 10."}


def test_read_missing_chapter(client, novel_tree):
    assert client.get("/api/Foo Novel/99").status_code == 404
    assert client.get("/api/Missing Novel/1").status_code == 404


def test_cover(client, novel_tree):
    response = client.get("/api/Foo Novel/cover")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


def test_missing_cover(client, novel_tree):
    response = client.get("/api/Empty Novel/cover")
    assert response.status_code == 404
    assert response.json() == {"detail": "Cover image for Empty Novel not found"}


def test_novel_folders(client, novel_tree):
    response = client.get("/api/novels/folders")
    assert response.status_code == 200
    assert response.json() == {"folders": ["Empty Novel", "Foo Novel"]}


def test_novel_folders_without_tree(client, novel_tree, monkeypatch):
    from novel_api.core.config import settings
    monkeypatch.setattr(settings, "NOVEL_PATH", str(novel_tree / "gone"))
    assert client.get("/api/novels/folders").status_code == 404


@pytest.mark.parametrize("name", ["..", "../..", "/etc"])
def test_paths_outside_the_tree_are_not_found(novel_tree, name):
    with pytest.raises(NotFound):
        chapter_service.list_chapters(name)
    with pytest.raises(NotFound):
        chapter_service.get_cover_path(name)


def test_chapter_number_cannot_escape_the_tree(novel_tree):
    (novel_tree.parent / "secret.md").write_text("secret", encoding="utf-8")
    with pytest.raises(NotFound):
        chapter_service.get_chapter("Foo Novel", "1/../../../../secret")


@pytest.mark.parametrize("suffix", ["cover", "chapterlist", "1"])
def test_overlong_novel_name_is_not_found(client, novel_tree, suffix):
    response = client.get(f"/api/{'x' * 300}/{suffix}")
    assert response.status_code == 404
    assert "detail" in response.json()


def test_chapter_that_is_not_utf8(client, novel_tree):
    markdown = novel_tree / "Foo Novel" / "Markdown"
    (markdown / "Foo Novel Chapter 3.md").write_bytes(b"\xff\xfe\xfa broken")
    response = client.get("/api/Foo Novel/3")
    assert response.status_code == 500
    assert response.json() == {"detail": "Chapter could not be read"}


def test_chapter_numbers_ignore_the_novel_name(client, novel_tree):
    markdown = novel_tree / "Chapter 7 Saga" / "Markdown"
    markdown.mkdir(parents=True)
    for number in (1, 12, 3):
        (markdown / f"Chapter 7 Saga Chapter {number}.md").write_text("text", encoding="utf-8")
    response = client.get("/api/Chapter 7 Saga/chapterlist")
    assert response.json() == {"chapters": ["Chapter 1", "Chapter 3", "Chapter 12"]}


def test_chapter_number_of():
    assert chapter_service.chapter_number_of("Foo", "Foo Chapter 4") == 4
    assert chapter_service.chapter_number_of("Chapter 9", "Chapter 9 Chapter 2") == 2
    assert chapter_service.chapter_number_of("Foo", "Foo Afterword") is None
