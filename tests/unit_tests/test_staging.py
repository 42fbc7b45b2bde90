import io
import logging

from fastapi import UploadFile

from board_proxy.staging import discard_staged, read_staged, stage_upload


def make_upload(content: bytes = b"hello", filename: str = "notes.txt") -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


async def test_stage_upload_writes_a_uniquely_named_copy(tmp_path):
    upload_dir = tmp_path / "uploads"

    first = await stage_upload(make_upload(b"one"), upload_dir)
    second = await stage_upload(make_upload(b"two"), upload_dir)

    assert first.path != second.path
    assert first.path.parent == upload_dir
    assert first.original_name == "notes.txt"
    assert first.size_bytes == 3
    assert await read_staged(first) == b"one"
    assert await read_staged(second) == b"two"


async def test_discard_deletes_only_once(tmp_path, monkeypatch):
    staged = await stage_upload(make_upload(), tmp_path)
    unlinked = []
    original_unlink = type(staged.path).unlink

    def counting_unlink(path, *args, **kwargs):
        unlinked.append(path)
        return original_unlink(path, *args, **kwargs)

    monkeypatch.setattr(type(staged.path), "unlink", counting_unlink)

    assert discard_staged(staged) is True
    assert discard_staged(staged) is True
    assert unlinked == [staged.path]
    assert not staged.path.exists()


async def test_discard_failure_is_logged_not_raised(tmp_path, caplog):
    staged = await stage_upload(make_upload(), tmp_path)
    staged.path.unlink()

    with caplog.at_level(logging.ERROR, logger="board_proxy.staging"):
        assert discard_staged(staged) is False

    assert "Failed to delete temp file" in caplog.text
