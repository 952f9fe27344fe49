"""
Tests for local media storage and staged upload batches
"""
import io

import pytest
from fastapi import UploadFile

from conftest import PNG_BYTES

from gig_guide.exceptions import InvalidInputError
from gig_guide.services.storage_provider import LocalDiskStorageProvider, MediaStorage, folder_name_for


def _upload(name="image.png", data=PNG_BYTES):
    return UploadFile(file=io.BytesIO(data), filename=name)


@pytest.fixture
def storage(tmp_path):
    return MediaStorage(LocalDiskStorageProvider(base_path=str(tmp_path)))


def _files(storage):
    return [p for p in storage.provider.base_path.rglob("*") if p.is_file()]


class TestMediaStorage:

    def test_save_image_returns_public_path(self, storage):
        path = storage.save_image(_upload(), "artists/1_nova/gallery")
        assert path.startswith("/uploads/artists/1_nova/gallery/")
        assert path.endswith(".png")
        assert len(_files(storage)) == 1

    def test_rejects_extension(self, storage):
        with pytest.raises(InvalidInputError):
            storage.save_image(_upload("run.exe", b"MZ"), "artists")
        assert _files(storage) == []

    def test_save_images_all_or_nothing(self, storage):
        with pytest.raises(InvalidInputError):
            storage.save_images([_upload("a.png"), _upload("b.png"), _upload("c.gif.txt", b"x")], "venues/1")
        assert _files(storage) == []

    def test_folder_name(self):
        assert folder_name_for(4, "The Blue Notes!") == "4_the_blue_notes"


class TestStagedUploads:

    def test_kept_when_block_succeeds(self, storage):
        with storage.staged() as batch:
            paths = batch.save_images([_upload("a.png"), _upload("b.png")], "events/1_gig/gallery")
        assert len(paths) == 2
        assert len(_files(storage)) == 2

    def test_discarded_when_block_raises(self, storage):
        with pytest.raises(RuntimeError):
            with storage.staged() as batch:
                batch.save_image(_upload("poster.png"), "events/1_gig/poster")
                assert len(_files(storage)) == 1
                raise RuntimeError("commit failed")
        assert _files(storage) == []

    def test_earlier_files_survive_a_failed_batch(self, storage):
        kept = storage.save_image(_upload("old.png"), "venues/2")
        with pytest.raises(InvalidInputError):
            with storage.staged() as batch:
                batch.save_image(_upload("new.png"), "venues/2")
                batch.save_image(_upload("bad.bmp.exe", b"MZ"), "venues/2")
        assert [p.name for p in _files(storage)] == [kept.rsplit("/", 1)[1]]
