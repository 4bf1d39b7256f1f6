import os
from unittest import mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.catalog.exceptions import FileStorageError, InvalidImageNameError
from apps.catalog.storage import FileService, image_extension


def test_image_extension_keeps_last_suffix():
    assert image_extension("photo.png") == ".png"
    assert image_extension("archive.tar.GZ") == ".GZ"
    assert image_extension("/tmp/dir.v1/shot.jpeg") == ".jpeg"


@pytest.mark.parametrize("name", ["photo", "photo.", "", "dir.v1/photo"])
def test_image_extension_rejects_names_without_suffix(name):
    with pytest.raises(InvalidImageNameError):
        image_extension(name)


def test_upload_writes_bytes_under_random_name(tmp_path):
    service = FileService()
    upload = SimpleUploadedFile("cat.jpg", b"\xff\xd8image-bytes", content_type="image/jpeg")
    file_name = service.upload_image(str(tmp_path), upload)
    assert file_name.endswith(".jpg")
    assert file_name != "cat.jpg"
    assert (tmp_path / file_name).read_bytes() == b"\xff\xd8image-bytes"


def test_upload_creates_missing_directory(tmp_path):
    target = tmp_path / "images"
    file_name = FileService().upload_image(str(target), SimpleUploadedFile("a.png", b"png"))
    assert target.is_dir()
    assert os.listdir(target) == [file_name]


def test_two_uploads_of_same_name_do_not_collide(tmp_path):
    service = FileService()
    first = service.upload_image(str(tmp_path), SimpleUploadedFile("same.png", b"one"))
    second = service.upload_image(str(tmp_path), SimpleUploadedFile("same.png", b"two"))
    assert first != second
    assert (tmp_path / first).read_bytes() == b"one"
    assert (tmp_path / second).read_bytes() == b"two"


def test_upload_without_extension_writes_nothing(tmp_path):
    with pytest.raises(InvalidImageNameError):
        FileService().upload_image(str(tmp_path), SimpleUploadedFile("noext", b"data"))
    assert os.listdir(tmp_path) == []


def test_missing_parent_directory_raises_storage_error(tmp_path):
    target = tmp_path / "missing" / "images"
    with pytest.raises(FileStorageError) as excinfo:
        FileService().upload_image(str(target), SimpleUploadedFile("a.png", b"png"))
    assert excinfo.value.code == "STORAGE_ERROR"
    assert excinfo.value.status_code == 500


def test_write_failure_raises_storage_error(tmp_path):
    with mock.patch("apps.catalog.storage.open", side_effect=PermissionError("denied"), create=True):
        with pytest.raises(FileStorageError):
            FileService().upload_image(str(tmp_path), SimpleUploadedFile("a.png", b"png"))
