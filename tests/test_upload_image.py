import pytest

from src.core.exceptions import InvalidFileError, StorageError
from src.core.interfaces.file_validator import UploadedFile
from src.core.use_cases.upload_image import UploadImageUseCase
from src.infrastructure.validation.file_validator import FileValidator
from tests.conftest import JPEG_BYTES, PNG_BYTES


@pytest.fixture
def use_case(storage):
    return UploadImageUseCase(validator=FileValidator(), storage=storage)


def test_upload_generates_name_and_stores(use_case, storage):
    result = use_case.execute(UploadedFile("test-image.jpg", "image/jpeg", JPEG_BYTES))

    assert result.file_name.endswith(".jpg")
    assert result.file_type == "image/jpeg"
    assert result.key == f"images/{result.file_name}"
    assert result.url == f"http://localhost:8080/api/files/images/{result.file_name}"
    assert storage.load_as_resource(result.key).read_bytes() == JPEG_BYTES


def test_extension_follows_declared_type_not_filename(use_case):
    result = use_case.execute(UploadedFile("photo.jpg", "image/png", PNG_BYTES), folder="listings")
    assert result.file_name.endswith(".png")
    assert result.key.startswith("listings/")


def test_traversal_filename_rejected_before_validation(use_case, storage):
    with pytest.raises(StorageError) as exc:
        use_case.execute(UploadedFile("../../../etc/passwd", "text/plain", b"test content"))
    assert "invalid path sequence" in exc.value.message
    assert list(storage.root.iterdir()) == []


def test_invalid_content_not_stored(use_case, storage):
    with pytest.raises(InvalidFileError):
        use_case.execute(UploadedFile("fake.jpg", "image/jpeg", b"test image content"))
    assert list(storage.root.iterdir()) == []
