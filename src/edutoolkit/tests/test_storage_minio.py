import pytest
from unittest.mock import MagicMock, patch
from minio.error import S3Error

from edutoolkit.api.exceptions import BadRequestException, ServiceUnavailableException
from edutoolkit.minio_client import MediaStoreConfig, get_minio_client, media_store, reset_minio_client
from edutoolkit.services.courses import create_course, get_course, upload_course_image
from edutoolkit.server import app
from edutoolkit.services.storage_service import StorageService, course_cover_key, get_storage_service, public_base_url


@pytest.fixture
def mock_minio_client():
    """Create a mock MinIO client"""
    with patch('edutoolkit.minio_client.Minio') as mock_minio_class:
        mock_client = MagicMock()
        mock_minio_class.return_value = mock_client
        
        reset_minio_client()
        
        yield mock_client
        
        reset_minio_client()


@pytest.fixture
def storage_service(mock_minio_client):
    service = StorageService()
    service.client = mock_minio_client
    service.public_url = "http://media.test/edutoolkit-media"
    return service


def s3_error() -> S3Error:
    return S3Error(
        code="InternalError",
        message="boom",
        resource="/edutoolkit-media",
        request_id="1",
        host_id="1",
        response=MagicMock(),
    )


class TestMinIOClient:
    
    def test_minio_client_singleton(self, mock_minio_client):
        assert get_minio_client() is get_minio_client()
    
    def test_creates_default_bucket(self, mock_minio_client):
        mock_minio_client.bucket_exists.return_value = False
        get_minio_client()
        mock_minio_client.make_bucket.assert_called_once()
    
    def test_bucket_check_failure_is_not_fatal(self, mock_minio_client):
        mock_minio_client.bucket_exists.side_effect = s3_error()
        assert get_minio_client() is mock_minio_client
    
    def test_config_from_env(self, monkeypatch):
        monkeypatch.setenv("MINIO_ENDPOINT", "media:9000")
        monkeypatch.setenv("MINIO_SECURE", "true")
        
        config = MediaStoreConfig.from_env()
        
        assert config.endpoint == "media:9000"
        assert config.secure is True


class TestStorageService:
    
    def test_public_url_defaults_to_bucket_path(self, monkeypatch):
        monkeypatch.delenv("MINIO_PUBLIC_URL", raising=False)
        assert public_base_url().endswith(f"://{media_store.endpoint}/{media_store.bucket}")
    
    def test_public_url_override(self, monkeypatch):
        monkeypatch.setenv("MINIO_PUBLIC_URL", "https://cdn.school.edu/media/")
        assert public_base_url() == "https://cdn.school.edu/media"
    
    def test_cover_key_is_fixed_per_course(self):
        assert course_cover_key("c1") == "courses/c1/cover_image"
    
    @pytest.mark.asyncio
    async def test_upload_cover(self, storage_service, mock_minio_client):
        mock_minio_client.bucket_exists.return_value = True
        
        url = await storage_service.upload_course_cover("c1", b"\x89PNG...", "image/png")
        
        assert url == "http://media.test/edutoolkit-media/courses/c1/cover_image"
        kwargs = mock_minio_client.put_object.call_args.kwargs
        assert kwargs["object_name"] == "courses/c1/cover_image"
        assert kwargs["length"] == 7
        assert kwargs["content_type"] == "image/png"
    
    @pytest.mark.asyncio
    async def test_rejects_non_images(self, storage_service):
        with pytest.raises(BadRequestException):
            await storage_service.upload_course_cover("c1", b"%PDF", "application/pdf")
    
    @pytest.mark.asyncio
    async def test_rejects_empty_upload(self, storage_service):
        with pytest.raises(BadRequestException):
            await storage_service.upload_course_cover("c1", b"", "image/png")
    
    @pytest.mark.asyncio
    async def test_upload_failure(self, storage_service, mock_minio_client):
        mock_minio_client.bucket_exists.return_value = True
        mock_minio_client.put_object.side_effect = s3_error()
        
        with pytest.raises(ServiceUnavailableException):
            await storage_service.upload_course_cover("c1", b"img", "image/jpeg")
    
    @pytest.mark.asyncio
    async def test_bucket_failure(self, storage_service, mock_minio_client):
        mock_minio_client.bucket_exists.side_effect = s3_error()
        
        with pytest.raises(ServiceUnavailableException):
            await storage_service.upload_course_cover("c1", b"img", "image/jpeg")


class TestCourseImage:
    
    @pytest.mark.asyncio
    async def test_upload_sets_course_image(self, test_db, storage_service, mock_minio_client):
        mock_minio_client.bucket_exists.return_value = True
        course_id = create_course(test_db, "Algebra")
        
        url = await upload_course_image(test_db, storage_service, course_id, b"img", "image/jpeg")
        
        assert get_course(test_db, course_id).image_url == url
    
    def test_upload_endpoint(self, client_factory, admin_principal, storage_service, mock_minio_client):
        mock_minio_client.bucket_exists.return_value = True
        client = client_factory(admin_principal)
        app.dependency_overrides[get_storage_service] = lambda: storage_service
        course_id = client.post("/courses", json={"title": "Algebra"}).json()["id"]
        
        response = client.post(f"/courses/{course_id}/image",
                               files={"file": ("cover.png", b"\x89PNG", "image/png")})
        
        assert response.status_code == 200
        assert response.json()["image_url"].endswith(f"/courses/{course_id}/cover_image")
        assert client.get(f"/courses/{course_id}").json()["image_url"] == response.json()["image_url"]
