import pytest

from artmarket.core.config import get_settings
from artmarket.core.errors import InvalidArgument
from artmarket.core.storage_utils import MediaStorage
from artmarket.core.supabase_client import supabase_admin


class TestStorageClient:
    def test_missing_service_role_key(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "SUPABASE_SERVICE_ROLE_KEY", None)
        supabase_admin.cache_clear()

        with pytest.raises(RuntimeError):
            supabase_admin()


class TestMediaStorage:
    def _storage(self):
        return MediaStorage(client=None, bucket="assets", max_image_bytes=10)

    def test_path_from_rendered_url(self):
        url = (
            "https://proj.supabase.co/storage/v1/render/image/public/assets/"
            "product-images/a.png?width=800&height=800"
        )

        assert self._storage().extract_path_from_public_url(url) == "product-images/a.png"

    def test_foreign_url_is_ignored(self):
        storage = self._storage()

        assert storage.extract_path_from_public_url("https://elsewhere.test/a.png") is None
        storage.delete_public_url("https://elsewhere.test/a.png")

    def test_oversized_image_is_rejected(self):
        with pytest.raises(InvalidArgument):
            self._storage().upload_image("product-images", "image/png", b"x" * 11)
