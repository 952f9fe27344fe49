"""
Tests for media path normalisation and gallery encoding
"""
import pytest

from gig_guide.services.media_paths import (
    append_gallery,
    decode_gallery,
    encode_gallery,
    gallery_urls,
    normalize_media_url,
    remove_from_gallery,
    storage_key_from_path,
)

BASE = "https://api.gigguide.test"


class TestNormalizeMediaUrl:

    @pytest.mark.parametrize("value", [None, "", "   ", "null", "undefined", " null "])
    def test_empty_values_become_none(self, value):
        assert normalize_media_url(value, BASE) is None

    @pytest.mark.parametrize("value", ["None", "NULL", "Undefined"])
    def test_sentinels_are_case_sensitive(self, value):
        assert normalize_media_url(value, BASE) == f"{BASE}/{value}"

    def test_relative_path_gets_base_url(self):
        assert normalize_media_url("uploads/artists/a.jpg", BASE) == f"{BASE}/uploads/artists/a.jpg"

    def test_leading_slash_not_doubled(self):
        assert normalize_media_url("//uploads/a.jpg", BASE) == f"{BASE}/uploads/a.jpg"

    def test_absolute_url_unchanged(self):
        url = "https://cdn.example.com/poster.png"
        assert normalize_media_url(url, BASE) == url

    def test_idempotent(self):
        once = normalize_media_url("/uploads/events/1_gig/poster/p.png", BASE)
        assert normalize_media_url(once, BASE) == once

    def test_windows_separators(self):
        assert normalize_media_url("uploads\\venues\\2\\main.jpg", BASE) == f"{BASE}/uploads/venues/2/main.jpg"

    def test_legacy_frontend_public_prefix(self):
        assert normalize_media_url("../frontend/public/images/a.jpg", BASE) == f"{BASE}/images/a.jpg"

    def test_doubled_events_segment(self):
        assert normalize_media_url("/uploads/events/events/p.jpg", BASE) == f"{BASE}/uploads/events/p.jpg"

    def test_surrounding_whitespace_stripped(self):
        assert normalize_media_url("  /uploads/a.jpg  ", BASE) == f"{BASE}/uploads/a.jpg"

    def test_bare_slash_is_empty(self):
        assert normalize_media_url("/", BASE) is None


class TestGalleryCodec:

    def test_json_round_trip(self):
        paths = ["/uploads/a.jpg", "/uploads/b.jpg"]
        assert decode_gallery(encode_gallery(paths)) == paths

    def test_comma_joined_legacy_value(self):
        assert decode_gallery("/uploads/a.jpg, /uploads/b.jpg") == ["/uploads/a.jpg", "/uploads/b.jpg"]

    def test_native_list(self):
        assert decode_gallery(["/uploads/a.jpg", "", None]) == ["/uploads/a.jpg"]

    @pytest.mark.parametrize("value", [None, "", "[]", "null"])
    def test_empty_gallery(self, value):
        assert decode_gallery(value) == []

    def test_malformed_json_falls_back_to_split(self):
        assert decode_gallery('["/uploads/a.jpg", "/uploads/b.jpg"') == ["/uploads/a.jpg", "/uploads/b.jpg"]

    def test_gallery_urls_normalises_entries(self):
        assert gallery_urls('["uploads/a.jpg", "null"]', BASE) == [f"{BASE}/uploads/a.jpg"]

    def test_append_skips_duplicates(self):
        value = append_gallery('["/uploads/a.jpg"]', ["/uploads/a.jpg", "/uploads/b.jpg"])
        assert decode_gallery(value) == ["/uploads/a.jpg", "/uploads/b.jpg"]

    def test_remove_by_normalised_url(self):
        value = encode_gallery(["/uploads/a.jpg", "/uploads/b.jpg"])
        remaining, removed = remove_from_gallery(value, f"{BASE}/uploads/a.jpg", BASE)
        assert removed == "/uploads/a.jpg"
        assert decode_gallery(remaining) == ["/uploads/b.jpg"]

    def test_remove_missing_image(self):
        remaining, removed = remove_from_gallery('["/uploads/a.jpg"]', "/uploads/zzz.jpg", BASE)
        assert removed is None
        assert decode_gallery(remaining) == ["/uploads/a.jpg"]


class TestStorageKeyFromPath:

    def test_stored_path(self):
        assert storage_key_from_path("/uploads/artists/1_x/gallery/a.jpg", BASE) == "artists/1_x/gallery/a.jpg"

    def test_public_url(self):
        assert storage_key_from_path(f"{BASE}/uploads/venues/2/main.jpg", BASE) == "venues/2/main.jpg"

    def test_outside_uploads(self):
        assert storage_key_from_path("/images/a.jpg", BASE) is None

    def test_traversal_rejected(self):
        assert storage_key_from_path("/uploads/../secret.txt", BASE) is None

    def test_empty(self):
        assert storage_key_from_path(None) is None
