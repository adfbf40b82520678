import pytest
from pydantic import ValidationError
from app.fetch.base import FetchFailure, FetchSuccess
from app.schemas import FetchRequest, FetchResultItem

class TestSchemaValidation:
    """Unit tests for Pydantic wire models"""

    def test_valid_request(self):
        request = FetchRequest.model_validate_json('{"urls": ["http://a", "http://b"]}')
        assert request.urls == ["http://a", "http://b"]

    def test_missing_urls_is_empty(self):
        assert FetchRequest.model_validate_json("{}").urls == []

    def test_null_urls_is_empty(self):
        assert FetchRequest.model_validate_json('{"urls": null}').urls == []

    def test_malformed_json_rejected(self):
        with pytest.raises(ValidationError):
            FetchRequest.model_validate_json("invalid json")

    def test_wrong_shape_rejected(self):
        with pytest.raises(ValidationError):
            FetchRequest.model_validate_json('{"urls": "http://a"}')

    def test_success_serialization(self):
        item = FetchResultItem.from_result(FetchSuccess(url="http://a", data='{"ok": true}'))
        assert item.model_dump() == {"url": "http://a", "data": '{"ok": true}', "error": ""}

    def test_failure_serialization(self):
        item = FetchResultItem.from_result(FetchFailure(url="http://a", error="boom"))
        assert item.model_dump() == {"url": "http://a", "data": "", "error": "boom"}
