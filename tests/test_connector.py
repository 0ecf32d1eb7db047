"""Tests for perch.connector — validating request parameters."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from perch.connector import request_params, validate_request, validate_request_or_raise
from perch.errors import ConfigurationError, ValidationError
from perch.facade import Params


class MultiDict:
    """Minimal MultiValueMapping, like a framework's query container."""

    def __init__(self, pairs: list[tuple[str, Any]], files: dict[str, Any] | None = None) -> None:
        self._pairs = pairs
        self.files = files or {}

    def __getitem__(self, key: str) -> Any:
        return self.get_list(key)[0]

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self._pairs)

    def __iter__(self):
        return iter(dict.fromkeys(k for k, _ in self._pairs))

    def __len__(self) -> int:
        return len(dict.fromkeys(k for k, _ in self._pairs))

    def get_list(self, key: str) -> list[Any]:
        return [v for k, v in self._pairs if k == key]


@dataclass
class FakeRequest:
    method: str = "GET"
    query: Any = field(default_factory=dict)
    content_type: str | None = None
    body: Any = None
    is_async: bool = True

    def json(self) -> Any:
        return self._deliver(self.body)

    def form(self) -> Any:
        return self._deliver(self.body)

    def _deliver(self, value: Any) -> Any:
        if not self.is_async:
            return value

        async def later() -> Any:
            return value

        return later()


def search(p) -> None:
    p.param("q", required=True)
    p.param("page", int, default="1")


# ---------------------------------------------------------------------------
# request_params
# ---------------------------------------------------------------------------


class TestRequestParams:
    @pytest.mark.anyio
    async def test_query_only_for_get(self) -> None:
        request = FakeRequest(
            query={"q": "perch"},
            content_type="application/json",
            body={"ignored": True},
        )
        assert await request_params(request) == {"q": "perch"}

    @pytest.mark.anyio
    async def test_multi_value_query(self) -> None:
        request = FakeRequest(query=MultiDict([("tag", "a"), ("q", "x"), ("tag", "b")]))
        assert await request_params(request) == {"tag": ["a", "b"], "q": "x"}

    @pytest.mark.anyio
    async def test_json_body_overlays_query(self) -> None:
        request = FakeRequest(
            method="POST",
            query={"q": "query", "page": "2"},
            content_type="application/json; charset=utf-8",
            body={"q": "body", "tags": ["a"]},
        )
        assert await request_params(request) == {"q": "body", "page": "2", "tags": ["a"]}

    @pytest.mark.anyio
    async def test_vendor_json(self) -> None:
        request = FakeRequest(method="PUT", content_type="application/vnd.api+json", body={"a": 1})
        assert await request_params(request) == {"a": 1}

    @pytest.mark.anyio
    async def test_non_object_json_is_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        request = FakeRequest(
            method="POST",
            query={"q": "x"},
            content_type="application/json",
            body=[1, 2],
        )
        with caplog.at_level("DEBUG", logger="perch.connector"):
            assert await request_params(request) == {"q": "x"}
        assert "non-object JSON body" in caplog.text

    @pytest.mark.anyio
    async def test_sync_form_with_files(self) -> None:
        upload = object()
        form = MultiDict([("title", "hi"), ("tag", "a"), ("tag", "b")], files={"file": upload})
        request = FakeRequest(
            method="post",
            content_type="multipart/form-data; boundary=xyz",
            body=form,
            is_async=False,
        )

        params = await request_params(request)

        assert params == {"title": "hi", "tag": ["a", "b"], "file": upload}

    @pytest.mark.anyio
    async def test_urlencoded_form(self) -> None:
        request = FakeRequest(
            method="PATCH",
            content_type="application/x-www-form-urlencoded",
            body={"name": "perch"},
        )
        assert await request_params(request) == {"name": "perch"}

    @pytest.mark.anyio
    async def test_unknown_body_type_is_ignored(self) -> None:
        request = FakeRequest(method="POST", query={"q": "x"}, content_type="text/plain", body="raw")
        assert await request_params(request) == {"q": "x"}

    @pytest.mark.anyio
    async def test_bare_request(self) -> None:
        assert await request_params(object()) == {}


# ---------------------------------------------------------------------------
# validate_request / validate_request_or_raise
# ---------------------------------------------------------------------------


class TestValidateRequest:
    @pytest.mark.anyio
    async def test_anonymous_schema(self) -> None:
        result = await validate_request(FakeRequest(query={"q": "perch"}), search)

        assert result.is_valid
        assert result == {"q": "perch", "page": 1}

    @pytest.mark.anyio
    async def test_invalid_request(self) -> None:
        result = await validate_request(FakeRequest(query={"page": "x"}), search)

        assert set(result.errors) == {"q", "page"}

    @pytest.mark.anyio
    async def test_named_validator(self) -> None:
        params = Params()
        params.register("search", search)

        result = await validate_request(FakeRequest(query={"q": "x"}), "search", params=params)
        assert result["q"] == "x"

    @pytest.mark.anyio
    async def test_name_without_params(self) -> None:
        with pytest.raises(ConfigurationError, match="without a Params registry"):
            await validate_request(FakeRequest(), "search")

    @pytest.mark.anyio
    async def test_overrides(self) -> None:
        result = await validate_request(
            FakeRequest(),
            lambda p: p.param("name"),
            field_required=True,
        )
        assert result.errors == {"name": ["is required"]}

    @pytest.mark.anyio
    async def test_or_raise(self) -> None:
        data = await validate_request_or_raise(FakeRequest(query={"q": "x", "page": "3"}), search)
        assert data == {"q": "x", "page": 3}

        with pytest.raises(ValidationError) as exc_info:
            await validate_request_or_raise(FakeRequest(), search)
        assert exc_info.value.errors == {"q": ["is required"]}

    @pytest.mark.anyio
    async def test_or_raise_named(self) -> None:
        params = Params()
        params.register("search", search)

        data = await validate_request_or_raise(FakeRequest(query={"q": "x"}), "search", params=params)
        assert data == {"q": "x", "page": 1}

        with pytest.raises(ConfigurationError):
            await validate_request_or_raise(FakeRequest(), "search")
