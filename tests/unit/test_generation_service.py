"""Tests for AI content drafting."""

from unittest.mock import AsyncMock

import pytest

from src.funnelhub.core.config import get_settings
from src.funnelhub.core.exceptions import GenerationError
from src.funnelhub.integrations.ai_gateway import AIGateway
from src.funnelhub.schemas.generation import (
    OfferPrelandingRequest,
    PrelandingContentRequest,
    WebResultsRequest,
)
from src.funnelhub.services.generation_service import GenerationService
from src.funnelhub.utils.images import default_image_for_title

pytestmark = pytest.mark.unit


@pytest.fixture
def gateway() -> AsyncMock:
    mock = AsyncMock(spec=AIGateway)
    mock.generate_image.return_value = None
    return mock


@pytest.fixture
def service(gateway) -> GenerationService:
    return GenerationService(gateway)


class TestBlogContent:
    async def test_content_trimmed(self, service, gateway):
        gateway.complete.return_value = "  Body text \n"

        result = await service.blog_content("  Ten Tips  ", slug="ten-tips")

        assert result.content == "Body text"
        prompt = gateway.complete.call_args.args[0]
        assert '"Ten Tips"' in prompt
        assert "ten-tips" in prompt

    @pytest.mark.parametrize("title", [None, "", "   "])
    async def test_title_required(self, service, gateway, title):
        with pytest.raises(GenerationError) as exc_info:
            await service.blog_content(title)
        assert exc_info.value.status_code == 400
        gateway.complete.assert_not_called()

    async def test_gateway_not_configured(self):
        with pytest.raises(GenerationError, match="AI_GATEWAY_API_KEY") as exc_info:
            await GenerationService(None).blog_content("Title")
        assert exc_info.value.status_code == 500


class TestWebResults:
    async def test_array(self, service, gateway):
        gateway.complete.return_value = (
            '```json\n[{"title": "A", "url": "https://a.com", "is_sponsored": true},'
            ' {"title": "B"}, "junk"]\n```'
        )

        result = await service.web_results(WebResultsRequest(searchText="shoes", count=2))

        assert [r.title for r in result.web_results] == ["A", "B"]
        assert result.web_results[0].is_sponsored is True
        assert "exactly 2 results" in gateway.complete.call_args.kwargs["system_prompt"]

    @pytest.mark.parametrize("key", ["webResults", "results"])
    async def test_wrapped_object(self, service, gateway, key):
        gateway.complete.return_value = f'{{"{key}": [{{"title": "A"}}]}}'
        result = await service.web_results(WebResultsRequest(searchText="shoes"))
        assert len(result.web_results) == 1

    async def test_not_a_list(self, service, gateway):
        gateway.complete.return_value = '"just text"'
        with pytest.raises(GenerationError, match="not a list"):
            await service.web_results(WebResultsRequest(searchText="shoes"))

    async def test_search_text_required(self, service):
        with pytest.raises(GenerationError):
            await service.web_results(WebResultsRequest())


class TestPrelanding:
    async def test_content_with_image(self, service, gateway):
        gateway.complete.return_value = '{"headline": "Save big", "subtitle": "Now"}'
        gateway.generate_image.return_value = "data:image/png;base64,AAA"

        result = await service.prelanding_content(PrelandingContentRequest(webResultTitle="Deals"))

        assert result.headline == "Save big"
        assert result.main_image_url == "data:image/png;base64,AAA"

    async def test_object_required(self, service, gateway):
        gateway.complete.return_value = "[1, 2]"
        with pytest.raises(GenerationError, match="not a JSON object"):
            await service.prelanding_content(PrelandingContentRequest(webResultTitle="Deals"))

    async def test_offer_falls_back_to_default_hero(self, service, gateway):
        gateway.complete.return_value = '{"headline": "Win", "cta_button_text": "Go"}'

        result = await service.offer_prelanding(OfferPrelandingRequest(webResultTitle="Prize"))

        assert result.cta_button_text == "Go"
        assert result.email_placeholder == "Enter your email"
        assert result.main_image_url == get_settings().default_hero_image_url


class TestBlogImage:
    async def test_generated(self, service, gateway):
        gateway.generate_image.return_value = "data:image/png;base64,BBB"
        result = await service.blog_image("Travel")
        assert (result.image_url, result.is_default) == ("data:image/png;base64,BBB", False)

    async def test_default_when_generation_fails(self, service):
        result = await service.blog_image("Travel")
        assert result.image_url == default_image_for_title("Travel")
        assert result.is_default is True

    async def test_default_without_gateway(self):
        result = await GenerationService(None).blog_image("Travel")
        assert result.is_default is True

    async def test_title_required(self, service):
        with pytest.raises(GenerationError):
            await service.blog_image(None)
