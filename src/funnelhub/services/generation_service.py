"""AI-assisted content drafting for the admin dashboards."""

from fastapi import status

from src.funnelhub.core.config import get_settings
from src.funnelhub.core.exceptions import GenerationError
from src.funnelhub.core.logging import get_logger
from src.funnelhub.integrations.ai_gateway import AIGateway, parse_json_content
from src.funnelhub.schemas.generation import (
    BlogContentResponse,
    BlogImageResponse,
    GeneratedWebResult,
    OfferPrelandingContent,
    OfferPrelandingRequest,
    PrelandingContent,
    PrelandingContentRequest,
    WebResultsRequest,
    WebResultsResponse,
)
from src.funnelhub.utils.images import default_image_for_title

logger = get_logger(__name__)

BLOG_SYSTEM_PROMPT = """You are a professional blog content writer. Generate engaging, well-structured blog content based on the given title.

The content should:
- Be informative and engaging
- Include an introduction, main body with sections, and conclusion
- Be between 800-1200 words
- Be SEO-friendly with natural keyword usage
- Have a conversational yet professional tone
- Use plain text only - NO HTML tags whatsoever (no <p>, <h2>, <strong>, <ul>, <li>, etc.)
- Use blank lines to separate paragraphs
- Use ALL CAPS or ** for emphasis instead of HTML tags
- Use section headers in plain text format on their own line
- Use bullet points with - characters for lists

Do NOT include the title in the content as it will be displayed separately."""

WEB_RESULTS_SYSTEM_PROMPT = """You are a web results generator. Generate realistic search engine results based on the given search query.
For each result, provide:
- title: A compelling click-worthy title (50-70 characters)
- description: A brief description of what the page offers (100-150 characters)
- name: A realistic domain name (e.g., "bestreviews.com", "expertguide.net")
- url: A realistic URL for the result
- is_sponsored: Boolean, make first 1-2 results sponsored (true), rest organic (false)
Return a JSON array with exactly {count} results. Results should be relevant to the search query and look like real search engine results."""

PRELANDING_SYSTEM_PROMPT = """You are a marketing copywriter creating compelling pre-landing page content.
Generate engaging headlines, subtitles, and descriptions that will make users want to continue to the offer.
The content should build anticipation and curiosity while being professional."""

OFFER_SYSTEM_PROMPT = """You are a marketing copywriter creating compelling pre-landing page content for an offer site.
Generate engaging headlines, descriptions, and CTA button text that will make users want to continue to the offer.
The content should build anticipation and curiosity while being professional and offer-focused."""

HERO_IMAGE_PROMPT = """Generate a professional, high-quality hero image for {kind} about: "{subject}".
The image should be modern, clean, and visually appealing with vibrant colors.
Use professional design elements suitable for a marketing/promotional page.
16:9 aspect ratio, ultra high resolution."""

BLOG_IMAGE_PROMPT = """Generate a professional featured image for a blog post titled: "{title}".
The image should be modern, clean and relevant to the topic, with no text overlay.
16:9 aspect ratio, ultra high resolution."""


def _require(value: str | None, message: str) -> str:
    if not value or not value.strip():
        raise GenerationError(message, status.HTTP_400_BAD_REQUEST)
    return value.strip()


class GenerationService:
    def __init__(self, gateway: AIGateway | None):
        self._gateway = gateway

    @property
    def gateway(self) -> AIGateway:
        if self._gateway is None:
            raise GenerationError("AI_GATEWAY_API_KEY is not configured")
        return self._gateway

    async def blog_content(self, title: str | None, slug: str | None = None) -> BlogContentResponse:
        title = _require(title, "Title is required")
        slug_hint = f" (URL slug: {slug})" if slug else ""
        logger.info("Generating blog content", title=title)
        content = await self.gateway.complete(
            f'Write a comprehensive blog post with the title: "{title}"{slug_hint}. '
            "Remember: Use ONLY plain text, no HTML tags.",
            system_prompt=BLOG_SYSTEM_PROMPT,
        )
        return BlogContentResponse(content=content.strip())

    async def web_results(self, request: WebResultsRequest) -> WebResultsResponse:
        search_text = _require(request.search_text, "Search text is required")
        count = request.count
        logger.info("Generating web results", search_text=search_text, count=count)
        content = await self.gateway.complete(
            f'Generate {count} search engine results for the query: "{search_text}". '
            "Return only a valid JSON array like:\n"
            '[\n  {\n    "title": "Result title here",\n    "description": "Brief description here",\n'
            '    "name": "domain.com",\n    "url": "https://domain.com/page",\n'
            '    "is_sponsored": true\n  }\n]',
            system_prompt=WEB_RESULTS_SYSTEM_PROMPT.format(count=count),
        )
        parsed = parse_json_content(content)
        if isinstance(parsed, dict):
            parsed = parsed.get("webResults") or parsed.get("results") or []
        if not isinstance(parsed, list):
            raise GenerationError("Generated web results are not a list")
        results = [GeneratedWebResult.model_validate(item) for item in parsed if isinstance(item, dict)]
        return WebResultsResponse(web_results=results)

    async def prelanding_content(self, request: PrelandingContentRequest) -> PrelandingContent:
        title = _require(request.web_result_title, "Web result title is required")
        logger.info("Generating prelanding content", title=title)
        content = await self.gateway.complete(
            "Create pre-landing page content for a web result with:\n"
            f'Title: "{title}"\n'
            f'Description: "{request.web_result_description or "No description provided"}"\n'
            f'Original URL: "{request.original_link or "Not provided"}"\n\n'
            "Return a JSON object with these fields:\n"
            "{\n"
            '  "headline": "A compelling headline (max 60 chars)",\n'
            '  "subtitle": "An engaging subtitle (max 100 chars)",\n'
            '  "description": "A persuasive description that builds anticipation (max 200 chars)",\n'
            '  "redirect_description": "Text shown before redirect, e.g. '
            "'You will be redirected to your exclusive offer...'\"\n"
            "}\n\n"
            "Return ONLY valid JSON, no markdown or explanation.",
            system_prompt=PRELANDING_SYSTEM_PROMPT,
        )
        parsed = self._expect_object(parse_json_content(content))
        parsed["main_image_url"] = await self.gateway.generate_image(
            HERO_IMAGE_PROMPT.format(kind="a landing page", subject=title)
        )
        return PrelandingContent.model_validate(parsed)

    async def offer_prelanding(self, request: OfferPrelandingRequest) -> OfferPrelandingContent:
        title = _require(request.web_result_title, "Web result title is required")
        logger.info("Generating offer prelanding", title=title)
        content = await self.gateway.complete(
            "Create pre-landing page content for a web result with:\n"
            f'Name: "{request.web_result_name or "Offer"}"\n'
            f'Title: "{title}"\n'
            f'Link: "{request.web_result_link or "Not provided"}"\n\n'
            "Return a JSON object with these fields:\n"
            "{\n"
            '  "headline": "A compelling headline that creates urgency (max 60 chars)",\n'
            '  "description": "A persuasive description that builds anticipation for the offer (max 200 chars)",\n'
            '  "email_placeholder": "Engaging email placeholder text",\n'
            '  "cta_button_text": "Action-oriented CTA button text (max 20 chars)",\n'
            '  "background_color": "A hex color code that matches the offer theme (e.g., #1a1a2e)"\n'
            "}\n\n"
            "Return ONLY valid JSON, no markdown or explanation.",
            system_prompt=OFFER_SYSTEM_PROMPT,
        )
        parsed = self._expect_object(parse_json_content(content))
        image_url = await self.gateway.generate_image(
            HERO_IMAGE_PROMPT.format(kind="an offer landing page", subject=title)
        )
        parsed["main_image_url"] = image_url or get_settings().default_hero_image_url
        return OfferPrelandingContent.model_validate(parsed)

    async def blog_image(self, blog_title: str | None) -> BlogImageResponse:
        """Generated featured image, or the title's default image when generation fails."""
        title = _require(blog_title, "Blog title is required")
        image_url = None
        if self._gateway is not None:
            image_url = await self._gateway.generate_image(BLOG_IMAGE_PROMPT.format(title=title))
        if image_url:
            return BlogImageResponse(image_url=image_url, is_default=False)
        return BlogImageResponse(image_url=default_image_for_title(title), is_default=True)

    @staticmethod
    def _expect_object(parsed: object) -> dict:
        if not isinstance(parsed, dict):
            raise GenerationError("Generated content is not a JSON object")
        return parsed
