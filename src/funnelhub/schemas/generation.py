"""Request/response bodies of the content generation functions.

Field names follow the camelCase wire format of the site front-ends; both
the camelCase alias and the snake_case name are accepted on input.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class BlogContentRequest(_CamelModel):
    title: str | None = Field(default=None, validation_alias=AliasChoices("title", "blogTitle"))
    slug: str | None = Field(default=None, validation_alias=AliasChoices("slug", "blogSlug"))


class BlogContentResponse(BaseModel):
    content: str


class WebResultsRequest(_CamelModel):
    search_text: str | None = Field(default=None, alias="searchText")
    count: int = Field(default=4, ge=1, le=20)


class GeneratedWebResult(BaseModel):
    title: str = ""
    description: str = ""
    name: str = ""
    url: str = ""
    is_sponsored: bool = False


class WebResultsResponse(_CamelModel):
    web_results: list[GeneratedWebResult] = Field(alias="webResults")


class PrelandingContentRequest(_CamelModel):
    web_result_title: str | None = Field(default=None, alias="webResultTitle")
    web_result_description: str | None = Field(default=None, alias="webResultDescription")
    original_link: str | None = Field(default=None, alias="originalLink")


class PrelandingContent(BaseModel):
    headline: str = ""
    subtitle: str = ""
    description: str = ""
    redirect_description: str = ""
    main_image_url: str | None = None


class OfferPrelandingRequest(_CamelModel):
    web_result_name: str | None = Field(default=None, alias="webResultName")
    web_result_title: str | None = Field(default=None, alias="webResultTitle")
    web_result_link: str | None = Field(default=None, alias="webResultLink")


class OfferPrelandingContent(BaseModel):
    headline: str = ""
    description: str = ""
    email_placeholder: str = "Enter your email"
    cta_button_text: str = "Get Access"
    background_color: str = "#ffffff"
    main_image_url: str | None = None


class BlogImageRequest(_CamelModel):
    blog_title: str | None = Field(default=None, validation_alias=AliasChoices("blogTitle", "title"))


class BlogImageResponse(_CamelModel):
    image_url: str = Field(alias="imageUrl")
    is_default: bool = Field(alias="isDefault")
