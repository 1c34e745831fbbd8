from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EnvironmentConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field("", alias="baseUrl")
    browser: str = "chrome"
    headless: bool = False
    explicit_wait: int = Field(30, alias="explicitWait", ge=0)
    implicit_wait: int = Field(10, alias="implicitWait", ge=0)
    page_load_timeout: int = Field(30, alias="pageLoadTimeout", gt=0)
    environment: str = "N/A"
    reports_dir: str = Field("reports", alias="reportsDir")

    @field_validator("browser")
    @classmethod
    def normalize_browser(cls, value: str) -> str:
        # Unknown names are rejected when a session is created, not here.
        return value.strip().lower()


class ApplicantProfile(BaseModel):
    first_name: str = "Jean"
    last_name: str = "Dupont"
    date_of_birth: str = "29/02/1996"
    email: str = "jean.dupont@example.com"
    phone: str = "0612345678"


class ElementDefinition(BaseModel):
    key: str
    selector_type: str = "xpath"
    selector: str
    fallback_selectors: list[str] = Field(default_factory=list)
    description: str = ""

    @field_validator("selector_type")
    @classmethod
    def validate_selector_type(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"css", "xpath"}:
            raise ValueError("selector_type must be 'css' or 'xpath'")
        return normalized


class SuiteConfig(BaseModel):
    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    applicant: ApplicantProfile = Field(default_factory=ApplicantProfile)
    elements: list[ElementDefinition] = Field(default_factory=list)

    def get_element(self, key: str) -> ElementDefinition:
        for element in self.elements:
            if element.key == key:
                return element
        raise KeyError(f"Unknown element key: {key}")
