"""Presentation options for exported reports."""

from pydantic import field_validator

from verifyforge.models.base import Model

DEFAULT_TITLE = "VerifyForge Test Report"


class ReportConfig(Model):
    """Options controlling report branding. All fields are optional."""

    title: str = DEFAULT_TITLE
    company_name: str | None = None
    logo: str | None = None
    include_charts: bool = False
    white_label: bool = False

    @field_validator("title")
    @classmethod
    def _default_blank_title(cls, value: str) -> str:
        return value if value.strip() else DEFAULT_TITLE

    @property
    def attribution(self) -> str | None:
        """White-label line, only when white-labelling with a company name."""
        if self.white_label and self.company_name:
            return f"Powered by {self.company_name}"
        return None
