"""Source configuration file (sources.json) schema and loader"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from savings_gateway.domain.exceptions import SourceConfigError


class RequestSpec(BaseModel):
    """How a source's payload is requested"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    method: str = "GET"
    body: Optional[str] = None
    content_type: Optional[str] = Field(None, alias="contentType")
    json_response: bool = Field(False, alias="json")


class SourceConfig(BaseModel):
    """One configured rate source"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    name: str
    type: str = ""
    product_name: str = Field("", alias="productName")
    website: Optional[str] = None
    url: str
    api_url: Optional[str] = Field(None, alias="apiUrl")
    enabled: bool = True
    adapter: str
    request: RequestSpec = Field(default_factory=RequestSpec)
    options: Dict[str, Any] = Field(default_factory=dict)

    @property
    def fetch_url(self) -> str:
        return self.api_url or self.url


class SourcesFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    default_withholding_rate_percent: float = Field(
        17.5,
        validation_alias=AliasChoices("defaultWithholdingRatePercent", "defaultWithholdingRate"),
    )
    banks: List[SourceConfig] = Field(default_factory=list)

    @property
    def enabled_sources(self) -> List[SourceConfig]:
        return [source for source in self.banks if source.enabled]


def load_sources(path: str | Path) -> SourcesFile:
    """
    Raises:
        SourceConfigError: file missing, not JSON, or wrong shape
    """
    sources_path = Path(path)
    try:
        return SourcesFile.model_validate(json.loads(sources_path.read_text(encoding="utf-8")))
    except FileNotFoundError as e:
        raise SourceConfigError(f"Source configuration not found: {sources_path}") from e
    except ValidationError as e:
        raise SourceConfigError(f"Invalid source configuration: {e}") from e
    except ValueError as e:
        raise SourceConfigError(f"Source configuration is not valid JSON: {e}") from e
