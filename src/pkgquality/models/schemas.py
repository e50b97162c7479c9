"""Pydantic models for package data and evaluation results."""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    """Source code hosting platforms."""

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"


class Ecosystem(str, Enum):
    """Package ecosystems."""

    NPM = "npm"


class RepoRef(BaseModel):
    """Reference to a source code repository."""

    platform: Platform
    owner: str
    repo: str


class PackageMetadata(BaseModel):
    """What the registry declares about a package's source."""

    ecosystem: Ecosystem
    name: str
    repository_url: str | None = None


# --- GitHub Data Models ---


class GitHubRepoData(BaseModel):
    """Basic GitHub repository data."""

    owner: str
    name: str
    license: str | None = None  # SPDX id


class ContributorStats(BaseModel):
    """Contributor statistics."""

    total_contributors: int = 0
    contributions: list[int] = Field(default_factory=list)  # Sorted, largest first


class IssueStats(BaseModel):
    """Issue statistics."""

    open_issues: int = 0
    closed_issues_6mo: int = 0
    response_times_hours: list[float] = Field(default_factory=list)


class RepoFiles(BaseModel):
    """Presence of key repository files."""

    has_readme: bool = False
    readme_size_bytes: int = 0
    has_contributing: bool = False
    has_docs_dir: bool = False
    has_examples_dir: bool = False
    has_tests_dir: bool = False


class CIStatus(BaseModel):
    """CI/CD status."""

    recent_runs_pass_rate: float | None = None  # Percentage, 0-100


# --- Evaluation Models ---


def round_half_up(value: float, precision: int = 3) -> float:
    """Round the exact binary value of `value`, sending ties away from zero.

    Unlike `round`, 0.0625 becomes 0.063 rather than 0.062.
    """
    step = Decimal(1).scaleb(-precision)
    return float(Decimal(value).quantize(step, rounding=ROUND_HALF_UP))


class MetricName(str, Enum):
    """Quality metrics, valued by their output field name."""

    BUS_FACTOR = "BusFactor"
    RESPONSIVE_MAINTAINER = "ResponsiveMaintainer"
    RAMP_UP = "RampUp"
    CORRECTNESS = "Correctness"
    LICENSE = "License"


class MetricResult(BaseModel):
    """Score produced by one metric scorer for one repository."""

    score: float
    latency: float = Field(default=0.0, ge=0)  # Seconds


class EvaluationRecord(BaseModel):
    """One line of output: net score plus every metric score and latency."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(alias="URL")
    net_score: float = Field(alias="NetScore")
    net_score_latency: float = Field(alias="NetScore_Latency")
    bus_factor: float = Field(alias="BusFactor")
    bus_factor_latency: float = Field(alias="BusFactor_Latency")
    responsive_maintainer: float = Field(alias="ResponsiveMaintainer")
    responsive_maintainer_latency: float = Field(alias="ResponsiveMaintainer_Latency")
    ramp_up: float = Field(alias="RampUp")
    ramp_up_latency: float = Field(alias="RampUp_Latency")
    correctness: float = Field(alias="Correctness")
    correctness_latency: float = Field(alias="Correctness_Latency")
    license: float = Field(alias="License")
    license_latency: float = Field(alias="License_Latency")

    @classmethod
    def build(
        cls,
        url: str,
        net: MetricResult,
        metrics: dict[MetricName, MetricResult],
        precision: int = 3,
    ) -> "EvaluationRecord":
        """Assemble a record, rounding every number to `precision` places."""
        values: dict[str, str | float] = {
            "URL": url,
            "NetScore": round_half_up(net.score, precision),
            "NetScore_Latency": round_half_up(net.latency, precision),
        }
        for name in MetricName:
            result = metrics[name]
            values[name.value] = round_half_up(result.score, precision)
            values[f"{name.value}_Latency"] = round_half_up(result.latency, precision)
        return cls.model_validate(values)

    def to_json_line(self) -> str:
        """Serialize as a single compact JSON object using the output field names."""
        return self.model_dump_json(by_alias=True)
