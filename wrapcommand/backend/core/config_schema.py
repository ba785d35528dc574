"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema   → application.yaml
    DatabaseSchema      → database.yaml
    LoggingSchema       → logging.yaml
    FeaturesSchema      → features.yaml
    SecuritySchema      → security.yaml
    ObservabilitySchema → observability.yaml
    ConcurrencySchema   → concurrency.yaml
    PricingSchema       → pricing.yaml
    IntegrationsSchema  → integrations.yaml
"""

from pydantic import BaseModel, ConfigDict, model_validator


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class PaginationSchema(_StrictBase):
    default_limit: int
    max_limit: int


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    pagination: PaginationSchema


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool
    echo_pool: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema
    redact_fields: list[str]


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    api_detailed_errors: bool
    api_request_logging: bool
    public_quote_submission_enabled: bool
    quote_confirmation_email_enabled: bool
    security_cors_enforce_production: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: str
    access_token_expire_minutes: int
    refresh_token_expire_days: int
    audience: str


class SecretsValidationSchema(_StrictBase):
    jwt_secret_min_length: int
    embed_secret_min_length: int


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
    secrets_validation: SecretsValidationSchema


# =============================================================================
# observability.yaml
# =============================================================================


class HealthChecksSchema(_StrictBase):
    ready_timeout_seconds: int


class ObservabilitySchema(_StrictBase):
    health_checks: HealthChecksSchema


# =============================================================================
# concurrency.yaml
# =============================================================================


class SemaphoresSchema(_StrictBase):
    database: int
    external_api: int


class ConcurrencySchema(_StrictBase):
    semaphores: SemaphoresSchema


# =============================================================================
# pricing.yaml
# =============================================================================


class VehicleMatchSchema(_StrictBase):
    max_year_distance: int


class LaborDivisorsSchema(_StrictBase):
    sides: float
    back: float
    hood: float
    roof: float
    full: float


class LaborSchema(_StrictBase):
    default_rate_per_hour: float
    sqft_per_hour: LaborDivisorsSchema


class MarginSchema(_StrictBase):
    default_percentage: float


class MaterialSchema(_StrictBase):
    name: str
    price_per_sqft: float


class MaterialsSchema(_StrictBase):
    default: str
    catalog: dict[str, MaterialSchema]

    @model_validator(mode="after")
    def default_in_catalog(self) -> "MaterialsSchema":
        if self.default not in self.catalog:
            raise ValueError(f"default material {self.default!r} is not in catalog")
        return self


class CommercialSchema(_StrictBase):
    sqft_threshold: float
    keywords: list[str]


class PricingSchema(_StrictBase):
    vehicle_match: VehicleMatchSchema
    labor: LaborSchema
    margin: MarginSchema
    materials: MaterialsSchema
    commercial: CommercialSchema
    quote_number_prefix: str


# =============================================================================
# integrations.yaml
# =============================================================================


class RetrySchema(_StrictBase):
    max_attempts: int
    backoff_multiplier: int
    backoff_max: int


class CircuitBreakerSchema(_StrictBase):
    fail_max: int
    timeout_duration: int


class EmailSchema(_StrictBase):
    api_url: str
    from_address: str
    reply_phone: str
    timeout_seconds: int
    retry: RetrySchema
    circuit_breaker: CircuitBreakerSchema


class IntegrationsSchema(_StrictBase):
    email: EmailSchema
