"""
Startup Security Validation.

Checks secrets and production settings before the application accepts
traffic. If any check fails the application refuses to start with a clear
error message.

Called during FastAPI lifespan initialization.
"""

from wrapcommand.backend.core.config import get_app_config, get_settings
from wrapcommand.backend.core.logging import get_logger

logger = get_logger(__name__)


class StartupSecurityError(RuntimeError):
    """Raised when a startup security check fails."""

    pass


def run_startup_checks() -> None:
    """
    Validate security settings at startup.

    Raises:
        StartupSecurityError: If any check fails
    """
    app_config = get_app_config()
    settings = get_settings()
    environment = app_config.application.environment
    is_production = environment == "production"

    errors: list[str] = []

    _check_secret_strength(settings, app_config.security, errors)
    _check_email_delivery(settings, app_config, is_production, errors)
    _check_production_safety(app_config, is_production, errors)

    if errors:
        for error in errors:
            logger.error("Startup security check failed", extra={"check": error})
        raise StartupSecurityError(
            f"Startup blocked: {len(errors)} security check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info("Startup security checks passed", extra={"environment": environment})


def _check_secret_strength(settings, security_config, errors: list[str]) -> None:
    """Validate that secrets meet minimum length requirements."""
    validation = security_config.secrets_validation

    for name, value, minimum in (
        ("JWT_SECRET", settings.jwt_secret, validation.jwt_secret_min_length),
        ("EMBED_SECRET", settings.embed_secret, validation.embed_secret_min_length),
    ):
        if len(value) < minimum:
            errors.append(f"{name} is {len(value)} chars, minimum is {minimum}")


def _check_email_delivery(settings, app_config, is_production: bool, errors: list[str]) -> None:
    """Confirmation emails need an API key; outside production a missing key only warns."""
    if not app_config.features.quote_confirmation_email_enabled or settings.resend_api_key:
        return
    message = "quote_confirmation_email_enabled is true but RESEND_API_KEY is empty"
    if is_production:
        errors.append(message)
    else:
        logger.warning(message)


def _check_production_safety(app_config, is_production: bool, errors: list[str]) -> None:
    """Validate production environment safety constraints."""
    if not is_production:
        return

    app = app_config.application
    if app.debug:
        errors.append("debug is true in production environment")

    if app_config.features.api_detailed_errors:
        errors.append("api_detailed_errors is true in production environment")

    if app.docs_enabled:
        errors.append("docs_enabled is true in production environment")

    if app_config.features.security_cors_enforce_production:
        localhost_origins = [o for o in app.cors.origins if "localhost" in o]
        if localhost_origins:
            errors.append(
                f"CORS origins contain localhost in production: {localhost_origins}"
            )
