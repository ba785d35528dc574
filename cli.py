#!/usr/bin/env python3
"""
WrapCommand CLI.

Primary entry point for all application operations.
Use --service to select what to run, --action to control lifecycle.

Usage:
    python cli.py --help
    python cli.py --service server --verbose
    python cli.py --service server --action stop
    python cli.py --service health --debug
    python cli.py --service seed
    python cli.py --service lookup --query "2018 Ford F-150"
"""

import asyncio
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from wrapcommand.backend.core.logging import get_logger, log_with_source, setup_logging

LONG_RUNNING_SERVICES = {"server"}


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


def _find_process_on_port(port: int) -> list[int]:
    """Find PIDs listening on a port."""
    result = subprocess.run(
        ["lsof", "-ti", f":{port}"],
        capture_output=True, text=True,
    )
    pids = result.stdout.strip().split("\n")
    return [int(p) for p in pids if p.strip()]


def _service_stop(logger, service: str, port: int) -> None:
    """Stop a running service by finding its process on the port."""
    pids = _find_process_on_port(port)
    if not pids:
        click.echo(f"No {service} running on port {port}.")
        return

    for pid in pids:
        os.kill(pid, signal.SIGINT)
        logger.info("Sent SIGINT", extra={"service": service, "pid": pid, "port": port})

    click.echo(f"{service.title()} on port {port} stopped (PID: {', '.join(str(p) for p in pids)}).")


def _service_status(logger, service: str, port: int) -> None:
    pids = _find_process_on_port(port)
    if pids:
        click.echo(f"{service.title()} is running on port {port} (PID: {', '.join(str(p) for p in pids)}).")
    else:
        click.echo(f"{service.title()} is not running on port {port}.")


def _get_service_port(port: int | None) -> int:
    if port is not None:
        return port
    from wrapcommand.backend.core.config import get_app_config
    return get_app_config().application.server.port


def _fail(logger, message: str, **fields) -> None:
    logger.error(message, extra=fields)
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice([
        "server", "health", "config", "test", "info", "migrate",
        "seed", "lookup", "create-org",
    ]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--action", "-a",
    type=click.Choice(["start", "stop", "restart", "status"]),
    default="start",
    help="Lifecycle action for long-running services (server).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.option("--host", default=None, help="Server host.")
@click.option("--port", default=None, type=int, help="Server port.")
@click.option("--reload", is_flag=True, help="Enable auto-reload (server only).")
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run.",
)
@click.option("--coverage", is_flag=True, help="Run tests with coverage.")
@click.option(
    "--migrate-action",
    type=click.Choice(["upgrade", "downgrade", "current", "history", "autogenerate"]),
    default="current",
    help="Migration action.",
)
@click.option("--revision", default="head", help="Target revision for upgrade/downgrade.")
@click.option("-m", "--message", default=None, help="Migration message (for autogenerate).")
@click.option("--year", default=None, help="Vehicle year (lookup).")
@click.option("--make", default=None, help="Vehicle make (lookup).")
@click.option("--model", default=None, help="Vehicle model (lookup).")
@click.option("--query", "-q", default=None, help="Free-text vehicle, e.g. '2020 Ford F150' (lookup).")
@click.option("--name", default=None, help="Organization name (create-org).")
@click.option("--slug", default=None, help="Organization slug (create-org).")
@click.option("--installs", is_flag=True, help="Enable installation pricing (create-org).")
def main(
    service: str,
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
    coverage: bool,
    migrate_action: str,
    revision: str,
    message: str | None,
    year: str | None,
    make: str | None,
    model: str | None,
    query: str | None,
    name: str | None,
    slug: str | None,
    installs: bool,
) -> None:
    """
    WrapCommand CLI.

    Use --service to select what to run. For the server, use --action to
    control lifecycle (start/stop/restart/status).

    \b
    Examples:
        python cli.py --service server --verbose
        python cli.py --service server --action restart --port 8099
        python cli.py --service health --debug
        python cli.py --service config
        python cli.py --service test --test-type unit --coverage
        python cli.py --service migrate --migrate-action upgrade
        python cli.py --service seed --verbose
        python cli.py --service lookup --year 2018 --make Ford --model F150
        python cli.py --service lookup --query "2021 tesla model y"
        python cli.py --service create-org --name "Wrap Shop Co" --slug wrap-shop-co
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")

    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"service": service, "action": action, "log_level": log_level})

    if service in LONG_RUNNING_SERVICES and action != "start":
        service_port = _get_service_port(port)

        if action == "stop":
            _service_stop(logger, service, service_port)
            return
        elif action == "status":
            _service_status(logger, service, service_port)
            return
        elif action == "restart":
            _service_stop(logger, service, service_port)
            time.sleep(2)

    if service == "server":
        run_server(logger, host, port, reload)
    elif service == "health":
        check_health(logger)
    elif service == "config":
        show_config(logger)
    elif service == "test":
        run_tests(logger, test_type, coverage)
    elif service == "info":
        show_info(logger)
    elif service == "migrate":
        run_migrations(logger, migrate_action, revision, message)
    elif service == "seed":
        seed_vehicles(logger)
    elif service == "lookup":
        lookup_vehicle(logger, year, make, model, query)
    elif service == "create-org":
        create_organization(logger, name, slug, installs)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI development server."""
    from wrapcommand.backend.core.config import get_app_config

    try:
        server_config = get_app_config().application.server
    except Exception as e:
        _fail(logger, "Could not load config/settings/application.yaml.", error=str(e))

    server_host = host or server_config.host
    server_port = port or server_config.port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "wrapcommand.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def check_health(logger) -> None:
    """Check application health by testing imports, configuration and reference data."""
    click.echo("Checking application health...\n")

    checks = []

    try:
        from wrapcommand.backend.core.config import get_app_config
        app_config = get_app_config()
        checks.append(("YAML configuration", True, f"App: {app_config.application.name}"))
        logger.debug("Configuration loaded", extra={"app_name": app_config.application.name})
    except Exception as e:
        checks.append(("YAML configuration", False, str(e)))
        logger.error("Configuration failed", extra={"error": str(e)})

    try:
        from wrapcommand.backend.core.config import get_settings
        get_settings()
        checks.append(("Environment settings", True, None))
    except Exception as e:
        checks.append(("Environment settings", False, str(e)))
        logger.warning("Environment settings not configured", extra={"error": str(e)})

    try:
        from wrapcommand.backend.main import get_app
        app = get_app()
        checks.append(("FastAPI application", True, f"Title: {app.title}"))
        logger.debug("FastAPI app loaded", extra={"title": app.title})
    except Exception as e:
        checks.append(("FastAPI application", False, str(e)))
        logger.error("FastAPI app failed", extra={"error": str(e)})

    try:
        from wrapcommand.backend.services.vehicle_matching import load_reference_table
        rows = load_reference_table()
        checks.append(("Vehicle reference data", True, f"{len(rows)} rows"))
    except Exception as e:
        checks.append(("Vehicle reference data", False, str(e)))
        logger.error("Reference data failed", extra={"error": str(e)})

    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for check_name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {check_name}{detail_str}")
        if not passed:
            all_passed = False

    click.echo("-" * 50)

    if all_passed:
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        click.echo("Note: Environment settings require config/.env to be configured.")
        sys.exit(1)


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    if title:
        click.echo(f"\n{title}:")
        click.echo("-" * 40)
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_section("", value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Application Configuration:")

    try:
        from dataclasses import fields

        from wrapcommand.backend.core.config import get_app_config

        app_config = get_app_config()
        for section in fields(app_config):
            _echo_section(section.name.title(), getattr(app_config, section.name).model_dump())

        logger.info("Configuration displayed successfully")

    except Exception as e:
        _fail(logger, f"Failed to load configuration: {e}")


def run_tests(logger, test_type: str, coverage: bool) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})

    cmd = [sys.executable, "-m", "pytest"]

    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")

    cmd.append("-v")

    if coverage:
        cmd.extend(["--cov=wrapcommand", "--cov-report=term-missing"])

    click.echo(f"Running: {' '.join(cmd)}\n")

    try:
        result = subprocess.run(cmd)
        sys.exit(result.returncode)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e '.[test]'")
        sys.exit(1)


def run_migrations(
    logger,
    migrate_action: str,
    revision: str,
    message: str | None,
) -> None:
    """Run database migrations using Alembic."""
    logger.info(
        "Running migrations",
        extra={"action": migrate_action, "revision": revision},
    )

    alembic_ini = PROJECT_ROOT / "wrapcommand" / "backend" / "migrations" / "alembic.ini"

    if not alembic_ini.exists():
        _fail(logger, "wrapcommand/backend/migrations/alembic.ini not found.")

    cmd = [sys.executable, "-m", "alembic", "-c", str(alembic_ini)]

    if migrate_action == "upgrade":
        cmd.extend(["upgrade", revision])
        click.echo(f"Upgrading database to revision: {revision}")
    elif migrate_action == "downgrade":
        cmd.extend(["downgrade", revision])
        click.echo(f"Downgrading database to revision: {revision}")
    elif migrate_action == "current":
        cmd.append("current")
        click.echo("Showing current database revision...")
    elif migrate_action == "history":
        cmd.extend(["history", "--verbose"])
        click.echo("Showing migration history...")
    elif migrate_action == "autogenerate":
        if not message:
            _fail(logger, "--message/-m required for autogenerate.")
        cmd.extend(["revision", "--autogenerate", "-m", message])
        click.echo(f"Generating migration: {message}")

    click.echo()

    try:
        result = subprocess.run(cmd, cwd=PROJECT_ROOT)
        if result.returncode != 0:
            logger.error("Migration failed", extra={"exit_code": result.returncode})
            sys.exit(result.returncode)
        logger.info("Migration completed successfully")
    except FileNotFoundError:
        logger.error("alembic not found. Install with: pip install alembic")
        sys.exit(1)


async def _seed_vehicles() -> tuple[int, int]:
    from wrapcommand.backend.core.database import dispose_engine, get_session_factory
    from wrapcommand.backend.services.vehicle import VehicleService

    try:
        async with get_session_factory()() as session:
            inserted, skipped = await VehicleService(session).seed_reference_table()
            await session.commit()
            return inserted, skipped
    finally:
        await dispose_engine()


def seed_vehicles(logger) -> None:
    """Load the bundled vehicle reference table into the database."""
    logger.info("Seeding vehicle dimensions")
    try:
        inserted, skipped = asyncio.run(_seed_vehicles())
    except Exception as e:
        _fail(logger, f"Seeding failed: {e}")

    log_with_source(logger, "cli", "info", "Vehicles seeded", inserted=inserted, skipped=skipped)
    click.echo(f"Vehicle dimensions seeded: {inserted} inserted, {skipped} already present.")


def lookup_vehicle(
    logger,
    year: str | None,
    make: str | None,
    model: str | None,
    query: str | None,
) -> None:
    """Match a vehicle against the bundled reference table (no database needed)."""
    from wrapcommand.backend.core.config import get_app_config
    from wrapcommand.backend.services import vehicle_matching

    rows = vehicle_matching.load_reference_table()
    max_distance = get_app_config().pricing.vehicle_match.max_year_distance

    if query:
        parsed, match = vehicle_matching.lookup_query(rows, query, max_year_distance=max_distance)
        click.echo(f"Parsed: year={parsed.year} make={parsed.make} model={parsed.model}")
    elif make and model:
        match = vehicle_matching.match_vehicle(rows, year, make, model, max_year_distance=max_distance)
    else:
        _fail(logger, "Provide --query, or --make and --model.")

    if match is None:
        click.echo(click.style("No vehicle dimensions found.", fg="yellow"))
        sys.exit(1)

    years = vehicle_matching.format_year_range(match.year_start, match.year_end) or "any year"
    click.echo(f"{match.make} {match.model} ({years}) [{match.match_type}]")
    click.echo("-" * 40)
    panels = match.sqft.panels
    click.echo(f"  sides:        {panels.sides}")
    click.echo(f"  back:         {panels.back}")
    click.echo(f"  hood:         {panels.hood}")
    click.echo(f"  roof:         {panels.roof}")
    click.echo(f"  with roof:    {match.sqft.with_roof}")
    click.echo(f"  without roof: {match.sqft.without_roof}")
    logger.debug("Lookup complete", extra={"match_type": match.match_type})


async def _create_organization(name: str, slug: str, installs: bool):
    from wrapcommand.backend.core.database import dispose_engine, get_session_factory
    from wrapcommand.backend.schemas.organization import OrganizationCreate
    from wrapcommand.backend.services.organization import OrganizationService

    try:
        async with get_session_factory()() as session:
            org = await OrganizationService(session).create_organization(
                OrganizationCreate(name=name, slug=slug, installs_enabled=installs)
            )
            await session.commit()
            return org.id
    finally:
        await dispose_engine()


def create_organization(logger, name: str | None, slug: str | None, installs: bool) -> None:
    """Create a tenant and print an access token for it."""
    if not name or not slug:
        _fail(logger, "--name and --slug are required for create-org.")

    from wrapcommand.backend.core.exceptions import ApplicationError
    from wrapcommand.backend.core.security import create_organization_token

    try:
        organization_id = asyncio.run(_create_organization(name, slug, installs))
    except ApplicationError as e:
        _fail(logger, e.message, code=e.code)

    log_with_source(logger, "cli", "info", "Organization created", organization_id=organization_id, slug=slug)
    click.echo(f"Organization created: {slug} ({organization_id})")
    click.echo("\nAccess token:")
    click.echo(create_organization_token(organization_id))


def show_info(logger) -> None:
    """Display application information."""
    try:
        from wrapcommand.backend.core.config import get_app_config
        application = get_app_config().application
    except Exception as e:
        _fail(logger, "Could not load application.yaml configuration.", error=str(e))

    click.echo(application.name)
    click.echo("=" * 40)
    click.echo(f"Version: {application.version}")
    click.echo(f"Description: {application.description}")
    click.echo(f"Environment: {application.environment}")

    click.echo()
    click.echo("Services (--service):")
    click.echo("  server         FastAPI development server")
    click.echo("  health         Check application health")
    click.echo("  config         Display configuration")
    click.echo("  test           Run test suite")
    click.echo("  migrate        Database migrations")
    click.echo("  seed           Load vehicle reference dimensions")
    click.echo("  lookup         Match a vehicle against the reference table")
    click.echo("  create-org     Create a tenant and print its token")
    click.echo("  info           Show this information")
    click.echo()
    click.echo("Lifecycle actions (--action, for the server):")
    click.echo("  start          Start the service (default)")
    click.echo("  stop           Stop a running service")
    click.echo("  restart        Stop then start")
    click.echo("  status         Check if running")
    click.echo()
    click.echo("Options:")
    click.echo("  --verbose, -v  Enable INFO level logging")
    click.echo("  --debug, -d    Enable DEBUG level logging")
    click.echo()
    click.echo("Examples:")
    click.echo("  python cli.py --service server --reload --verbose")
    click.echo("  python cli.py --service migrate --migrate-action upgrade")
    click.echo("  python cli.py --service seed")
    click.echo("  python cli.py --service lookup --query \"2019 Mercedes Sprinter\"")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
