import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "unit", "integration"]

# Install the project with its test extra
COMMON_DEPS = ["-e", ".[test]"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "DATABASE_URL",
    "SECRET_KEY",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
    "SHEETS_GATEWAY_URL",
    "LOG_LEVEL",
]


def _set_env(session):
    """
    Propagate configuration into the session.

    The gateway URL is only passed through when explicitly set; tests stub
    the gateway transport and never reach a real spreadsheet.
    """
    session.env["PYTHONPATH"] = str(Path.cwd())
    session.env.setdefault("ENVIRONMENT", "development")
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "eventsync/", "tests/")
    session.run("black", "eventsync/", "tests/")
    session.run("flake8", "eventsync/", "tests/")
    session.run("mypy", "eventsync/")


@nox.session(name="unit")
def unit(session):
    """
    Run unit tests (services, coordinator, gateway, core helpers).
    Usage:
      nox -s unit
      nox -s unit -- tests/unit/test_services/test_sync.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/unit"]
    htmlcov_path = ".nox/htmlcov"
    session.run(
        "pytest",
        *tests,
        "-m", "unit",
        "--maxfail=1",
        "-vv",
        "--tb=short",
        "--cov=eventsync",
        "--cov-report=term-missing",
        "--cov-report=html:" + htmlcov_path,
        "--cov-report=xml",
    )


@nox.session(name="integration")
def integration(session):
    """
    Run API tests through the FastAPI TestClient.
    Usage:
      nox -s integration
      nox -s integration -- tests/integration/test_api/test_attendance_api.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/integration"]
    session.run(
        "pytest",
        *tests,
        "-m", "integration",
        "--maxfail=1",
        "-vv",
        "--tb=short",
    )
