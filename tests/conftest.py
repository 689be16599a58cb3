"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path
from shutil import copy2

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from payetax.backend.app import create_app  # noqa: E402
from payetax.backend.config import year_config  # noqa: E402
from payetax.backend.config.year_config import RuleSet  # noqa: E402


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def simple_rules() -> RuleSet:
    """Three-band rule set with a flat 200,000 allowance and no default contributions."""

    return RuleSet.model_validate(
        {
            "year": 2025,
            "notes": "Test rules",
            "tax_brackets": [
                {"upper": 300_000, "rate": 0.07},
                {"upper": 600_000, "rate": 0.11},
                {"rate": 0.15},
            ],
            "consolidated_relief": {"flat_amount": 200_000},
        }
    )


@pytest.fixture()
def illustrative_rules() -> RuleSet:
    """Six-band PAYE schedule with the max(200k, 1%) + 20% allowance."""

    return RuleSet.model_validate(
        {
            "year": 2025,
            "tax_brackets": [
                {"upper": 300_000, "rate": 0.07},
                {"upper": 600_000, "rate": 0.11},
                {"upper": 1_100_000, "rate": 0.15},
                {"upper": 1_600_000, "rate": 0.19},
                {"upper": 3_200_000, "rate": 0.21},
                {"rate": 0.24},
            ],
            "consolidated_relief": {
                "flat_amount": 200_000,
                "percent_of_gross": 0.01,
                "additional_percent_of_gross": 0.20,
            },
        }
    )


@pytest.fixture()
def isolated_config_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Return a temporary configuration directory patched into ``year_config``."""

    original_directory = year_config.CONFIG_DIRECTORY
    for filename in ("2025.yaml", "2026.yaml"):
        copy2(original_directory / filename, tmp_path / filename)

    manifest_path = tmp_path / "manifest.yaml"
    copy2(original_directory / "manifest.yaml", manifest_path)

    monkeypatch.setattr(year_config, "CONFIG_DIRECTORY", tmp_path)
    monkeypatch.setattr(year_config, "MANIFEST_FILE", manifest_path)
    year_config.load_rule_set.cache_clear()
    year_config.load_manifest.cache_clear()

    yield tmp_path

    year_config.load_rule_set.cache_clear()
    year_config.load_manifest.cache_clear()
