"""Unit tests for the configuration loader."""
from __future__ import annotations

from pathlib import Path

import pytest

from breaksync.config import ConfigLoader
from breaksync.env import CONFIG_PATH_VARIABLE, DEFAULT_CONFIG_PATH, resolve_config_path

JOB_PAYLOAD = """
name: cards-vs-clients
ruptures:
  - name: card
    width: 10
sources:
  - name: clients
    path: data/clients.jsonl
    key:
      - field: card
        width: 10
      - field: name
  - name: cards
    path: /srv/cards.csv
    format: csv
    delimiter: ";"
    key: "card:10, issuer"
    rupture: card
"""


def _write(tmp_path: Path, payload: str) -> Path:
    config_file = tmp_path / "job.yaml"
    config_file.write_text(payload)
    return config_file


def test_config_loader_parses_sources(tmp_path: Path) -> None:
    loader = ConfigLoader(path=_write(tmp_path, JOB_PAYLOAD))

    job = loader.model
    assert job.name == "cards-vs-clients"
    assert job.check_order is False
    assert [rupture.width for rupture in job.ruptures] == [10]
    clients = loader.get_source("clients")
    assert clients.format == "jsonl"
    assert [(field.field, field.width) for field in clients.key] == [("card", 10), ("name", None)]
    assert clients.path == tmp_path / "data" / "clients.jsonl"
    cards = loader.get_source("cards")
    assert [(field.field, field.width) for field in cards.key] == [("card", 10), ("issuer", None)]
    assert cards.path == Path("/srv/cards.csv")
    assert cards.delimiter == ";"
    assert cards.rupture == "card"


def test_config_loader_reads_path_from_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("BREAKSYNC_CONFIG_PATH", str(_write(tmp_path, JOB_PAYLOAD)))

    loader = ConfigLoader()

    assert loader.config_path == tmp_path / "job.yaml"


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigLoader(path=tmp_path / "absent.yaml")


def test_unknown_source_name(tmp_path: Path) -> None:
    loader = ConfigLoader(path=_write(tmp_path, JOB_PAYLOAD))
    with pytest.raises(KeyError):
        loader.get_source("ledger")


@pytest.mark.parametrize(
    "payload, message",
    [
        (
            JOB_PAYLOAD.replace("rupture: card", "rupture: issuer"),
            "unknown rupture 'issuer'",
        ),
        (
            JOB_PAYLOAD.replace("name: cards\n", "name: clients\n"),
            "Duplicate source names: clients",
        ),
        (
            JOB_PAYLOAD.replace("      - field: name", "      - field: amount\n        kind: int"),
            "requires a width",
        ),
        (
            JOB_PAYLOAD.replace('key: "card:10, issuer"', 'key: ""'),
            "At least one key field",
        ),
        (
            JOB_PAYLOAD.replace("format: csv", "format: parquet"),
            "Invalid configuration",
        ),
    ],
)
def test_invalid_configuration(tmp_path: Path, payload: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        ConfigLoader(path=_write(tmp_path, payload))


@pytest.mark.parametrize(
    "key_block",
    [
        '    key: "card, issuer"',
        "    key:\n      - field: card\n      - field: issuer",
    ],
)
def test_leading_key_field_needs_width(tmp_path: Path, key_block: str) -> None:
    payload = JOB_PAYLOAD.replace('    key: "card:10, issuer"', key_block)

    with pytest.raises(ValueError, match="Key field 'card' needs a width"):
        ConfigLoader(path=_write(tmp_path, payload))


def test_config_path_comes_from_dotenv_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv(CONFIG_PATH_VARIABLE, raising=False)
    monkeypatch.chdir(tmp_path)
    config_file = _write(tmp_path, JOB_PAYLOAD)
    (tmp_path / ".env").write_text(f"{CONFIG_PATH_VARIABLE}={config_file}\n")

    assert resolve_config_path() == config_file
    assert ConfigLoader().model.name == "cards-vs-clients"


def test_config_path_defaults_without_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv(CONFIG_PATH_VARIABLE, raising=False)
    monkeypatch.chdir(tmp_path)

    assert resolve_config_path() == DEFAULT_CONFIG_PATH
    assert resolve_config_path("jobs/nightly.yaml") == Path("jobs/nightly.yaml")
