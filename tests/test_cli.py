"""
Tests for the hd-keys CLI.
"""

import json

import pytest
from loguru import logger
from typer.testing import CliRunner

from hdkeys.cli import app
from tests.conftest import REFERENCE_MNEMONIC, REFERENCE_SECRET
from tests.test_xprv import VECTOR1_MASTER_XPRV, XPRV_VECTORS

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "MNEMONIC",
        "MNEMONIC_PASSPHRASE",
        "HDKEYS_DEFAULT_PATH",
        "HDKEYS_STRICT_XPRV",
        "HDKEYS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    # Sinks added by the CLI point at the runner's captured stderr
    logger.remove()


class TestDerive:
    def test_default_path_with_secret(self):
        result = runner.invoke(app, ["derive", "--mnemonic", REFERENCE_MNEMONIC, "--show-secret"])

        assert result.exit_code == 0
        assert "m/44'/60'/0'/0/0" in result.output
        assert REFERENCE_SECRET.hex() in result.output

    def test_secret_hidden_by_default(self):
        result = runner.invoke(app, ["derive", "--mnemonic", REFERENCE_MNEMONIC])

        assert result.exit_code == 0
        assert "Public key:" in result.output
        assert REFERENCE_SECRET.hex() not in result.output

    def test_json_output(self):
        result = runner.invoke(
            app,
            [
                "derive",
                "--seed-hex",
                "000102030405060708090a0b0c0d0e0f",
                "--path",
                "m/0'/1",
                "--show-secret",
                "--json",
                "--log-level",
                "ERROR",
            ],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["path"] == "m/0'/1"
        assert data["depth"] == 2
        assert data["secret_key"] == (
            "3c6cb8d0f6a264c91ea8b5030fadaa8e538b020f0a387421a12de9319dc93368"
        )

    def test_mnemonic_from_env(self, monkeypatch):
        monkeypatch.setenv("MNEMONIC", REFERENCE_MNEMONIC)
        result = runner.invoke(app, ["derive", "--show-secret"])

        assert result.exit_code == 0
        assert REFERENCE_SECRET.hex() in result.output

    def test_mnemonic_file(self, tmp_path):
        mnemonic_file = tmp_path / "wallet.mnemonic"
        mnemonic_file.write_text(REFERENCE_MNEMONIC + "\n")

        result = runner.invoke(
            app, ["derive", "--mnemonic-file", str(mnemonic_file), "--show-secret"]
        )

        assert result.exit_code == 0
        assert REFERENCE_SECRET.hex() in result.output

    def test_default_path_from_settings(self, monkeypatch):
        monkeypatch.setenv("HDKEYS_DEFAULT_PATH", "m/0'")
        result = runner.invoke(
            app, ["derive", "--seed-hex", "000102030405060708090a0b0c0d0e0f", "--show-secret"]
        )

        assert result.exit_code == 0
        assert "edb2e14f9ee77d26dd93b4ecede8d16ed408ce149b6cd80b0715a2d911a0afea" in result.output

    def test_missing_seed(self):
        result = runner.invoke(app, ["derive"])
        assert result.exit_code == 1

    def test_missing_mnemonic_file(self, tmp_path):
        result = runner.invoke(app, ["derive", "--mnemonic-file", str(tmp_path / "missing")])
        assert result.exit_code == 1

    def test_invalid_seed_hex(self):
        result = runner.invoke(app, ["derive", "--seed-hex", "zz"])
        assert result.exit_code == 1

    def test_invalid_path(self):
        result = runner.invoke(
            app, ["derive", "--mnemonic", REFERENCE_MNEMONIC, "--path", "44'/0"]
        )
        assert result.exit_code == 1

    def test_unknown_log_level(self):
        result = runner.invoke(
            app, ["derive", "--mnemonic", REFERENCE_MNEMONIC, "--log-level", "loud"]
        )

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert REFERENCE_SECRET.hex() not in result.output

    def test_log_level_case_insensitive(self):
        result = runner.invoke(
            app, ["derive", "--mnemonic", REFERENCE_MNEMONIC, "--log-level", "debug"]
        )
        assert result.exit_code == 0


class TestInspect:
    def test_inspect_master(self):
        result = runner.invoke(app, ["inspect", VECTOR1_MASTER_XPRV, "--show-secret"])

        assert result.exit_code == 0
        assert "e8f32e723decf4051aefac8e2c93c9c5b214313817cdb01a1494b917c8436b35" in result.output
        assert "Depth:        0" in result.output

    def test_inspect_relative_path(self):
        result = runner.invoke(
            app, ["inspect", VECTOR1_MASTER_XPRV, "--path", "m/0'", "--show-secret"]
        )

        assert result.exit_code == 0
        assert "edb2e14f9ee77d26dd93b4ecede8d16ed408ce149b6cd80b0715a2d911a0afea" in result.output
        assert "Depth:        1" in result.output

    def test_relative_path_labelled_with_parent_depth(self):
        result = runner.invoke(app, ["inspect", XPRV_VECTORS[1][2], "--path", "m/1"])

        assert result.exit_code == 0
        assert "m/1 (relative to depth 1)" in result.output
        assert "Depth:        2" in result.output

    def test_inspect_unknown_log_level(self):
        result = runner.invoke(app, ["inspect", VECTOR1_MASTER_XPRV, "--log-level", "loud"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_inspect_invalid(self):
        result = runner.invoke(app, ["inspect", "xprv1234"])
        assert result.exit_code == 1

    def test_lenient_accepts_bad_checksum(self):
        broken = VECTOR1_MASTER_XPRV[:-1] + ("j" if VECTOR1_MASTER_XPRV[-1] != "j" else "k")

        strict = runner.invoke(app, ["inspect", broken])
        lenient = runner.invoke(app, ["inspect", broken, "--lenient"])

        assert strict.exit_code == 1
        assert lenient.exit_code == 0
