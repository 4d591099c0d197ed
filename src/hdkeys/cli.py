"""
hdkeys CLI - Derive BIP32 private keys from mnemonics, seeds and xprvs.
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError

from hdkeys.bip32 import ExtendedPrivKey
from hdkeys.config import LOG_LEVELS, Settings, get_settings
from hdkeys.errors import HDKeyError
from hdkeys.mnemonic import mnemonic_to_seed
from hdkeys.models import DerivedKey
from hdkeys.path import DerivationPath

app = typer.Typer(
    name="hd-keys",
    help="BIP32 hierarchical deterministic key derivation",
    add_completion=False,
)


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def _configure_logging(level: str | None, settings: Settings) -> None:
    level = (level or settings.log_level).upper()
    if level not in LOG_LEVELS:
        setup_logging()
        logger.error(f"Unknown log level: {level}. Choose from {', '.join(sorted(LOG_LEVELS))}")
        raise typer.Exit(1)
    setup_logging(level)


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(1)


def _load_seed(
    mnemonic: str | None,
    mnemonic_file: Path | None,
    passphrase: str,
    seed_hex: str | None,
) -> bytes:
    if seed_hex:
        if mnemonic or mnemonic_file:
            logger.error("Use either a mnemonic or --seed-hex, not both")
            raise typer.Exit(1)
        try:
            return bytes.fromhex(seed_hex)
        except ValueError:
            logger.error("--seed-hex is not valid hex")
            raise typer.Exit(1)

    if mnemonic_file:
        if not mnemonic_file.exists():
            logger.error(f"Mnemonic file not found: {mnemonic_file}")
            raise typer.Exit(1)
        mnemonic = mnemonic_file.read_text().strip()

    if not mnemonic:
        logger.error(
            "Seed required. Use --mnemonic, --mnemonic-file, MNEMONIC env var or --seed-hex"
        )
        raise typer.Exit(1)

    return mnemonic_to_seed(mnemonic, passphrase)


def _print_key(key: ExtendedPrivKey, path: str, show_secret: bool, json_output: bool) -> None:
    info = DerivedKey.from_key(key, path, reveal=show_secret)

    if json_output:
        typer.echo(info.model_dump_json(indent=2, exclude_none=True))
        return

    typer.echo(f"Path:         {info.path}")
    typer.echo(f"Depth:        {info.depth}")
    typer.echo(f"Child number: {info.child_number}")
    typer.echo(f"Public key:   {info.public_key}")
    if show_secret:
        typer.echo(f"Secret key:   {info.secret_key}")
        typer.echo(f"Chain code:   {info.chain_code}")


@app.command()
def derive(
    mnemonic: str | None = typer.Option(
        None, "--mnemonic", envvar="MNEMONIC", help="BIP39 mnemonic"
    ),
    mnemonic_file: Path | None = typer.Option(
        None, "--mnemonic-file", "-f", help="Path to mnemonic file"
    ),
    passphrase: str = typer.Option(
        "", "--passphrase", envvar="MNEMONIC_PASSPHRASE", help="BIP39 passphrase"
    ),
    seed_hex: str | None = typer.Option(None, "--seed-hex", help="Raw seed as hex"),
    path: str | None = typer.Option(None, "--path", "-p", help="Derivation path (m/...)"),
    show_secret: bool = typer.Option(
        False, "--show-secret", help="Also print the private key and chain code"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Derive the key at a path from a mnemonic or seed."""
    settings = _load_settings()
    _configure_logging(log_level, settings)

    seed = _load_seed(mnemonic, mnemonic_file, passphrase, seed_hex)
    path = path or settings.default_path

    try:
        derivation_path = DerivationPath.parse(path)
        with ExtendedPrivKey.derive(seed, derivation_path) as key:
            _print_key(key, str(derivation_path), show_secret, json_output)
    except HDKeyError as e:
        logger.error(f"Derivation failed: {e}")
        raise typer.Exit(1)


@app.command()
def inspect(
    xprv: str = typer.Argument(..., help="Serialized extended private key"),
    path: str = typer.Option("m", "--path", "-p", help="Path relative to the xprv"),
    lenient: bool = typer.Option(
        False, "--lenient", help="Skip checksum, version and header validation"
    ),
    show_secret: bool = typer.Option(
        False, "--show-secret", help="Also print the private key and chain code"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Parse an xprv and optionally derive a descendant from it."""
    settings = _load_settings()
    _configure_logging(log_level, settings)

    strict = settings.strict_xprv and not lenient

    try:
        derivation_path = DerivationPath.parse(path)
        with ExtendedPrivKey.from_xprv(xprv.strip(), strict=strict) as parent:
            with parent.derive_path(derivation_path) as key:
                label = f"{derivation_path} (relative to depth {parent.depth})"
                _print_key(key, label, show_secret, json_output)
    except HDKeyError as e:
        logger.error(f"Inspection failed: {e}")
        raise typer.Exit(1)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
