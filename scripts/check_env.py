"""Utility for verifying that the relay's environment configuration is intact.

The tool performs two main checks:

1. It loads ``AppSettings`` from the provided ``.env`` file and confirms the
   values the relay needs at request time are usable: the Google client id
   (optional to start the app, but every sign-in fails without it) and the
   backend and frontend URLs. Softer problems, such as the flow cookie
   falling back to the client secret, are printed as warnings.
2. It can record and verify a checksum for the ``.env`` file so unexpected
   edits (for example, a redeploy that rewrote secrets) are detected.

Example usages::

    # Validate settings and record the expected checksum.
    python -m scripts.check_env record --env-file /srv/gkp-relay/.env \
        --hash-file /srv/gkp-relay/.env.sha256

    # Run later (e.g. from cron/systemd) to alert on drift.
    python -m scripts.check_env verify --env-file /srv/gkp-relay/.env \
        --hash-file /srv/gkp-relay/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from app.core.config import AppSettings, load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5


class MissingClientIdError(Exception):
    """GOOGLE_CLIENT_ID is unset, so every authorization attempt would fail."""


def _compute_hash(env_file: Path) -> str:
    """Return the SHA256 checksum for the target environment file."""
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _load_settings(env_file: Path) -> AppSettings:
    """Load settings from ``env_file`` and enforce request-time requirements."""
    load_env_file(str(env_file))
    settings = AppSettings(_env_file=env_file)  # type: ignore[call-arg]
    if not settings.google.client_id:
        raise MissingClientIdError(
            "GOOGLE_CLIENT_ID is not set; users would see a configuration error "
            "instead of the Google consent screen."
        )
    return settings


def _collect_warnings(settings: AppSettings) -> list[str]:
    warnings: list[str] = []
    if not settings.security.session_secret:
        warnings.append(
            "SESSION_SECRET is not set; the flow cookie is keyed from the Google "
            "client secret."
        )
    if settings.frontend_base_url.scheme != "https" and settings.security.session_cookie_secure:
        warnings.append(
            "FRONTEND_BASE_URL is not https but SESSION_COOKIE_SECURE is on; "
            "browsers will drop the flow cookie."
        )
    return warnings


def _record_checksum(env_file: Path, hash_file: Path) -> int:
    """Persist the current checksum to ``hash_file``."""
    checksum = _compute_hash(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _verify_checksum(env_file: Path, hash_file: Path) -> int:
    """Compare the current checksum to the recorded baseline."""
    if not hash_file.exists():
        print(
            f"Expected checksum file {hash_file} is missing. "
            "Re-run with the 'record' command to establish a baseline.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _compute_hash(env_file)
    if expected == actual:
        print("Environment checksum OK.")
        return EXIT_OK

    print(
        "Environment checksum mismatch!\n"
        f"  expected: {expected}\n"
        f"  actual:   {actual}\n"
        "Investigate recent changes before restarting the relay.",
        file=sys.stderr,
    )
    return EXIT_CHECKSUM_ERROR


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate relay settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common_arguments(subparser: argparse.ArgumentParser, *, hash_file: bool) -> None:
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: .env in the repo root).",
        )
        if hash_file:
            subparser.add_argument(
                "--hash-file",
                required=True,
                type=Path,
                help="Location of the checksum baseline.",
            )

    add_common_arguments(
        subparsers.add_parser("record", help="Validate settings and store the checksum baseline."),
        hash_file=True,
    )
    add_common_arguments(
        subparsers.add_parser("verify", help="Validate settings and compare against the baseline."),
        hash_file=True,
    )
    add_common_arguments(
        subparsers.add_parser("check", help="Validate settings without touching checksum files."),
        hash_file=False,
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_file: Path = args.env_file
    if not env_file.exists():
        print(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    try:
        settings = _load_settings(env_file)
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    except MissingClientIdError as exc:
        print(f"Settings validation failed: {exc}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Unexpected error during validation: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    for warning in _collect_warnings(settings):
        print(f"warning: {warning}", file=sys.stderr)

    command: str = args.command
    handlers: dict[str, Callable[[], int]] = {
        "record": lambda: _record_checksum(env_file, args.hash_file),
        "verify": lambda: _verify_checksum(env_file, args.hash_file),
        "check": lambda: EXIT_OK,
    }
    return handlers[command]()


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
