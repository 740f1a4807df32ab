"""Generate a local development RSA key pair for signing looper tokens.

The private key is what ``JWT_PRIVATE_KEY_PATH`` should point at; the
public key goes to the broker service so it can verify looper tokens.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

PRIVATE_KEY_NAME = "looper.private.pem"
PUBLIC_KEY_NAME = "looper.public.pem"


def generate_key_pair() -> tuple[str, str]:
    """Return a new ``(private_pem, public_pem)`` RSA-2048 key pair as strings."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


def write_key_pair(keys_dir: Path) -> bool:
    """
    Write a key pair into *keys_dir* unless both files already exist.

    Returns:
        ``True`` when new keys were written, ``False`` when skipped.

    Raises:
        SystemExit: If exactly one of the two key files exists.
    """
    private_path = keys_dir / PRIVATE_KEY_NAME
    public_path = keys_dir / PUBLIC_KEY_NAME
    private_exists = private_path.exists()
    public_exists = public_path.exists()

    if private_exists and public_exists:
        print(f"Keys already exist, skipping: {private_path} / {public_path}")
        return False

    if private_exists != public_exists:
        raise SystemExit(
            "Only one key file exists. Remove both key files and run this script again."
        )

    keys_dir.mkdir(parents=True, exist_ok=True)
    private_pem, public_pem = generate_key_pair()
    private_path.write_text(private_pem, encoding="utf-8")
    public_path.write_text(public_pem, encoding="utf-8")
    print(f"Generated: {private_path}")
    print(f"Generated: {public_path}")
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--dir",
        type=Path,
        default=Path("keys"),
        help="Directory to write the PEM files into",
    )
    args = parser.parse_args(argv)
    write_key_pair(args.dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
