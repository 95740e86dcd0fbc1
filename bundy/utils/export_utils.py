"""
Export file handling for the Bundy kiosk.

Resolves where CSV exports land (explicit path, USB stick, or ./exports)
and writes them, optionally Fernet-encrypted with a passphrase-derived key.
"""
import base64
import logging
import os
from typing import Iterable, List, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import ExportError

logger = logging.getLogger(__name__)

_USB_BASES = ['/media', '/run/media', '/mnt']
ENCRYPTED_HEADER = b"BNDYENC1"
_SALT_LENGTH = 16
_KDF_ITERATIONS = 200_000


def _iter_mounts(base: str) -> Iterable[str]:
    if not os.path.isdir(base):
        return
    for name in sorted(os.listdir(base)):
        path = os.path.join(base, name)
        if os.path.ismount(path):
            yield path
        elif os.path.isdir(path):
            for child in sorted(os.listdir(path)):
                child_path = os.path.join(path, child)
                if os.path.ismount(child_path):
                    yield child_path


def find_usb_mounts() -> List[str]:
    """Return available USB mountpoints under /media, /run/media and /mnt."""
    mounts = []
    for base in _USB_BASES:
        mounts.extend(_iter_mounts(base))
    return mounts


def get_export_directory(export_path: Optional[str] = None, prefer_usb: bool = True) -> str:
    """
    Determine where exports should be written and make sure it exists.

    Priority:
    1. `export_path` (usually BUNDY_EXPORT_PATH), user-expanded
    2. First mounted USB drive
    3. Local `exports/` directory in the working directory
    """
    if export_path:
        target = os.path.expanduser(export_path)
    else:
        usb_mounts = find_usb_mounts() if prefer_usb else []
        target = usb_mounts[0] if usb_mounts else os.path.join(os.getcwd(), 'exports')

    os.makedirs(target, exist_ok=True)
    return target


def _derive_key(passphrase: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=_KDF_ITERATIONS,
    )
    return base64.urlsafe_b64encode(kdf.derive(passphrase.encode('utf-8')))


def encrypt_bytes(data: bytes, passphrase: str) -> bytes:
    """Encrypt data; output is header + salt + Fernet token."""
    salt = os.urandom(_SALT_LENGTH)
    token = Fernet(_derive_key(passphrase, salt)).encrypt(data)
    return ENCRYPTED_HEADER + salt + token


def decrypt_bytes(payload: bytes, passphrase: str) -> bytes:
    """Reverse of encrypt_bytes. Raises ExportError on a foreign or tampered payload."""
    if not payload.startswith(ENCRYPTED_HEADER):
        raise ExportError("Not an encrypted Bundy export")
    body = payload[len(ENCRYPTED_HEADER):]
    salt, token = body[:_SALT_LENGTH], body[_SALT_LENGTH:]
    try:
        return Fernet(_derive_key(passphrase, salt)).decrypt(token)
    except InvalidToken as e:
        raise ExportError("Could not decrypt export (wrong passphrase?)") from e


def write_file(data: bytes, target_path: str, passphrase: Optional[str] = None) -> str:
    """
    Write data to target_path, encrypting it first when a passphrase is given.

    Returns:
        The path written to.
    """
    if passphrase:
        data = encrypt_bytes(data, passphrase)
    os.makedirs(os.path.dirname(target_path) or ".", exist_ok=True)
    try:
        with open(target_path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ExportError(f"Could not write export to {target_path}: {e}") from e
    logger.info(f"Export written to {target_path}{' (encrypted)' if passphrase else ''}")
    return target_path


def decrypt_file(source_path: str, target_path: str, passphrase: str) -> str:
    """Decrypt an encrypted export written by write_file into a plain file."""
    try:
        with open(source_path, "rb") as f:
            payload = f.read()
    except OSError as e:
        raise ExportError(f"Could not read export {source_path}: {e}") from e
    return write_file(decrypt_bytes(payload, passphrase), target_path)
