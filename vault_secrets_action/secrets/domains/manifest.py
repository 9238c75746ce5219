"""Parser for the declarative secrets manifest.

A manifest is a `;`-separated list of entries::

    BoxName.SecretName | DESTINATION;
    OtherBox.Keystore | KEYSTORE | p12

The optional third field marks the secret type. Entries are yielded in the
order they are declared.
"""
import logging
import re
from typing import Callable, Iterator

from .errors import InvalidManifestEntry
from .models import SecretRequest, SecretType

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = ";"
FIELD_SEPARATOR = "|"
KEY_SEPARATOR = "."

# Destinations become environment variable and output names
DESTINATION_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

SecretTypeDetector = Callable[[str, str, str], SecretType]


def detect_secret_type(box_id: str, secret_id: str, type_marker: str) -> SecretType:
    """
    Default secret type detection based on the entry's type marker field.

    Args:
        box_id: Box the secret lives in
        secret_id: Secret name
        type_marker: Third manifest field, empty when the entry has none

    Returns:
        SecretType for the entry

    Raises:
        ValueError: If the marker names an unknown type
    """
    if not type_marker:
        return SecretType.STANDARD
    try:
        return SecretType(type_marker.lower())
    except ValueError:
        raise ValueError(f"unknown secret type '{type_marker}'")


def parse_manifest(
    manifest: str,
    detect_type: SecretTypeDetector = detect_secret_type,
) -> Iterator[SecretRequest]:
    """
    Lazily parse a secrets manifest into SecretRequest objects.

    Args:
        manifest: Raw manifest text
        detect_type: Predicate deciding the secret type of each entry

    Yields:
        SecretRequest per non-empty entry, in declared order

    Raises:
        InvalidManifestEntry: On the first malformed entry
    """
    entries = manifest.split(ENTRY_SEPARATOR)
    logger.info(f"Identified {len(entries)} entries in secrets input")

    for entry in entries:
        trimmed = entry.strip()
        if not trimmed:
            continue

        if FIELD_SEPARATOR not in trimmed:
            logger.error(f"Invalid entry format: {trimmed}")
            raise InvalidManifestEntry(trimmed, f"missing '{FIELD_SEPARATOR}' separator")

        key, destination = (part.strip() for part in trimmed.split(FIELD_SEPARATOR, 1))
        type_marker = ""
        if FIELD_SEPARATOR in destination:
            destination, type_marker = (part.strip() for part in destination.split(FIELD_SEPARATOR, 1))

        parts = key.split(KEY_SEPARATOR)
        if len(parts) != 2:
            logger.error(f"Invalid entry format: {trimmed}")
            raise InvalidManifestEntry(trimmed)

        box_id, secret_id = (part.strip() for part in parts)
        if not box_id or not secret_id:
            logger.error(f"Invalid entry format: {trimmed}")
            raise InvalidManifestEntry(trimmed, "box and secret names must not be empty")
        if not destination:
            logger.error(f"Invalid entry format: {trimmed}")
            raise InvalidManifestEntry(trimmed, "destination must not be empty")
        if not DESTINATION_PATTERN.fullmatch(destination):
            logger.error(f"Invalid entry format: {trimmed}")
            raise InvalidManifestEntry(trimmed, "destination must be an identifier")

        try:
            secret_type = detect_type(box_id, secret_id, type_marker)
        except ValueError as e:
            logger.error(f"Invalid entry format: {trimmed}")
            raise InvalidManifestEntry(trimmed, str(e)) from e

        request = SecretRequest(
            box_id=box_id,
            secret_id=secret_id,
            destination=destination,
            secret_type=secret_type,
        )
        logger.debug(
            f"Parsed entry: box={request.box_id} secret={request.secret_id} "
            f"destination={request.destination} type={request.secret_type.value}"
        )
        yield request
