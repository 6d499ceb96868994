"""Reading and writing profile JSON files and their ``.info`` metadata."""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from .types import Profile, ProfileMetadata

LOGGER = logging.getLogger(__name__)

BACKUP_DIRNAME = ".backups"
INFO_SUFFIX = ".info"


def read_profile(path: Path) -> Profile:
    profile = Profile.from_json(path.read_text(encoding="utf-8"))
    LOGGER.debug("Read profile %r with %d fields from %s", profile.name, profile.field_count, path)
    return profile


def _write_text_atomic(text: str, target_path: Path) -> None:
    target_path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=target_path.parent, prefix=f".{target_path.stem}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, target_path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise


def write_profile_atomic(profile: Profile, target_path: Path) -> None:
    """Write ``profile`` so that an interrupted write never leaves a partial file.

    The JSON goes to a temporary file in the target directory (same
    filesystem) which is then renamed over the destination.
    """
    _write_text_atomic(profile.to_json(), target_path)
    LOGGER.info("Wrote profile to %s", target_path)


def info_path_for(json_path: Path) -> Path:
    return json_path.with_suffix(INFO_SUFFIX)


def write_profile_metadata_atomic(metadata: ProfileMetadata, info_path: Path) -> None:
    _write_text_atomic(metadata.to_info_string(), info_path)
    LOGGER.debug("Wrote profile metadata to %s", info_path)


def read_profile_metadata(info_path: Path) -> ProfileMetadata:
    return ProfileMetadata.from_info_string(info_path.read_text(encoding="utf-8"))


def write_profile_with_metadata(profile: Profile, json_path: Path, metadata: ProfileMetadata) -> Path:
    """Write the profile JSON, then its ``.info`` sidecar.

    Bambu Studio can still load a preset whose ``.info`` is missing, so a
    metadata failure is logged and the JSON is kept.  Returns the sidecar path.
    """
    write_profile_atomic(profile, json_path)
    info_path = info_path_for(json_path)
    try:
        write_profile_metadata_atomic(metadata, info_path)
    except OSError as exc:
        LOGGER.warning("Failed to write metadata to %s: %s. Profile JSON was written.", info_path, exc)
    return info_path


def backup_profile(profile_path: Path) -> Path:
    """Copy ``profile_path`` into a sibling ``.backups`` directory, timestamped."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    backup_dir = profile_path.parent / BACKUP_DIRNAME
    backup_dir.mkdir(parents=True, exist_ok=True)
    backup_path = backup_dir / f"{profile_path.stem}_{stamp}.json"
    shutil.copy2(profile_path, backup_path)
    LOGGER.info("Created backup at %s", backup_path)
    return backup_path


def restore_from_backup(backup_path: Path, profile_path: Path) -> None:
    write_profile_atomic(read_profile(backup_path), profile_path)
    LOGGER.info("Restored profile from %s", backup_path)


__all__ = [
    "BACKUP_DIRNAME",
    "INFO_SUFFIX",
    "backup_profile",
    "info_path_for",
    "read_profile",
    "read_profile_metadata",
    "restore_from_backup",
    "write_profile_atomic",
    "write_profile_metadata_atomic",
    "write_profile_with_metadata",
]
