"""
Central constants for the image-pull package.

This module consolidates all constants used throughout the codebase
to eliminate magic numbers and strings.
"""

# ============================================================================
# Image Store
# ============================================================================

# Default directory images are pulled into
DEFAULT_IMAGE_ROOT = "/var/lib/machines"

# Directories searched for existing machine images, in priority order
MACHINE_SEARCH_PATHS = [
    "/etc/machines",
    "/run/machines",
    "/var/lib/machines",
    "/var/lib/container",
    "/usr/local/lib/machines",
    "/usr/lib/machines",
]

# Maximum length of a local image name (HOST_NAME_MAX)
MAX_IMAGE_NAME_LENGTH = 64

# Placeholder values meaning "do not store under a local name"
NO_LOCAL_NAME_PLACEHOLDERS = ("", "-")

# Prefix for hidden temporary files and directories in the image root
TEMP_FILE_PREFIX = ".#"

# ============================================================================
# Image Kinds and Suffixes
# ============================================================================

# Suffixes stripped from tar image names (first match wins)
TAR_SUFFIXES = [".tar", ".tar.xz", ".tar.gz", ".tar.bz2", ".tgz"]

# Suffixes stripped from raw image names (stripped repeatedly)
RAW_SUFFIXES = [".xz", ".gz", ".bz2", ".raw", ".qcow2", ".img", ".bin"]

# Side-car file suffixes, relative to the image base name
SETTINGS_SUFFIX = ".nspawn"
ROOTHASH_SUFFIX = ".roothash"
ROOTHASH_SIGNATURE_SUFFIX = ".roothash.p7s"
VERITY_SUFFIX = ".verity"

# ============================================================================
# Verification
# ============================================================================

# Checksum list and detached signature published next to images
CHECKSUM_FILENAME = "SHA256SUMS"
SIGNATURE_FILENAME = "SHA256SUMS.gpg"

# Keyring used for signature verification
DEFAULT_KEYRING = "/usr/lib/image-pull/import-pubring.gpg"

# GnuPG binary invoked for signature verification
GPG_BINARY = "gpg"

# ============================================================================
# API and Network Constants
# ============================================================================

# Default timeout for image downloads (seconds)
DEFAULT_TIMEOUT = 300

# Chunk size for streaming downloads (bytes)
DOWNLOAD_CHUNK_SIZE = 64 * 1024

# URL schemes accepted for pulling
REMOTE_URL_SCHEMES = ("http", "https")

# ============================================================================
# Exit Codes
# ============================================================================

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
# Shell convention for SIGINT/SIGTERM or Ctrl+C; systemd-pull exits with EINTR instead
EXIT_USER_INTERRUPT = 130

# ============================================================================
# Default Paths
# ============================================================================

# Default configuration file path
DEFAULT_CONFIG_PATH = "~/.config/image-pull/pull.toml"

# Config file section holding pull settings
CONFIG_SECTION = "pull"


__all__ = [
    # Image Store
    "DEFAULT_IMAGE_ROOT",
    "MACHINE_SEARCH_PATHS",
    "MAX_IMAGE_NAME_LENGTH",
    "NO_LOCAL_NAME_PLACEHOLDERS",
    "TEMP_FILE_PREFIX",
    # Image Kinds
    "TAR_SUFFIXES",
    "RAW_SUFFIXES",
    "SETTINGS_SUFFIX",
    "ROOTHASH_SUFFIX",
    "ROOTHASH_SIGNATURE_SUFFIX",
    "VERITY_SUFFIX",
    # Verification
    "CHECKSUM_FILENAME",
    "SIGNATURE_FILENAME",
    "DEFAULT_KEYRING",
    "GPG_BINARY",
    # API and Network
    "DEFAULT_TIMEOUT",
    "DOWNLOAD_CHUNK_SIZE",
    "REMOTE_URL_SCHEMES",
    # Exit Codes
    "EXIT_SUCCESS",
    "EXIT_GENERAL_ERROR",
    "EXIT_USER_INTERRUPT",
    # Default Paths
    "DEFAULT_CONFIG_PATH",
    "CONFIG_SECTION",
]
