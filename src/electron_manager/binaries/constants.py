"""Electron release endpoints and naming constants."""

# GitHub API URL structure
GITHUB_API_BASE = "https://api.github.com"
GITHUB_REPOS_PATH = "repos"
RELEASES_PATH = "releases"
LATEST_PATH = "latest"

# Electron repository constants
ELECTRON_OWNER = "electron"
ELECTRON_REPO = "electron"

# npm registry "latest" document gives the true latest release but is poorly
# documented; the GitHub releases API is the fallback.
NPM_REGISTRY_LATEST_URL = "https://registry.npmjs.org/electron/latest"
GITHUB_LATEST_RELEASE_URL = (
    f"{GITHUB_API_BASE}/{GITHUB_REPOS_PATH}/{ELECTRON_OWNER}/{ELECTRON_REPO}"
    f"/{RELEASES_PATH}/{LATEST_PATH}"
)
DOWNLOAD_BASE_URL = (
    f"https://github.com/{ELECTRON_OWNER}/{ELECTRON_REPO}/{RELEASES_PATH}/download"
)

PRIMARY_TIMEOUT = 5.0
FALLBACK_TIMEOUT = 10.0

MAX_DOWNLOAD_ATTEMPTS = 3
RETRY_DELAY = 1.0
CHUNK_SIZE = 64 * 1024
# Archive downloads have no overall deadline, only connect and stall limits
DOWNLOAD_CONNECT_TIMEOUT = 30.0
DOWNLOAD_READ_TIMEOUT = 60.0

# Install roots look like electron-28.0.0-linux-x64
INSTALL_PREFIX = "electron-"
INSTALL_SUFFIX = "64"

COMMAND_NAME = "electron"
VERSION_FLAG = "--version"
MACOS_APPLICATIONS_DIR = "/Applications"

ARCHIVE_FORMAT = "zip"

# Children must not believe they are being run as a Node host
STRIPPED_ENV_VARS = ("ATOM_SHELL_INTERNAL_RUN_AS_NODE", "ELECTRON_RUN_AS_NODE")

PLATFORM_ENV_VAR = "npm_config_platform"
INSTALL_DIR_ENV_VAR = "ELECTRON_MANAGER_INSTALL_DIR"
LOG_LEVEL_ENV_VAR = "ELECTRON_MANAGER_LOG_LEVEL"
