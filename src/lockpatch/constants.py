"""Common constants used throughout lockpatch."""

# Project files
MANIFEST_NAME = "package.json"
LOCKFILE_NAME = "package-lock.json"
NPMRC_NAME = ".npmrc"

# Scratch workspace, fixed so leftovers from an interrupted run are recognisable
WORKSPACE_DIR_NAME = ".pkg-util-temp"

# Lockfile package-path layout
NODE_MODULES_PREFIX = "node_modules/"
ROOT_PACKAGE_PATH = ""

# npm v7 introduced the `packages` keyed lockfile layout
MIN_NPM_MAJOR_VERSION = 7
DEFAULT_NPM_EXECUTABLE = "npm"

# Environment variables
ENV_NPM_EXECUTABLE = "LOCKPATCH_NPM"
ENV_MERGE_POLICY = "LOCKPATCH_MERGE_POLICY"

# Message prefixes
ERROR_PREFIX = "Error: "
WARNING_PREFIX = "Warning: "
