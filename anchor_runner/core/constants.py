"""
Constants
Centralised storage for flag names, default toolchain commands, staging paths and exit codes.
"""
SKIP_BUILD_FLAG = "--skip-build"

# Anchor toolchain defaults
DEFAULT_BUILD_COMMAND = "anchor build"
DEFAULT_TEST_COMMAND = "anchor test"
DEFAULT_TEST_SKIP_BUILD_FLAG = "--skip-build"

# Staging paths, relative to the working directory at invocation time
DEFAULT_SOURCE_DIR = "../target/deploy"
DEFAULT_DEST_DIR = "target/deploy"

# Step names used in run reports
STEP_BUILD = "build"
STEP_STAGE = "stage"
STEP_TEST = "test"

STATUS_PASSED = "passed"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"

# Process exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

# Shell conventions for commands that could not be started
EXIT_NOT_EXECUTABLE = 126
EXIT_COMMAND_NOT_FOUND = 127
