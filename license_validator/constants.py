"""Constants for license-validator."""

# Exit codes
EXIT_SUCCESS = 0  # All licenses valid / report written
EXIT_INVALID = 1  # Invalid license(s) found
EXIT_ERROR = 2  # Run failed due to error

# Synthetic license names emitted by the validator
TEST_SCOPE_LICENSE = "test scope"
NO_LICENSE_FOUND = "no license found"

# Results store layout
DEFAULT_RESULTS_DIRECTORY = "build/licenses"
SETTINGS_FILE_NAME = "settings.properties"
RESULTS_FILE_NAME = "results.txt"
RESULTS_FORMAT_VERSION = 1
RESULTS_HEADER = f"# license-validator results v{RESULTS_FORMAT_VERSION}"

# Default report file name when a directory is given as output
REPORT_OUTPUT_NAME = "dependency-licenses-report"

# Legal disclaimer shown with reports
LEGAL_DISCLAIMER = (
    "This report lists license information for audit purposes only. "
    "It does not constitute legal advice. Consult a qualified attorney for "
    "legal guidance on license compliance."
)
