"""Basic package tests for license-validator."""


def test_package_imports() -> None:
    """Test that the main package can be imported."""
    import license_validator

    assert license_validator.__version__ == "0.1.0"


def test_cli_imports() -> None:
    """Test that the CLI module can be imported."""
    from license_validator.cli import main

    assert main is not None


def test_exceptions_imports() -> None:
    """Test that the exceptions module can be imported."""
    from license_validator.exceptions import LicenseValidatorError

    assert issubclass(LicenseValidatorError, Exception)


def test_subpackages_import() -> None:
    """Test that all subpackages can be imported."""
    import license_validator.analysis
    import license_validator.config
    import license_validator.models
    import license_validator.output
    import license_validator.report
    import license_validator.resolvers
    import license_validator.storage

    assert license_validator.models is not None
    assert license_validator.resolvers is not None
    assert license_validator.analysis is not None
    assert license_validator.storage is not None
    assert license_validator.report is not None
    assert license_validator.output is not None
    assert license_validator.config is not None
