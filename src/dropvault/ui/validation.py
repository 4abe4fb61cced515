"""Pre-flight validation for the Streamlit UI.

No ORM, no DB; uses the API client for backend checks.
"""
from typing import List


def validate_data_dir() -> List[str]:
    """Validate data directory structure and permissions."""
    errors = []
    # Import here to avoid circular issues at module level
    from dropvault.config import settings
    data_dir = settings.data_dir

    if not data_dir.exists():
        errors.append(f"Data directory missing: {data_dir}")
        return errors

    files_dir = data_dir / "files"
    try:
        files_dir.mkdir(parents=True, exist_ok=True)
        test_file = files_dir / ".write_test"
        test_file.touch()
        test_file.unlink()
    except OSError as e:
        errors.append(f"Cannot write to files directory {files_dir}: {e}")

    return errors


def validate_backend_connection() -> List[str]:
    """Validate that the FastAPI backend is reachable."""
    errors = []
    try:
        from dropvault.ui.api_client import DropVaultClient
        client = DropVaultClient()
        client.health()
    except Exception as e:
        errors.append(f"Backend connection failed: {e}")
    return errors


def run_all_checks() -> List[str]:
    """Run all validation checks."""
    errors = []
    errors.extend(validate_data_dir())
    errors.extend(validate_backend_connection())
    return errors
