"""Top-level package for the Curriculum Toolkit.

Provides subpackages:
- curriculum_toolkit.core – immutable hierarchy models, payload schemas and serialization
- curriculum_toolkit.selection – normalization, tri-state derivation, toggles and estimates
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"

    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("curriculum_toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 Curriculum Toolkit contributors Licensed under the Polyform Noncommercial License 1.0.0"
__all__: list[str] = ["__version__"]
