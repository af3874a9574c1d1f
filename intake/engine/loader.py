"""SpecLoader - loads and validates YAML form specifications."""

import yaml
from pathlib import Path
from typing import Optional
from .schema import FormSpec

FORMS_PATH = Path(__file__).resolve().parent.parent / "forms"


class SpecLoader:
    """
    Loads form specifications from YAML files.

    Validates structure using Pydantic models.
    """

    def __init__(self, base_path: Optional[Path] = None):
        """
        Initialize loader.

        Args:
            base_path: Directory holding one sub-directory per form
                       (default: the forms bundled with the package)
        """
        if base_path is None:
            base_path = FORMS_PATH
        self.base_path = Path(base_path)

    def load_form(self, form_name: str) -> FormSpec:
        """
        Load a form specification from YAML.

        Args:
            form_name: Name of form (e.g., 'vera_client')

        Returns:
            Validated FormSpec instance

        Raises:
            FileNotFoundError: If spec file doesn't exist
            ValidationError: If YAML doesn't match schema
        """
        spec_path = self.base_path / form_name / "spec.yaml"

        if not spec_path.exists():
            raise FileNotFoundError(f"Form spec not found: {spec_path}")

        with open(spec_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        return FormSpec(**data)
