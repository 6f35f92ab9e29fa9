from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml


class ConfigHelper:
    """
    A helper to find, load, and validate the checkout flow configuration file.

    It starts from a given path and traverses up the directory tree to find the
    project root, identified by the presence of the configuration file.
    It then loads this file, validates the module path, and provides easy access
    to the configuration.
    """
    CONFIG_FILENAME = "checkout_flow_config.yaml"
    DEFAULT_OUTPUT_DIR = "docs"

    def __init__(self, start_path: str | Path | None = None, config_file_name: str | None = None):
        """
        Initializes the helper and triggers the discovery and validation process.

        Args:
            start_path: The path to start searching from. Defaults to the current working directory.
            config_file_name: The name of the config file to find. Defaults to "checkout_flow_config.yaml".

        Raises:
            FileNotFoundError: If the config file or the module directory is not found.
            ValueError: If the configuration file is malformed.
        """
        if start_path is None:
            start_path = Path.cwd()
        self.start_path = Path(start_path).resolve()

        if config_file_name is None:
            config_file_name = self.CONFIG_FILENAME
        self.config_filename = config_file_name

        # Discovered paths and config
        self.project_root: Path | None = None
        self.config_path: Path | None = None
        self.config: Dict[str, Any] = {}
        self.module_dir: Path | None = None
        self.output_dir: Path | None = None

        self._find_and_load()
        self._validate_paths()

        print(f"[CONFIG] Configuration loaded from: {self.config_path}")

    def _find_and_load(self):
        """Traverse up to find and load the configuration file."""
        current_dir = self.start_path.parent if self.start_path.is_file() else self.start_path

        while True:
            config_file = current_dir / self.config_filename
            if config_file.is_file() and ".venv" not in str(current_dir):
                self.project_root = current_dir
                self.config_path = config_file
                break
            if current_dir == current_dir.parent:  # Stop at filesystem root
                break
            current_dir = current_dir.parent

        if not self.project_root or not self.config_path:
            raise FileNotFoundError(
                f"Could not find '{self.config_filename}' in any parent directory of {self.start_path}."
            )

        try:
            with open(self.config_path, 'r') as f:
                self.config = yaml.safe_load(f)
            if not isinstance(self.config, dict):
                raise ValueError("Config file is not a valid dictionary.")
        except (yaml.YAMLError, ValueError) as e:
            raise ValueError(f"Error parsing '{self.config_path}': {e}")

    def _validate_paths(self):
        """Validate the module directory and resolve the output directory."""
        module_dir_str = self.config.get("module_dir")
        if not module_dir_str:
            raise ValueError("'module_dir' is not defined in the configuration file.")
        module_dir = (self.project_root / module_dir_str).resolve()
        if not module_dir.is_dir():
            raise FileNotFoundError(f"The directory for 'module_dir' does not exist: {module_dir}")
        self.module_dir = module_dir

        # Created later by the generator, once the analysis has passed validation
        output_dir_str = self.config.get("output_dir") or self.DEFAULT_OUTPUT_DIR
        self.output_dir = (self.project_root / output_dir_str).resolve()

    def get_module_path(self) -> Path:
        """
        Returns the validated, absolute path to the module source tree.
        """
        return self.module_dir

    def get_output_path(self) -> Path:
        """
        Returns the absolute path to the output directory (may not exist yet).
        """
        return self.output_dir

    def get_repo_url(self) -> str | None:
        """
        Returns the base URL used to link observer classes to their source.

        Example: "https://github.com/mollie/magento2/tree/master"
        """
        return self.config.get('repo_url')

    def get_diagram_type(self) -> str:
        """
        Returns the diagram format for the flow map ("mermaid" or "dot").
        """
        return self.config.get('diagram_type', 'mermaid')

    def get_source_extension(self) -> str:
        return self.config.get('source_extension', '.php')

    def get_require_etc_dir(self) -> bool:
        """
        Returns whether events.xml files must sit below an "etc" directory.
        """
        return bool(self.config.get('require_etc_dir', False))

    def get_endpoint_index(self) -> bool:
        """
        Returns whether the flat endpoint catalog (index.md) should be written.
        """
        return bool(self.config.get('endpoint_index', False))

    def get_diagram_colors(self) -> Dict[str, str]:
        """
        Returns the mapping of node kinds to their fill colors.

        Returns:
            A dictionary mapping node kinds to hex color codes.
            Example: {"event": "#eef6ff", "observer": "#fef3c7", "api": "#ecfdf5"}
        """
        return self.config.get('diagram_colors', {})

    def get_diagram_shapes(self) -> Dict[str, str]:
        """
        Returns the mapping of node kinds to Graphviz node shapes (DOT diagrams only).
        """
        return self.config.get('diagram_shapes', {})

    def get_diagram_fontname(self) -> str | None:
        """
        Returns the font name to use for diagram rendering, or None if not specified.
        """
        return self.config.get('diagram_fontname')
