#!/usr/bin/env python3
"""Configuration dataclasses for the abcanon pipeline.

This module provides configuration dataclasses that consolidate
pipeline parameters, making it easier to manage and pass configuration
throughout the application.
"""

from dataclasses import dataclass, field
from typing import Optional

from abcanon import constants


@dataclass(frozen=True)
class RulesConfig:
    """Where the canonical definitions come from.

    Attributes:
        rules_file: Name or path of the definition file.
        env_var: Environment variable naming the fallback directory.
    """

    rules_file: str = constants.DEFAULT_RULES_FILE
    env_var: str = constants.RULES_DIR_ENV


@dataclass(frozen=True)
class InputConfig:
    """Configuration for input/output operations.

    Attributes:
        input_file: Numbered sequence or structure file (None = stdin).
        output_file: Report destination (None = stdout).
        scheme: Numbering scheme of the input labels.
        heavy_chain: Heavy chain identifier for structure input.
        light_chain: Light chain identifier for structure input.
    """

    input_file: Optional[str] = None
    output_file: Optional[str] = None
    scheme: constants.NumberingScheme = constants.NumberingScheme.KABAT
    heavy_chain: Optional[str] = "H"
    light_chain: Optional[str] = "L"

    @property
    def is_structure(self) -> bool:
        return self.input_file is not None and self.input_file.lower().endswith(
            constants.STRUCTURE_EXTENSIONS
        )


@dataclass(frozen=True)
class AssignmentConfig:
    """Complete configuration for a canonical class assignment run.

    Example:
        config = AssignmentConfig(
            io=InputConfig(input_file="antibody.seq"),
            rules=RulesConfig(rules_file="chothia.dat"),
            verbose=True,
        )
    """

    io: InputConfig = field(default_factory=InputConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    verbose: bool = False
    debug: bool = False

    @classmethod
    def from_cli_args(
        cls,
        input_file: Optional[str] = None,
        output_file: Optional[str] = None,
        rules_file: str = constants.DEFAULT_RULES_FILE,
        numbering: str = "kabat",
        heavy_chain: Optional[str] = "H",
        light_chain: Optional[str] = "L",
        verbose: bool = False,
        debug: bool = False,
    ) -> "AssignmentConfig":
        """Create an AssignmentConfig from CLI arguments."""
        return cls(
            io=InputConfig(
                input_file=input_file,
                output_file=output_file,
                scheme=constants.NumberingScheme(numbering.lower()),
                heavy_chain=heavy_chain or None,
                light_chain=light_chain or None,
            ),
            rules=RulesConfig(rules_file=rules_file),
            verbose=verbose,
            debug=debug,
        )
