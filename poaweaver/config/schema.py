"""
PoaWeaver v0.1.0

Configuration schema for PoaWeaver.

Defines all available configuration parameters with defaults and validation.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
from typing import Dict, Any, Optional, List, Union
from pathlib import Path
import yaml

from ..utils.sequence_utils import DEFAULT_ALPHABET


class ConfigValidationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


# IUPAC nucleotide codes (upper and lower case)
DNA_ALPHABET = "ACGTUNRYSWKMBDHVacgtunryswkmbdhv"

# Amino acids plus ambiguity codes and stop
PROTEIN_ALPHABET = "ACDEFGHIKLMNPQRSTVWYBJOUXZ*"


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Alignment Scoring
    # ========================================================================
    'scoring': {
        'match': 2,  # Bonus for identical residues
        'mismatch': 4,  # Penalty for a substitution
        'gap_open': 8,  # Penalty for the first gapped position
        'gap_extend': 2,  # Penalty for every further gapped position
    },

    # ========================================================================
    # Sequence Alphabet
    # ========================================================================
    'alphabet': {
        'symbols': None,  # None = ASCII letters and '*'
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'gap_char': '-',
        'sequence_name_prefix': 'seq_',  # Sequences are named <prefix><index>
        'fasta_line_width': 0,  # 0 = no wrapping
    },

    # ========================================================================
    # Logging
    # ========================================================================
    'logging': {
        'configure': False,  # Leave logging to the host application by default
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'log_file': None,
    },
}

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config_path does not exist
        ConfigValidationError: If the file is not valid YAML
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Invalid YAML in config file {config_path}: {e}"
            ) from e

        if user_config:
            if not isinstance(user_config, dict):
                raise ConfigValidationError(
                    f"Config file {config_path} must contain a mapping"
                )
            # Deep merge user config into defaults
            config = _deep_merge(config, user_config)

    return config


def merge_with_defaults(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Fill a partial configuration dictionary with default values.

    Sections and keys missing from ``config`` are taken from
    DEFAULT_CONFIG; the argument itself is not modified.
    """
    merged = copy.deepcopy(DEFAULT_CONFIG)
    if config:
        merged = _deep_merge(merged, copy.deepcopy(config))
    return merged


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Union[str, Path], template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'dna', 'protein')
    """
    if template not in ('default', 'dna', 'protein'):
        raise ValueError(f"Unknown template: {template}")

    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'dna':
        config['alphabet']['symbols'] = DNA_ALPHABET

    elif template == 'protein':
        config['alphabet']['symbols'] = PROTEIN_ALPHABET
        config['scoring']['mismatch'] = 2
        config['scoring']['gap_open'] = 10
        config['scoring']['gap_extend'] = 1

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    for section in DEFAULT_CONFIG:
        if not isinstance(config.get(section, {}), dict):
            errors.append(f"Config section '{section}' must be a mapping")
    if errors:
        return errors

    # Validate scoring
    scoring = config.get('scoring', {})
    for key in ('match', 'mismatch', 'gap_open', 'gap_extend'):
        value = scoring.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"scoring.{key} must be an integer, got {value!r}")
        elif value < 0:
            errors.append(f"scoring.{key} must be >= 0, got {value}")
    gap_open = scoring.get('gap_open')
    gap_extend = scoring.get('gap_extend')
    if isinstance(gap_open, int) and isinstance(gap_extend, int) and gap_extend > gap_open:
        errors.append(
            f"scoring.gap_extend ({gap_extend}) must not exceed scoring.gap_open ({gap_open})"
        )

    # Validate alphabet
    symbols = config.get('alphabet', {}).get('symbols')
    gap_char = config.get('output', {}).get('gap_char', '-')
    if symbols is None:
        if isinstance(gap_char, str) and len(gap_char) == 1 and gap_char in DEFAULT_ALPHABET:
            errors.append(
                f"output.gap_char {gap_char!r} is a residue of the default alphabet"
            )
    elif not isinstance(symbols, str) or not symbols:
        errors.append("alphabet.symbols must be a non-empty string or null")
    else:
        if isinstance(gap_char, str) and len(gap_char) == 1 and gap_char in symbols:
            errors.append(f"alphabet.symbols must not contain the gap character {gap_char!r}")
        if any(s.isspace() for s in symbols):
            errors.append("alphabet.symbols must not contain whitespace")

    # Validate output settings
    output = config.get('output', {})
    gap_char = output.get('gap_char', '-')
    if not isinstance(gap_char, str) or len(gap_char) != 1:
        errors.append(f"output.gap_char must be a single character, got {gap_char!r}")
    line_width = output.get('fasta_line_width', 0)
    if isinstance(line_width, bool) or not isinstance(line_width, int) or line_width < 0:
        errors.append(f"output.fasta_line_width must be a non-negative integer, got {line_width!r}")
    if not isinstance(output.get('sequence_name_prefix', 'seq_'), str):
        errors.append("output.sequence_name_prefix must be a string")

    # Validate logging
    level = config.get('logging', {}).get('level', 'INFO')
    if str(level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")

    return errors
