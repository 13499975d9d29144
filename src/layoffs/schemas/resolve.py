"""Resolution of the cleaning pipeline configuration.

Three layers are merged, later ones winning:

1. ParamConfig: expert defaults (rule table parameters, null tokens,
   output formats)
2. UserConfig: the CONFIG dict of a user file, flat aliases such as
   INPUT_PATH or BACKFILL_KEYS expanded into sections
3. CLIConfig: run-specific flags (--input, --base-dir, --formats,
   --strict-location-backfill)

The merged dict is validated once into the frozen InternalConfig that
every stage receives.
"""

from typing import Union, Optional
from layoffs.schemas.param import ParamConfig
from layoffs.schemas.user import UserConfig
from layoffs.schemas.cli import CLIConfig
from layoffs.schemas.internal import InternalConfig


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Deep merge config layers.

    Sections merge key by key, so a user file that only sets
    ``output.compression`` keeps the default ``output.formats``. Mappings
    inside a section merge too: extra ``industry_prefixes`` are added next
    to the default ``Crypto`` entry. Lists such as ``null_tokens`` or
    ``date_formats`` are replaced as a whole.

    Parameters
    ----------
    base : dict
        Base dictionary (lowest priority)
    *overrides : dict
        Override dictionaries (higher priority, left to right)

    Returns
    -------
    dict
        Merged dictionary

    Examples
    --------
    >>> defaults = {"output": {"formats": ["parquet"], "compression": "snappy"}}
    >>> deep_merge(defaults, {"output": {"compression": "zstd"}})
    {'output': {'formats': ['parquet'], 'compression': 'zstd'}}
    """
    result = base.copy()

    for override in overrides:
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            else:
                result[key] = value

    return result


def resolve_config(
    param_cfg: Union[dict, ParamConfig, None] = None,
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Resolve final runtime configuration from param, user, and CLI configs.

    This is the SINGLE ENTRYPOINT for configuration resolution. It validates
    and merges configs in the correct precedence order, then returns an
    immutable InternalConfig for runtime use.

    Parameters
    ----------
    param_cfg : dict or ParamConfig, optional
        Expert configuration with complete defaults. ``None`` uses ParamConfig().
    user_cfg : dict or UserConfig, optional
        User configuration with overrides.
    cli_cfg : dict or CLIConfig, optional
        Command-line overrides.

    Returns
    -------
    InternalConfig
        Fully validated, immutable runtime configuration

    Raises
    ------
    ValidationError
        If any config fails Pydantic validation

    Examples
    --------
    >>> from layoffs.schemas import resolve_config, ParamConfig, UserConfig
    >>> user = UserConfig(BACKFILL_KEYS="company,location")
    >>> config = resolve_config(ParamConfig(), user)
    >>> config.reconciler.backfill_keys
    ['company', 'location']
    """
    if param_cfg is None:
        param = ParamConfig()
    elif not isinstance(param_cfg, ParamConfig):
        param = ParamConfig.model_validate(param_cfg)
    else:
        param = param_cfg

    if user_cfg is None or (isinstance(user_cfg, dict) and not user_cfg):
        user = UserConfig()
    elif not isinstance(user_cfg, UserConfig):
        user = UserConfig.model_validate(user_cfg)
    else:
        user = user_cfg

    if cli_cfg is None or (isinstance(cli_cfg, dict) and not cli_cfg):
        cli = CLIConfig()
    elif not isinstance(cli_cfg, CLIConfig):
        cli = CLIConfig.model_validate(cli_cfg)
    else:
        cli = cli_cfg

    param_dict = param.model_dump(by_alias=True)  # Use 'global' not 'global_'
    user_overrides = user.to_internal_overrides()
    cli_overrides = cli.to_internal_overrides()

    # Deep merge: param < user < cli
    merged = deep_merge(param_dict, user_overrides, cli_overrides)

    return InternalConfig.model_validate(merged)
