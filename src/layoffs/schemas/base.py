"""Shared pydantic base for the cleaning pipeline's config sections.

Loader, global, standardizer, reconciler, output and logging sections all
derive from ``LayoffsBaseModel``, in every layer (param, user, CLI, internal).
"""

from pydantic import BaseModel, ConfigDict


class LayoffsBaseModel(BaseModel):
    """Base model for all configuration schemas.

    A misspelled section key (``backfil_keys``) is rejected instead of being
    silently ignored; only ``UserConfig`` relaxes this for legacy keys.
    Whitespace is never stripped, because ``""`` is itself a default null
    token and date format strings are taken verbatim.
    """

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=False,
    )
