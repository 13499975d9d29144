"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts.
"""

from layoffs.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a pipeline contract.

    This is called at stage boundaries to verify the preceding stage
    produced the guaranteed invariants. It is fail-fast: no recovery,
    no fallback, no silence.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    Raises
    ------
    ContractViolation
        If condition is False. This indicates a bug in pipeline logic.

    Examples
    --------
    >>> require(RANK_FIELD in df.columns, "Staging contract: missing 'row_num'")
    >>> require(not df.duplicated().any(), "Dedup contract: duplicates remain")
    """
    if not condition:
        raise ContractViolation(message)


def require_stage_input(table, expected_type: type, stage: str) -> None:
    """Reject tables handed to a stage out of pipeline order."""
    require(
        isinstance(table, expected_type),
        f"{stage} contract violated: expected {expected_type.__name__}, "
        f"got {type(table).__name__}"
    )
