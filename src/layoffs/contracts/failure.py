"""Failure type for contract violations.

Contracts fail fast, loud, and once. All violations raise the same
exception type, allowing caller to handle pipeline bugs uniformly.
"""


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not bad input data. It means a
    stage did not produce the invariants it promised, or a stage was handed
    a table from the wrong point in the pipeline.

    Key distinction:
    - ValueError: User/config error (handled by Pydantic or the loader)
    - ContractViolation: Pipeline bug (programmer error)
    - Malformed field values: recovered locally, counted, never raised
    """
