"""
ValidationOutcome model representing the result of one evaluation run (ephemeral).
"""

from pydantic import BaseModel, ConfigDict, field_validator

from value_validator.core.errors import RuleRaisedError


class ValidationOutcome(BaseModel):
    """
    Outcome of evaluating a value against a rule sequence.

    Attributes:
        passed: Overall validation status
        error: Error raised by the rule that stopped the run, if any
        failed_rule: Description of the rule that stopped the run
        rules_run: Number of rules invoked before the run settled
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    passed: bool
    error: RuleRaisedError | None = None
    failed_rule: str | None = None
    rules_run: int = 0

    @field_validator("error")
    @classmethod
    def check_passed_consistency(cls, v, info):
        """Validate that passed=True implies there is no error."""
        if info.data.get("passed") and v is not None:
            raise ValueError("passed=True but error is set")
        return v
