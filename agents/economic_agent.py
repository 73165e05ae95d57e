from logger import log

from .base_agent import BaseAgent


class InvariantViolationError(RuntimeError):
    """A money holding was about to go negative; the step logic overspent."""

    def __init__(self, agent_id: str, holding: str, amount: int) -> None:
        self.agent_id = agent_id
        self.holding = holding
        self.amount = amount
        super().__init__(f"Attempted to set {holding} of {agent_id} to {amount}")


class EconomicAgent(BaseAgent):
    """Agent holding integer currency that must never go negative."""

    def _checked_amount(self, holding: str, amount: int) -> int:
        if amount < 0:
            error = InvariantViolationError(self.unique_id, holding, amount)
            log(str(error), level="CRITICAL")
            raise error
        return amount
