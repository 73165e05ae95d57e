class BaseAgent:
    def __init__(self, unique_id: str) -> None:
        self.unique_id = unique_id

    def step(self, state) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not implement step()")
