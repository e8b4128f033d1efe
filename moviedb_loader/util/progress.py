import sys


class ProgressReporter:
    """
    Percentage-complete indicator for a bulk load.

    Redraws in place roughly 1000 times over the whole file, and always on the
    last row.
    """

    def __init__(self, total: int, label: str = "Loading"):
        self.total = total
        self.label = label
        self.step = total // 1000 + 1

    def should_report(self, current: int) -> bool:
        return current % self.step == 0 or current == self.total

    def update(self, current: int) -> None:
        if self.total <= 0 or not self.should_report(current):
            return
        print(f"\r{self.label}: {current / self.total * 100:.2f}%", end="", file=sys.stdout, flush=True)

    def finish(self) -> None:
        print(file=sys.stdout, flush=True)
