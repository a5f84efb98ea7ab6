"""
Analysis worker entry point.

Dependencies: docagents.workers.runner
System role: Runs the analyze stage
"""

from docagents.models.task import TaskType
from docagents.workers.runner import main_for


def main() -> None:
    main_for(TaskType.ANALYZE, lambda deps: deps.analyze_stage().handle)


if __name__ == "__main__":
    main()
