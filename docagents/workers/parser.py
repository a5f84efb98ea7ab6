"""
Parser worker entry point.

Dependencies: docagents.workers.runner
System role: Runs the parse stage
"""

from docagents.models.task import TaskType
from docagents.workers.runner import main_for


def main() -> None:
    main_for(TaskType.PARSE, lambda deps: deps.parse_stage().handle)


if __name__ == "__main__":
    main()
