"""Entry point for running the task board via `python -m taskdesk.board`."""

from taskdesk.board import TaskBoardService
from taskdesk.board.core.settings import get_taskboard_config


def main() -> None:
    config = get_taskboard_config()
    url = config.TASKBOARD.URL

    print(f"Starting task board service at {url}...")
    print("Press Ctrl+C to stop.")

    TaskBoardService.launch(url=url)


if __name__ == "__main__":
    main()
