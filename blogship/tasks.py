"""Task graph for Blogship.

Each pipeline stage is a Task with a list of tasks it depends on. Running a
target executes the target and its transitive dependencies in dependency
order and stops at the first task that fails. The failure is returned as a
RunResult carrying the failing task and the exit code of the tool behind it.

Key objects:
- Task: A named unit of work with declared dependencies.
- TaskGraph: Registry of tasks; orders and runs targets.
- RunResult: Outcome of running a target.
- default_graph: The build/serve/publish/deploy graph used by the CLI.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .generator import Generator
from .process import CommandError
from .publish import PublishResult, Publisher


class TaskGraphError(Exception):
    """Raised for unknown task names, duplicate tasks and dependency cycles."""


@dataclass(frozen=True)
class Task:
    """A named unit of work.

    Attributes:
        name: Task name, as used on the command line.
        action: Callable that returns on success and raises CommandError on
            failure. None for tasks that only group their dependencies.
        depends: Names of tasks that must complete first.
        description: One-line description for help output.
    """

    name: str
    action: Callable[[], object] | None = None
    depends: tuple[str, ...] = ()
    description: str = ""


@dataclass
class RunResult:
    """Outcome of running a target.

    Attributes:
        target: The requested task.
        completed: Names of tasks that finished successfully, in run order.
        failed: Name of the task that failed, if any.
        returncode: 0 on success, otherwise the failing command's exit code.
        error: The CommandError that stopped the run, if any.
    """

    target: str
    completed: list[str] = field(default_factory=list)
    failed: str | None = None
    returncode: int = 0
    error: CommandError | None = None

    @property
    def ok(self) -> bool:
        return self.failed is None


class TaskGraph:
    """Registry of tasks that runs targets in dependency order."""

    def __init__(self, tasks: Sequence[Task] = ()):
        self._tasks: dict[str, Task] = {}
        for task in tasks:
            self.add(task)

    def __getitem__(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise TaskGraphError(f"Unknown task: {name}") from None

    def add(self, task: Task) -> None:
        if task.name in self._tasks:
            raise TaskGraphError(f"Duplicate task: {task.name}")
        self._tasks[task.name] = task

    def order(self, target: str) -> list[Task]:
        """Return the target and its dependencies in execution order.

        Dependencies are visited depth-first in declaration order, so a task
        always appears after everything it depends on and each task appears
        once.

        Raises:
            TaskGraphError: If a task is unknown or the dependencies form a cycle.
        """
        ordered: list[Task] = []
        done: set[str] = set()

        def visit(name: str, path: tuple[str, ...]) -> None:
            if name in done:
                return
            if name in path:
                cycle = " -> ".join((*path[path.index(name):], name))
                raise TaskGraphError(f"Dependency cycle: {cycle}")
            task = self[name]
            for dep in task.depends:
                visit(dep, (*path, name))
            done.add(name)
            ordered.append(task)

        visit(target, ())
        return ordered

    def run(
        self,
        target: str,
        on_start: Callable[[Task], None] | None = None,
    ) -> RunResult:
        """Run a target and its dependencies, stopping at the first failure.

        Args:
            target: Name of the task to run.
            on_start: Called with each task before its action runs.

        Returns:
            RunResult for the run. Tasks after a failed one are not started.

        Raises:
            TaskGraphError: If the target cannot be ordered.
        """
        result = RunResult(target=target)
        for task in self.order(target):
            if on_start is not None:
                on_start(task)
            if task.action is not None:
                try:
                    task.action()
                except CommandError as exc:
                    result.failed = task.name
                    result.returncode = exc.returncode
                    result.error = exc
                    return result
            result.completed.append(task.name)
        return result


def default_graph(
    generator: Generator,
    publisher: Publisher,
    serve_args: Sequence[str] = (),
    on_publish: Callable[[PublishResult], None] | None = None,
    now: datetime | None = None,
) -> TaskGraph:
    """Build the pipeline's task graph.

    Args:
        generator: Generator used by the build and serve tasks.
        publisher: Publisher used by the publish task.
        serve_args: Extra arguments for the preview server.
        on_publish: Called with the PublishResult after a successful publish.
        now: Time stamped into the commit message. Defaults to the time the
            graph is built, before any task runs.
    """
    started_at = now or datetime.now(timezone.utc)

    def serve() -> None:
        returncode = generator.serve(serve_args)
        if returncode != 0:
            settings = generator.settings
            raise CommandError([settings.generator, *settings.server_args, *serve_args], returncode)

    def publish() -> None:
        outcome = publisher.publish(now=started_at)
        if on_publish is not None:
            on_publish(outcome)

    return TaskGraph(
        [
            Task("build", generator.build, description="Regenerate the output tree"),
            Task("serve", serve, description="Run the generator's preview server"),
            Task(
                "publish",
                publish,
                depends=("build",),
                description="Commit and push the output tree",
            ),
            Task("deploy", depends=("publish",), description="Build, then publish"),
            Task("all", depends=("build",), description="Alias for build"),
        ]
    )
