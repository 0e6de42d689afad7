"""Command-line interface for taskstore.

This module provides the CLI interface for managing tasks and movie tickets
using argparse. It supports the following commands:
- add: Create a new task
- list: List tasks, optionally filtered, searched and sorted
- show: Show a single task
- update: Change the title, body or status of a task
- done: Mark a task as completed
- delete: Delete a task
- count: Print the number of tasks
- clear: Delete all completed tasks
- ticket: Manage movie tickets (add, list, show, reserve, delete)
"""

import argparse
import logging
import sys
from typing import Dict, Iterable, List, Optional

from taskstore.logging_setup import setup_logging
from taskstore.models import U64_MAX, MovieTicket, Task
from taskstore.repository import TaskStore, TicketStore
from taskstore.result import Result


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="task",
        description="Persistent task and movie ticket store"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log store activity to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Add command
    add_parser = subparsers.add_parser("add", help="Add a new task")
    add_parser.add_argument("title", help="Task title")
    add_parser.add_argument("--body", default="", help="Task description")
    add_parser.add_argument("--done", action="store_true", help="Create the task as completed")

    # List command
    list_parser = subparsers.add_parser("list", help="List tasks")
    list_parser.add_argument(
        "--status",
        choices=["pending", "done"],
        help="Filter tasks by status"
    )
    list_parser.add_argument("--search", metavar="KEYWORD", help="Only tasks whose title or body contains KEYWORD")
    list_parser.add_argument("--since", type=int, metavar="NS", help="Only tasks created at or after NS")
    list_parser.add_argument("--until", type=int, metavar="NS", help="Only tasks created at or before NS")
    list_parser.add_argument(
        "--sort",
        choices=["date", "status"],
        help="Sort by creation date or by status (done first)"
    )

    show_parser = subparsers.add_parser("show", help="Show a task")
    show_parser.add_argument("id", help="Task ID")

    # Update command
    update_parser = subparsers.add_parser("update", help="Update a task")
    update_parser.add_argument("id", help="Task ID")
    update_parser.add_argument("--title", help="New title")
    update_parser.add_argument("--body", help="New description")
    update_parser.add_argument("--status", choices=["pending", "done"], help="New status")

    # Done command
    done_parser = subparsers.add_parser("done", help="Mark a task as done")
    done_parser.add_argument("id", help="Task ID")

    # Delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a task")
    delete_parser.add_argument("id", help="Task ID")

    subparsers.add_parser("count", help="Print the number of tasks")
    subparsers.add_parser("clear", help="Delete all completed tasks")

    # Ticket commands
    ticket_parser = subparsers.add_parser("ticket", help="Manage movie tickets")
    ticket_sub = ticket_parser.add_subparsers(dest="ticket_command", help="Ticket commands")

    ticket_add = ticket_sub.add_parser("add", help="Add a new ticket")
    ticket_add.add_argument("movie", help="Movie name")
    ticket_add.add_argument("seat", type=int, help="Seat number")

    ticket_list = ticket_sub.add_parser("list", help="List tickets")
    availability = ticket_list.add_mutually_exclusive_group()
    availability.add_argument("--reserved", action="store_true", help="Only reserved tickets")
    availability.add_argument("--available", action="store_true", help="Only unreserved tickets")

    for name, help_text in (("show", "Show a ticket"), ("reserve", "Reserve a ticket"), ("delete", "Delete a ticket")):
        sub = ticket_sub.add_parser(name, help=help_text)
        sub.add_argument("id", help="Ticket ID")

    return parser


def format_task(task: Task) -> str:
    status_icon = "✓" if task.status else " "
    line = f"[{status_icon}] {task.id} {task.title} ({'done' if task.status else 'pending'})"
    if task.body:
        line += f"\n    {task.body}"
    return line


def format_ticket(ticket: MovieTicket) -> str:
    state = "reserved" if ticket.reserved else "available"
    return f"{ticket.id} {ticket.movie} seat {ticket.seat} ({state})"


def report_error(result: Result) -> int:
    print(f"Error: {result.error}", file=sys.stderr)
    return 1


def _narrow(records: List[Task], matches: Iterable[Task]) -> List[Task]:
    keep = {record.id for record in matches}
    return [record for record in records if record.id in keep]


def cmd_add(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'add' command.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance

    Returns:
        Exit code (0 for success, 1 for error)
    """
    result = store.create(title=args.title, body=args.body, status=args.done)
    if result.is_err():
        return report_error(result)

    task = result.value
    print(f"Task added: {task.id} {task.title}")
    return 0


def cmd_list(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'list' command.

    Filters are combined: a task is shown only if it passes every one given.
    """
    tasks = store.sort_by(args.sort) if args.sort else store.list()

    if args.status:
        tasks = _narrow(tasks, store.filter_by_status(args.status == "done"))
    if args.search is not None:
        tasks = _narrow(tasks, store.search_by_keyword(args.search))
    if args.since is not None or args.until is not None:
        start = args.since if args.since is not None else 0
        end = args.until if args.until is not None else U64_MAX
        tasks = _narrow(tasks, store.filter_by_time_range(start, end))

    if not tasks:
        print("No tasks found.")
        return 0

    for task in tasks:
        print(format_task(task))

    return 0


def cmd_show(args: argparse.Namespace, store: TaskStore) -> int:
    result = store.get(args.id)
    if result.is_err():
        return report_error(result)

    print(format_task(result.value))
    return 0


def cmd_update(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'update' command.

    Returns:
        Exit code (0 for success, 1 for error or when no field was given)
    """
    fields: Dict[str, object] = {}
    if args.title is not None:
        fields["title"] = args.title
    if args.body is not None:
        fields["body"] = args.body
    if args.status is not None:
        fields["status"] = args.status == "done"

    if not fields:
        print("Error: Nothing to update.", file=sys.stderr)
        return 1

    result = store.update(args.id, fields)
    if result.is_err():
        return report_error(result)

    print(f"Task updated: {format_task(result.value)}")
    return 0


def cmd_done(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'done' command.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    result = store.mark_done(args.id)
    if result.is_err():
        return report_error(result)

    task = result.value
    print(f"Task {task.id} marked as done: {task.title}")
    return 0


def cmd_delete(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'delete' command.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    result = store.delete(args.id)
    if result.is_err():
        return report_error(result)

    print(f"Task {args.id} deleted.")
    return 0


def cmd_count(args: argparse.Namespace, store: TaskStore) -> int:
    print(store.count())
    return 0


def cmd_clear(args: argparse.Namespace, store: TaskStore) -> int:
    before = store.count()
    store.clear_completed()
    print(f"Cleared {before - store.count()} completed task(s).")
    return 0


def cmd_ticket(args: argparse.Namespace, store: TicketStore) -> int:
    """Handle the 'ticket' command group.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if args.ticket_command == "add":
        result = store.create(movie=args.movie, seat=args.seat)
        if result.is_err():
            return report_error(result)
        print(f"Ticket added: {format_ticket(result.value)}")
        return 0

    if args.ticket_command == "list":
        if args.reserved:
            tickets = store.filter_by_status(True)
        elif args.available:
            tickets = store.filter_by_status(False)
        else:
            tickets = store.list()
        if not tickets:
            print("No tickets found.")
        for ticket in tickets:
            print(format_ticket(ticket))
        return 0

    actions = {
        "show": (store.get, "{}"),
        "reserve": (store.reserve, "Ticket reserved: {}"),
        "delete": (store.delete, "Ticket deleted: {}"),
    }
    action = actions.get(args.ticket_command)
    if action is None:
        print("Error: Missing ticket command.", file=sys.stderr)
        return 1

    operation, template = action
    result = operation(args.id)
    if result.is_err():
        return report_error(result)
    print(template.format(format_ticket(result.value)))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:]

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "ticket":
        return cmd_ticket(args, TicketStore())

    store = TaskStore()

    # Dispatch to command handlers
    commands = {
        "add": cmd_add,
        "list": cmd_list,
        "show": cmd_show,
        "update": cmd_update,
        "done": cmd_done,
        "delete": cmd_delete,
        "count": cmd_count,
        "clear": cmd_clear,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Error: Unknown command '{args.command}'", file=sys.stderr)
        return 1

    return handler(args, store)


if __name__ == "__main__":
    sys.exit(main())
