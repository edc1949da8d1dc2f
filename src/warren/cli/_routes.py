"""``warren routes`` — list resolved routes.

Prints PRIORITY, METHODS, PATH and FILE for every route, in the order a
dispatcher would see them.
"""

import argparse

from warren.cli._resolve import resolve_registry


def run_routes(args: argparse.Namespace) -> None:
    """Print the route table for ``args.routes_dir``."""
    registry = resolve_registry(args)
    routes = registry.get_sorted_routes()
    if not routes:
        print("No routes found.")
        return

    # Build rows: (priority, methods_str, path, file)
    rows: list[tuple[str, str, str, str]] = []
    for route in routes:
        methods_str = ", ".join(sorted(route.handlers.methods))
        rows.append((route.priority.name.lower(), methods_str, route.url_path, route.file_path))

    # Column widths
    max_priority = max(max(len(r[0]) for r in rows), 8)  # "PRIORITY" header
    max_methods = max(max(len(r[1]) for r in rows), 7)  # "METHODS" header
    max_path = max(max(len(r[2]) for r in rows), 4)  # "PATH" header

    # Print table
    fmt = f"{{:<{max_priority}}}  {{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("PRIORITY", "METHODS", "PATH", "FILE"))
    sep_len = max_priority + max_methods + max_path + 6 + max(len(r[3]) for r in rows)
    print("-" * min(sep_len, 80))
    for priority, methods_str, path, file in rows:
        print(fmt.format(priority, methods_str, path, file))
