from rich.console import Console
from rich.markup import escape

# stdout может быть целевым потоком ("-"), поэтому всё служебное идёт в stderr
console = Console(stderr=True, highlight=False)


def format_bytes(num_bytes: int) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(num_bytes)
    idx = 0
    while size >= 1024 and idx < len(units) - 1:
        size /= 1024
        idx += 1
    if idx == 0:
        return f"{int(size)} {units[idx]}"
    return f"{size:.1f} {units[idx]}"


def warn(message: str) -> None:
    console.print(f"[yellow]warning:[/yellow] {escape(message)}")
