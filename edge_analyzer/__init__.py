"""Edge analyzer - diagnostics and cursor context for Edge templates."""

__all__ = ["main"]


def main():
    """Main entry point - lazy import to avoid eager dependency loading."""
    from .main import main as _main
    return _main()
