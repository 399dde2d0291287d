"""Entry point for `python -m athena_cli` and `athenaquery` console script."""

from __future__ import annotations

from athena_cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
