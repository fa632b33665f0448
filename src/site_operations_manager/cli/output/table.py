"""Table output for CLI commands."""

from __future__ import annotations

from typing import Any, Literal

from rich.table import Table as RichTable

OverflowMethod = Literal["fold", "crop", "ellipsis", "ignore"]


class Table(RichTable):
    """Rich Table with the CLI's defaults.

    Headers are bold and columns fold long values onto extra lines instead
    of truncating them, so paths and package names stay readable.
    """

    def __init__(self, *headers: Any, **kwargs: Any) -> None:
        kwargs.setdefault("header_style", "bold")
        super().__init__(*headers, **kwargs)

    def add_column(
        self,
        header: Any = "",
        footer: Any = "",
        *,
        overflow: OverflowMethod = "fold",
        **kwargs: Any,
    ) -> None:
        """Add a column, folding overflow unless told otherwise."""
        super().add_column(header, footer, overflow=overflow, **kwargs)
