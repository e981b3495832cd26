from pathlib import Path
from typing import Iterable, Optional

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DirectoryTree, Input, Label

WORKBOOK_SUFFIXES = {".xlsx", ".xlsm"}


class WorkbookTree(DirectoryTree):
    """Directory tree that only lists folders and Excel workbooks."""

    def filter_paths(self, paths: Iterable[Path]) -> Iterable[Path]:
        return [
            p
            for p in paths
            if not p.name.startswith(".")
            and (p.is_dir() or p.suffix.lower() in WORKBOOK_SUFFIXES)
        ]


class FilePickerModal(ModalScreen[Optional[Path]]):
    """
    Pick the workbook to import, from the tree or by typing a path.
    Returns the chosen Path, or None when cancelled.
    """

    def __init__(self, start_dir: str = ".") -> None:
        super().__init__()
        self._start_dir = start_dir

    def compose(self) -> ComposeResult:
        with Vertical(id="div-file-picker"):
            yield Label("Select an .xlsx file to import")
            yield WorkbookTree(self._start_dir, id="tree-workbooks")
            yield Input(placeholder="or type a path to the .xlsx file", id="input-path")
            with Horizontal():
                yield Button("Cancel", id="btn-cancel")
                yield Button("Import", id="btn-import", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#tree-workbooks").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(DirectoryTree.FileSelected)
    def handle_file_selected(self, event: DirectoryTree.FileSelected) -> None:
        self.query_one("#input-path", Input).value = str(event.path)

    @on(Input.Submitted, "#input-path")
    @on(Button.Pressed, "#btn-import")
    def handle_import(self) -> None:
        path_input = self.query_one("#input-path", Input)
        raw = path_input.value.strip()
        if not raw:
            path_input.add_class("-invalid")
            self.notify("Select a file first.", severity="error")
            return

        path = Path(raw).expanduser()
        if not path.is_file():
            path_input.add_class("-invalid")
            self.notify(f"{path} is not a file.", severity="error")
            return

        self.dismiss(path)

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(None)
