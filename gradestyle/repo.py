"""Handle on the repository being graded."""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from .errors import AnalysisError, ErrorCodes

SOURCE_SUFFIX = ".java"
UI_DESCRIPTION_SUFFIX = ".fxml"


class Repo:
    """A directory of Java sources and FXML UI descriptions."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.dir = Path(directory)
        if not self.dir.is_dir():
            raise AnalysisError(
                f"repository directory not found: {self.dir}", ErrorCodes.MISSING_REPOSITORY,
            )

    def _files(self, suffix: str) -> List[Path]:
        found = []
        for path in self.dir.rglob(f"*{suffix}"):
            rel = path.relative_to(self.dir)
            if any(part.startswith(".") for part in rel.parts[:-1]):
                continue
            if path.is_file():
                found.append(path)
        return sorted(found)

    def list_source_files(self) -> List[Path]:
        return self._files(SOURCE_SUFFIX)

    def list_ui_description_files(self) -> List[Path]:
        return self._files(UI_DESCRIPTION_SUFFIX)

    def __repr__(self) -> str:
        return f"Repo({str(self.dir)!r})"
