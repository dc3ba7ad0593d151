"""
normalisation.py — Per-category size of a repository
====================================================

The size of a category is the sum of its counting rule over the files of the
rule's population (see :mod:`gradestyle.categories`).  A :class:`Normaliser`
belongs to one repository and one scoring pass: every source file is scanned
at most once, and every category's size is computed at most once.

Usage::

    from gradestyle.normalisation import Normaliser
    from gradestyle.repo import Repo

    normaliser = Normaliser(Repo("student-submission"), jobs=4)
    print(normaliser.normalise(Category.METHOD_NAMES))
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Optional

from .categories import CATEGORY_PROFILES, Category, CategoryProfile, Population
from .errors import ConfigurationError, ErrorCodes
from .java_syntax import CompilationUnit, JavaSyntaxService
from .repo import Repo

_log = logging.getLogger(__name__)


class Normaliser:
    """Computes and memoises category sizes for one repository."""

    def __init__(
        self,
        repo: Repo,
        service: Optional[JavaSyntaxService] = None,
        jobs: int = 1,
        profiles: Optional[Mapping[Category, CategoryProfile]] = None,
    ) -> None:
        self.repo = repo
        self.service = service or JavaSyntaxService()
        self.jobs = max(1, jobs)
        self.profiles = CATEGORY_PROFILES if profiles is None else profiles
        self._units: Optional[List[CompilationUnit]] = None
        self._sizes: Dict[Category, int] = {}

    def units(self) -> List[CompilationUnit]:
        """Scan every source file of the repository (once)."""
        if self._units is None:
            files = self.repo.list_source_files()
            _log.info("scanning %d source file(s) under %s", len(files), self.repo.dir)
            if self.jobs > 1 and len(files) > 1:
                with ThreadPoolExecutor(max_workers=self.jobs) as pool:
                    self._units = list(pool.map(self.service.parse, files))
            else:
                self._units = [self.service.parse(f) for f in files]
        return self._units

    def normalise(self, category: Category) -> int:
        if category in self._sizes:
            return self._sizes[category]
        profile = self.profiles.get(category)
        if profile is None:
            raise ConfigurationError(
                f"no normalisation rule for category {category}", ErrorCodes.UNKNOWN_CATEGORY,
            )

        rule = profile.rule
        if rule.population is Population.UI_DESCRIPTIONS:
            size = len(self.repo.list_ui_description_files())
        else:
            size = sum(rule.count(unit) for unit in self.units())
        _log.debug("size of %s = %d (%r)", profile.display_name, size, rule)
        self._sizes[category] = size
        return size
